import io
import json

from forksh import cli
from forksh.shell.ast import command, sequential


def write_tree(path, data) -> str:
    path.write_text(json.dumps(data))
    return str(path)


def test_run():
    assert cli.run([command('true'), command('false')]) == 1
    assert cli.run([command('false'), command('true')]) == 0
    assert cli.run([]) == 0


def test_run_stops_at_exit(tmp_path):
    marker = tmp_path / 'marker'
    trees = [command('false'),
             sequential(command('true'), command('exit')),
             command('touch', str(marker))]

    assert cli.run(trees) == 0
    assert not marker.exists()


def test_main(tmp_path):
    out = tmp_path / 'out.txt'
    fn = write_tree(tmp_path / 'tree.json',
                    {'op': 'pipe',
                     'lhs': {'verb': 'echo', 'params': ['hello']},
                     'rhs': {'verb': 'cat', 'out': str(out)}})

    assert cli.main([fn]) == 0
    assert out.read_text() == 'hello\n'


def test_main_multiple_files(tmp_path):
    a = write_tree(tmp_path / 'a.json', [{'verb': 'true'}, {'verb': 'sh', 'params': ['-c', 'exit 3']}])
    b = write_tree(tmp_path / 'b.json', {'verb': 'sh', 'params': ['-c', 'exit 4']})

    assert cli.main([a]) == 3
    assert cli.main([a, b]) == 4


def test_main_stdin(tmp_path, monkeypatch):
    out = tmp_path / 'out.txt'
    text = json.dumps({'op': '&&',
                       'lhs': {'verb': 'true'},
                       'rhs': {'verb': 'echo', 'params': ['x'], 'out': str(out)}})
    monkeypatch.setattr('sys.stdin', io.StringIO(text))

    assert cli.main([]) == 0
    assert out.read_text() == 'x\n'


def test_main_invalid_tree(tmp_path):
    fn = write_tree(tmp_path / 'tree.json', {'op': 'never'})
    assert cli.main([fn]) == cli.EXIT_USAGE

    fn = tmp_path / 'invalid.json'
    fn.write_text('{')
    assert cli.main([str(fn)]) == cli.EXIT_USAGE


def test_main_ill_typed_tree(tmp_path):
    fn = write_tree(tmp_path / 'params.json', {'verb': 'echo', 'params': 'x'})
    assert cli.main([fn]) == cli.EXIT_USAGE

    fn = write_tree(tmp_path / 'number.json', 5)
    assert cli.main([fn]) == cli.EXIT_USAGE


def test_main_missing_file(tmp_path):
    assert cli.main([str(tmp_path / 'missing.json')]) == cli.EXIT_USAGE
