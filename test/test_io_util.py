import logging
import os
from pytest import raises

from forksh import io_util
from forksh.io_util import STDOUT_FILENO, die, println_fd, write_fd


def test_log(capsys):
    io_util.log('abc', prefix='>')

    _, err = capsys.readouterr()
    assert err == '> abc\n'


def test_die(capsys):
    with raises(SystemExit) as e:
        die('fork', OSError(11, os.strerror(11)))

    assert e.value.code == io_util.EXIT_FAILURE

    _, err = capsys.readouterr()
    assert f'fork: {os.strerror(11)}' in err


def test_write_fd(capfd):
    write_fd(STDOUT_FILENO, 'abc')
    println_fd(STDOUT_FILENO, 'd', 'e')

    out, _ = capfd.readouterr()
    assert out == 'abcd e\n'


def test_verbosity():
    parser = io_util.build_parser()
    try:
        io_util.parse(parser, ['-vv'])
        assert io_util.verbosity() == 2
        assert logging.getLogger().level == logging.INFO

        io_util.parse(parser, ['-vvvv'])
        assert logging.getLogger().level == logging.DEBUG
    finally:
        io_util.parse(parser, [])

    assert logging.getLogger().level == logging.WARNING


def test_colored_output(monkeypatch):
    monkeypatch.setattr(io_util, 'colored_output', False)
    assert io_util.warn('abc') == 'abc'
    assert io_util.bold('abc') == 'abc'
