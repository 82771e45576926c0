import os
from pytest import raises

from forksh.io_util import STDERR_FILENO, STDIN_FILENO, STDOUT_FILENO
from forksh.shell.redirect import Intent, redirect, restore, save, saved_streams


def stream_ids() -> list:
    """Return the underlying targets of stdin, stdout and stderr.
    """
    ids = []
    for fd in (STDIN_FILENO, STDOUT_FILENO, STDERR_FILENO):
        stat = os.fstat(fd)
        ids.append((stat.st_dev, stat.st_ino))
    return ids


def test_redirect_truncate(tmp_path):
    f = tmp_path / 'out.txt'
    f.write_text('previous content')

    with saved_streams():
        redirect(STDOUT_FILENO, str(f), Intent.WRITE_TRUNCATE)
        os.write(STDOUT_FILENO, b'abc')

    assert f.read_text() == 'abc'


def test_redirect_append(tmp_path):
    f = tmp_path / 'out.txt'
    f.write_text('abc\n')

    with saved_streams():
        redirect(STDOUT_FILENO, str(f), Intent.APPEND)
        os.write(STDOUT_FILENO, b'def\n')

    assert f.read_text() == 'abc\ndef\n'


def test_redirect_create(tmp_path):
    for intent in (Intent.WRITE_TRUNCATE, Intent.APPEND):
        f = tmp_path / f'{intent.name}.txt'
        assert not f.exists()

        with saved_streams():
            redirect(STDERR_FILENO, str(f), intent)
            os.write(STDERR_FILENO, b'x')

        assert f.read_text() == 'x'
        # the mode is restricted by the umask
        assert f.stat().st_mode & 0o777 & ~0o644 == 0


def test_redirect_read_only(tmp_path):
    f = tmp_path / 'in.txt'
    f.write_text('abc')

    with saved_streams():
        redirect(STDIN_FILENO, str(f), Intent.READ_ONLY)
        assert os.read(STDIN_FILENO, 100) == b'abc'


def test_redirect_missing_input_is_fatal(tmp_path):
    f = tmp_path / 'missing.txt'
    before = stream_ids()

    with raises(SystemExit):
        with saved_streams():
            redirect(STDIN_FILENO, str(f), Intent.READ_ONLY)

    # reading never creates a file
    assert not f.exists()
    assert stream_ids() == before


def test_redirect_missing_directory_is_fatal(tmp_path):
    f = tmp_path / 'missing' / 'out.txt'
    before = stream_ids()

    with raises(SystemExit):
        with saved_streams():
            redirect(STDOUT_FILENO, str(f), Intent.WRITE_TRUNCATE)

    assert stream_ids() == before


def test_restore(tmp_path):
    f = tmp_path / 'out.txt'
    before = stream_ids()

    saved = save(STDOUT_FILENO)
    redirect(STDOUT_FILENO, str(f), Intent.WRITE_TRUNCATE)
    assert stream_ids() != before

    restore(STDOUT_FILENO, saved)
    assert stream_ids() == before

    # the saved copy is consumed
    with raises(OSError):
        os.fstat(saved)


def test_saved_streams_restores_after_exception(tmp_path):
    before = stream_ids()

    with raises(ValueError):
        with saved_streams():
            redirect(STDOUT_FILENO, str(tmp_path / 'a'), Intent.WRITE_TRUNCATE)
            redirect(STDERR_FILENO, str(tmp_path / 'b'), Intent.APPEND)
            raise ValueError()

    assert stream_ids() == before


def test_intent():
    assert Intent.WRITE_TRUNCATE.writes
    assert Intent.APPEND.writes
    assert not Intent.READ_ONLY.writes
