from pytest import raises

from forksh.shell.result import FAILURE, SHELL_EXIT, SUCCESS, ExitStatus, ShellExit, SpawnedProcess, exit_code, \
    translate_wait_status


def test_exit_status():
    assert ExitStatus().success
    assert SUCCESS.success
    assert not FAILURE.success
    assert not ExitStatus(7).success


def test_shell_exit_is_a_singleton():
    assert ShellExit() is SHELL_EXIT
    assert repr(SHELL_EXIT) == 'SHELL_EXIT'


def test_translate_wait_status():
    # encoded as by waitpid(2) on Linux
    assert translate_wait_status(7 << 8) == ExitStatus(7)
    assert translate_wait_status(0) == SUCCESS
    assert translate_wait_status(9) == ExitStatus(137)


def test_exit_code():
    assert exit_code(ExitStatus(3)) == 3
    assert exit_code(SHELL_EXIT) == 0

    with raises(TypeError):
        exit_code(SpawnedProcess(1))
