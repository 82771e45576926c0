import logging
import os

from forksh.io_util import STDERR_FILENO, STDOUT_FILENO, println_fd
from forksh.shell.result import FAILURE, SUCCESS, ExitStatus
from forksh.util import is_callable

EXIT_COMMANDS = ('exit', 'quit')


class Meta(type):
    """Look up the methods of a class by name, without needing an instance.

    .. code-block:: python

        if key in Builtins:
            Builtins[key]()
    """
    def __contains__(cls, key):
        return not key.startswith('_') and key in dir(cls) and is_callable(getattr(cls, key))

    def __getitem__(cls, key):
        if key in cls:
            return getattr(cls, key)

        if key.startswith('_'):
            raise KeyError(f'{key} is private')

        raise KeyError(f'{key} is not a builtin')


class Builtins(metaclass=Meta):
    """Commands that run inside the shell process, because they modify its state.
    Output is written to the (possibly redirected) standard file descriptors.
    """

    @staticmethod
    def cd(*args: str) -> ExitStatus:
        if not args:
            return SUCCESS

        path = args[0]
        try:
            os.chdir(path)
        except OSError as e:
            println_fd(STDERR_FILENO, e.strerror or str(e))
            return FAILURE

        logging.debug(f'Cwd: {os.getcwd()}')
        return SUCCESS

    @staticmethod
    def pwd(*_: str) -> ExitStatus:
        try:
            cwd = os.getcwd()
        except OSError as e:
            # e.g. the working directory was removed
            println_fd(STDERR_FILENO, e.strerror or str(e))
            return FAILURE

        println_fd(STDOUT_FILENO, cwd)
        return SUCCESS


def is_builtin(method: str) -> bool:
    return method in Builtins


def is_exit_command(method: str) -> bool:
    return method in EXIT_COMMANDS
