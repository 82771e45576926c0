"""
Result
------

The value of an evaluated command tree.

.. code-block:: bash

    Result
    ├── ExitStatus      # a POSIX exit status; 0 is success
    ├── SpawnedProcess  # a child that has not been waited for yet
    └── ShellExit       # terminate the shell session
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Union
import os

from forksh.io_util import EXIT_FAILURE, EXIT_SUCCESS

SIGNAL_OFFSET = 128


class Role(Enum):
    """The position of a node w.r.t. an enclosing pipe.
    """
    STANDALONE = auto()
    PIPE_LEFT = auto()
    PIPE_RIGHT = auto()


@dataclass(frozen=True)
class ExitStatus:
    code: int = EXIT_SUCCESS

    @property
    def success(self) -> bool:
        return self.code == EXIT_SUCCESS


@dataclass(frozen=True)
class SpawnedProcess:
    """A child process that is owned by the caller, which must wait for it.
    """
    pid: int


class ShellExit:
    _instance = None

    def __new__(cls):
        # singleton
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'SHELL_EXIT'


SHELL_EXIT = ShellExit()
SUCCESS = ExitStatus(EXIT_SUCCESS)
FAILURE = ExitStatus(EXIT_FAILURE)

Result = Union[ExitStatus, SpawnedProcess, ShellExit]


def translate_wait_status(status: int) -> ExitStatus:
    """Convert a status from os.waitpid to an ExitStatus.
    A child that was killed by signal N yields 128 + N.
    """
    if os.WIFEXITED(status):
        return ExitStatus(os.WEXITSTATUS(status))

    if os.WIFSIGNALED(status):
        return ExitStatus(SIGNAL_OFFSET + os.WTERMSIG(status))

    return FAILURE


def exit_code(result: Result) -> int:
    """Return a process exit code for `result`.
    """
    if isinstance(result, ExitStatus):
        return result.code

    if result is SHELL_EXIT:
        return EXIT_SUCCESS

    raise TypeError(f'Cannot convert {result} to an exit code')
