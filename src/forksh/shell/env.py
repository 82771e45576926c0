"""Environment variable assignment, e.g. `VAR=value`.
The environment is process-wide: forked children receive a copy.
"""
from typing import Tuple
import logging
import os

from forksh.io_util import STDERR_FILENO, println_fd
from forksh.shell.ast.term import ASSIGNMENT, Word
from forksh.shell.result import FAILURE, SUCCESS, ExitStatus


def is_assignment(word: Word) -> bool:
    return word.is_assignment


def split_assignment(line: str) -> Tuple[str, str]:
    """Split `line` at the first assignment operator.
    """
    key, _, value = str(line).partition(ASSIGNMENT)
    return key, value


def assign(word: Word) -> ExitStatus:
    key, value = split_assignment(word)
    logging.debug(f'Set env: {key}={value}')

    try:
        os.environ[key] = value
    except (OSError, ValueError) as e:
        println_fd(STDERR_FILENO, f'{key}: {e}')
        return FAILURE

    return SUCCESS
