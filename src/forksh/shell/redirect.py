"""Rebind the standard streams of the current process.

All failures of the underlying OS calls are fatal, see `io_util.die`.
"""
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
import errno
import logging
import os

from forksh.io_util import STDERR_FILENO, STDIN_FILENO, STDOUT_FILENO, die, flush_std_streams

CREATE_MODE = 0o644


class Intent(Enum):
    WRITE_TRUNCATE = os.O_WRONLY | os.O_TRUNC
    APPEND = os.O_WRONLY | os.O_APPEND
    READ_ONLY = os.O_RDONLY

    @property
    def writes(self) -> bool:
        return self is not Intent.READ_ONLY


@dataclass
class SavedStreams:
    """Duplicates of stdin, stdout and stderr.
    """
    stdin: int
    stdout: int
    stderr: int

    def restore(self):
        restore(STDIN_FILENO, self.stdin)
        restore(STDOUT_FILENO, self.stdout)
        restore(STDERR_FILENO, self.stderr)


def open_target(path: str, intent: Intent) -> int:
    try:
        return os.open(path, intent.value)
    except FileNotFoundError:
        if not intent.writes:
            raise

    logging.debug(f'Create file: {path}')
    return os.open(path, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, CREATE_MODE)


def redirect(fd: int, path: str, intent: Intent):
    """Let the descriptor `fd` refer to the file `path`.
    Write intents create the file if it does not exist.
    """
    logging.debug(f'Redirect {fd} {intent.name} {path}')
    try:
        new_fd = open_target(path, intent)
    except OSError as e:
        die(f'open {path}', e)

    # buffered text belongs to the previous target
    flush_std_streams()

    duplicate(new_fd, fd)
    close(new_fd)


def restore(fd: int, saved: int):
    """Let `fd` refer to the target of `saved` and close `saved`.
    """
    flush_std_streams()
    duplicate(saved, fd)
    close(saved)


def save(fd: int) -> int:
    try:
        return os.dup(fd)
    except OSError as e:
        die('dup', e)


def save_streams() -> SavedStreams:
    return SavedStreams(save(STDIN_FILENO),
                        save(STDOUT_FILENO),
                        save(STDERR_FILENO))


@contextmanager
def saved_streams():
    """Restore stdin, stdout and stderr after the inner block.
    """
    saved = save_streams()
    try:
        yield saved
    finally:
        saved.restore()


def duplicate(fd: int, target: int):
    try:
        os.dup2(fd, target)
    except OSError as e:
        die('dup2', e)


def close(fd: int):
    try:
        os.close(fd)
    except OSError as e:
        if e.errno == errno.EINTR:
            return
        die('close', e)


def make_pipe():
    try:
        return os.pipe()
    except OSError as e:
        die('pipe', e)
