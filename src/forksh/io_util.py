"""Utils
- printing diagnostics
- writing to raw file descriptors
- parsing cli args
"""
from argparse import ArgumentParser, RawTextHelpFormatter
from termcolor import colored
from typing import List, Union
import argparse
import functools
import logging
import os
import sys

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

STDIN_FILENO = 0
STDOUT_FILENO = 1
STDERR_FILENO = 2

colored_output = True

parse_args: Union[argparse.Namespace, None] = None


def bold(text: str):
    if not colored_output:
        return text
    return colored(text, attrs=['bold'])


def warn(text: str):
    if not colored_output:
        return text
    return colored(text, 'yellow')


@functools.lru_cache(maxsize=1)
def verbosity():
    global parse_args
    if parse_args is not None and 'verbose' in parse_args:
        return parse_args.verbose

    if '-vvv' in sys.argv:
        return 3
    elif '-vv' in sys.argv:
        return 2
    elif '-v' in sys.argv:
        return 1

    return 0


def set_verbosity():
    verbosity.cache_clear()
    v = verbosity()

    default_verbosity_level = 30
    verbosity_level = max(default_verbosity_level - v * 10, logging.DEBUG)

    logger = logging.getLogger()
    logger.setLevel(verbosity_level)


def log(*args, file=None, prefix=None, **kwds):
    """Print to stderr
    """
    if file is None:
        # resolve lazily, because sys.stderr may be replaced at runtime
        file = sys.stderr
    if prefix is None:
        prefix = warn('···')

    print(prefix, *args, file=file, **kwds)
    file.flush()


def die(msg: str, error: OSError = None):
    """Print a diagnostic and abort the current process.

    The exception unwinds the stack, such that pending `finally` clauses still
    restore any redirected file descriptors.
    """
    if error is not None:
        msg = f'{msg}: {error.strerror or error}'

    logging.debug(f'Fatal: {msg}')
    log(bold(msg))
    sys.exit(EXIT_FAILURE)


def flush_std_streams():
    """Flush Python-level buffers of stdout and stderr.
    Required before the underlying descriptors are rebound or duplicated by a fork.
    """
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (AttributeError, ValueError):
            # detached or closed stream
            pass


def write_fd(fd: int, text: str):
    """Write `text` to the file descriptor `fd`, bypassing sys.stdout.
    """
    data = text.encode()
    while data:
        n = os.write(fd, data)
        data = data[n:]


def println_fd(fd: int, *args: str):
    write_fd(fd, ' '.join(str(arg) for arg in args) + '\n')


def add_default_args(parser: ArgumentParser):
    parser.add_argument('-v', '--verbose', default=0, action='count',
                        help='Increase the log level. Can be repeated')


def build_parser(**kwds) -> ArgumentParser:
    parser = ArgumentParser(conflict_handler='resolve',
                            formatter_class=RawTextHelpFormatter, **kwds)
    add_default_args(parser)
    return parser


def parse(parser: ArgumentParser, args: List[str] = None) -> argparse.Namespace:
    """Parse cli args and apply the resulting verbosity.
    """
    global parse_args
    parse_args = parser.parse_args(args)
    logging.debug('sys.argv' + str(sys.argv))

    set_verbosity()
    return parse_args


set_verbosity()
