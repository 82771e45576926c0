#!/usr/bin/python3
"""Evaluate command trees that were serialized as JSON.

.. code-block:: sh

    forksh tree.json
    echo '{"verb": "pwd"}' | forksh -v
"""
from typing import Iterable, List
import logging
import sys

from forksh import io_util
from forksh.io_util import EXIT_SUCCESS, log
from forksh.shell.ast.factory import from_json
from forksh.shell.ast.node import CommandNode
from forksh.shell.errors import ShellError
from forksh.shell.executor import Executor
from forksh.shell.result import SHELL_EXIT, exit_code

STDIN = '-'
EXIT_USAGE = 2

description = 'Run command trees. Each FILE holds a JSON tree or a list of trees.'


def set_cli_args(args: List[str] = None):
    parser = io_util.build_parser(description=description)
    parser.add_argument('file', nargs='*', default=[STDIN],
                        help='JSON files. Use - to read stdin')
    return io_util.parse(parser, args)


def read_trees(filenames: Iterable[str]) -> Iterable[CommandNode]:
    for fn in filenames:
        if fn == STDIN:
            text = sys.stdin.read()
        else:
            with open(fn) as f:
                text = f.read()

        yield from from_json(text)


def run(trees: Iterable[CommandNode], executor: Executor = None) -> int:
    """Evaluate each tree in turn and return the last exit status.
    Stop at the first tree that terminates the shell.
    """
    if executor is None:
        executor = Executor()

    status = EXIT_SUCCESS
    for tree in trees:
        result = executor.evaluate(tree)
        logging.debug(f'Result: {result}')

        status = exit_code(result)
        if result is SHELL_EXIT:
            break

    return status


def main(args: List[str] = None) -> int:
    parse_args = set_cli_args(args)
    logging.info(f'args: {parse_args}')

    try:
        return run(read_trees(parse_args.file))
    except ShellError as e:
        log(e)
        return EXIT_USAGE
    except OSError as e:
        log(f'{e.filename}: {e.strerror}')
        return EXIT_USAGE


if __name__ == '__main__':
    sys.exit(main())
