"""Build a command tree from plain data, e.g. a JSON document.

.. code-block:: json

    {"op": "pipe",
     "lhs": {"verb": "echo", "params": ["hi"]},
     "rhs": {"verb": "wc", "params": ["-c"], "out": "count.txt"}}
"""
from json import JSONDecodeError, loads
from typing import List, Union

from forksh.shell.ast.command import IOFlags
from forksh.shell.ast.node import CommandNode, Operator, command
from forksh.shell.errors import ShellSyntaxError, ShellTypeError

OPERATORS = {
    'sequential': Operator.SEQUENTIAL,
    'parallel': Operator.PARALLEL,
    'pipe': Operator.PIPE,
    'if_failed': Operator.CONDITIONAL_NZERO,
    'if_succeeded': Operator.CONDITIONAL_ZERO,
    'dummy': Operator.DUMMY,
}

# operators can also be written as shell symbols, e.g. "&&"
OPERATORS.update({op.value: op for op in Operator if op is not Operator.NONE})

LEAF_KEYS = {'verb', 'params', 'in', 'out', 'err', 'io_flags'}


def from_dict(data: dict) -> CommandNode:
    if not isinstance(data, dict):
        raise ShellTypeError(f'Expected an object but got: {data!r}')

    if 'op' not in data:
        return leaf_from_dict(data)

    try:
        op = OPERATORS[data['op']]
    except (KeyError, TypeError):
        raise ShellSyntaxError(f'Unknown operator: {data["op"]}')

    if op is Operator.DUMMY:
        return CommandNode(op)

    lhs = from_dict(data['lhs']) if data.get('lhs') is not None else None
    rhs = from_dict(data['rhs']) if data.get('rhs') is not None else None
    return CommandNode(op, lhs, rhs)


def leaf_from_dict(data: dict) -> CommandNode:
    unknown = set(data) - LEAF_KEYS
    if unknown:
        raise ShellSyntaxError(f'Unknown keys: {", ".join(sorted(unknown))}')

    if 'verb' not in data:
        raise ShellSyntaxError('Missing key: verb')

    params = data.get('params', [])
    if not isinstance(params, list):
        raise ShellTypeError(f'Expected a list of params but got: {params!r}')

    return command(data['verb'], *params,
                   stdin=data.get('in'),
                   stdout=data.get('out'),
                   stderr=data.get('err'),
                   io_flags=parse_io_flags(data.get('io_flags', 0)))


def parse_io_flags(value: Union[int, List[str]]) -> IOFlags:
    if isinstance(value, int):
        return IOFlags(value)

    flags = IOFlags.REGULAR
    for name in value:
        try:
            flags |= IOFlags[name.upper()]
        except KeyError:
            raise ShellSyntaxError(f'Unknown io flag: {name}')

    return flags


def from_json(text: str) -> List[CommandNode]:
    """Parse one tree or a list of trees.
    """
    try:
        data = loads(text)
    except JSONDecodeError as e:
        raise ShellSyntaxError(f'Invalid JSON: {e}') from e

    if isinstance(data, list):
        return [from_dict(item) for item in data]

    return [from_dict(data)]
