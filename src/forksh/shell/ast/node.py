"""
Node
----

A binary tree of commands.

.. code-block:: bash

    # Tree
    CommandNode[PIPE]
    ├── CommandNode[NONE]  # leaf, wraps a SimpleCommand
    └── CommandNode[CONDITIONAL_ZERO]
        ├── ..
        └── ..

"""
from enum import Enum
from typing import Optional

from forksh.shell.ast.command import SimpleCommand
from forksh.shell.errors import ShellSyntaxError, ShellTypeError


class Operator(Enum):
    NONE = 'none'
    SEQUENTIAL = ';'
    PARALLEL = '&'
    PIPE = '|'
    CONDITIONAL_NZERO = '||'
    CONDITIONAL_ZERO = '&&'
    DUMMY = 'dummy'


class CommandNode:
    """Either a leaf that holds a SimpleCommand or an operator with two children.
    Instances are not modified during evaluation.
    """

    def __init__(self, op: Operator = Operator.NONE,
                 lhs: 'CommandNode' = None,
                 rhs: 'CommandNode' = None,
                 scmd: SimpleCommand = None):
        self.op = Operator(op)
        self.lhs: Optional[CommandNode] = lhs
        self.rhs: Optional[CommandNode] = rhs
        self.scmd: Optional[SimpleCommand] = scmd

        self.verify()

    def verify(self):
        if self.op is Operator.NONE:
            if not isinstance(self.scmd, SimpleCommand):
                raise ShellTypeError(f'Expected a SimpleCommand but got {type(self.scmd)}')
            return

        if self.op is Operator.DUMMY:
            return

        for child in (self.lhs, self.rhs):
            if child is not None and not isinstance(child, CommandNode):
                raise ShellTypeError(f'Expected a CommandNode but got {type(child)}')

        # a sequence may omit its first command
        if self.rhs is None or (self.lhs is None and self.op is not Operator.SEQUENTIAL):
            raise ShellSyntaxError(f'Missing operand for operator `{self.op.value}`')

    @property
    def is_leaf(self) -> bool:
        return self.op is Operator.NONE

    def __repr__(self):
        if self.is_leaf:
            return repr(self.scmd)

        return f'{type(self).__name__}[{self.op.name}]( {self.lhs!r}, {self.rhs!r} )'

    def __eq__(self, other):
        try:
            return self.op == other.op \
                and self.scmd == other.scmd \
                and self.lhs == other.lhs \
                and self.rhs == other.rhs
        except AttributeError:
            return False


def command(verb, *params, stdin=None, stdout=None, stderr=None, io_flags=0) -> CommandNode:
    """Create a leaf node.

    .. code-block:: python

        command('grep', 'x', stdin='in.txt')
    """
    scmd = SimpleCommand(verb, list(params), stdin, stdout, stderr, io_flags)
    return CommandNode(Operator.NONE, scmd=scmd)


def sequential(lhs: CommandNode, rhs: CommandNode) -> CommandNode:
    return CommandNode(Operator.SEQUENTIAL, lhs, rhs)


def parallel(lhs: CommandNode, rhs: CommandNode) -> CommandNode:
    return CommandNode(Operator.PARALLEL, lhs, rhs)


def pipe(lhs: CommandNode, rhs: CommandNode, *more: CommandNode) -> CommandNode:
    """Create a (left-associative) pipeline.
    """
    node = CommandNode(Operator.PIPE, lhs, rhs)
    for other in more:
        node = CommandNode(Operator.PIPE, node, other)
    return node


def if_failed(lhs: CommandNode, rhs: CommandNode) -> CommandNode:
    return CommandNode(Operator.CONDITIONAL_NZERO, lhs, rhs)


def if_succeeded(lhs: CommandNode, rhs: CommandNode) -> CommandNode:
    return CommandNode(Operator.CONDITIONAL_ZERO, lhs, rhs)


def dummy() -> CommandNode:
    return CommandNode(Operator.DUMMY)
