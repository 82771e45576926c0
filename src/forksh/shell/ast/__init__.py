from forksh.shell.ast.command import IOFlags, SimpleCommand
from forksh.shell.ast.node import CommandNode, Operator, command, dummy, if_failed, if_succeeded, parallel, pipe, \
    sequential
from forksh.shell.ast.term import Word
