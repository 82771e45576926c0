from enum import IntFlag
from typing import List, Optional

from forksh.shell.ast.term import Word, to_word
from forksh.shell.errors import ShellSyntaxError
from forksh.util import quote_items


class IOFlags(IntFlag):
    """How stdout and stderr redirections are combined.
    """
    REGULAR = 0
    OUT_APPEND = 1
    ERR_APPEND = 2


class SimpleCommand:
    """A single built-in or external command, with optional redirections.

    .. code-block:: sh

        verb params < stdin > stdout 2> stderr
    """

    def __init__(self, verb, params: List = None,
                 stdin=None, stdout=None, stderr=None,
                 io_flags: IOFlags = IOFlags.REGULAR):
        self.verb: Word = to_word(verb)
        self.params: List[Word] = [to_word(p) for p in params or []]
        self.stdin: Optional[Word] = to_word(stdin)
        self.stdout: Optional[Word] = to_word(stdout)
        self.stderr: Optional[Word] = to_word(stderr)
        self.io_flags = IOFlags(io_flags)

        if self.verb is None or str(self.verb) == '':
            raise ShellSyntaxError('Empty command')

    @property
    def argv(self) -> List[str]:
        return [str(self.verb)] + [str(p) for p in self.params]

    def __repr__(self):
        line = ' '.join(quote_items([self.verb] + self.params))
        for symbol, target in (('<', self.stdin),
                               ('>', self.stdout),
                               ('2>', self.stderr)):
            if target is not None:
                line += f' {symbol} {target!r}'

        if self.io_flags:
            return f'[{type(self).__name__}] {line} ({self.io_flags!r})'
        return f'[{type(self).__name__}] {line}'

    def __eq__(self, other):
        try:
            return self.verb == other.verb \
                and self.verb.parts == other.verb.parts \
                and self.params == other.params \
                and self.stdin == other.stdin \
                and self.stdout == other.stdout \
                and self.stderr == other.stderr \
                and self.io_flags == other.io_flags

        except AttributeError:
            return False
