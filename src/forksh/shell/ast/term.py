from collections import UserString
from typing import Tuple
import shlex

ASSIGNMENT = '='


class Word(UserString):
    """A resolved word, optionally concatenated from adjacent parts.
    This is a subclass from UserString, so it can be compared to other strings.

    .. code-block:: python

        Word('ls')
        Word('VAR', '=', 'value')  # VAR=value
    """

    def __init__(self, *parts: str):
        if not parts:
            parts = ('',)

        self.parts: Tuple[str, ...] = tuple(str(p) for p in parts)

    @property
    def data(self) -> str:
        return ''.join(self.parts)

    @property
    def is_assignment(self) -> bool:
        """Check whether the part after the first part is the assignment operator.
        """
        return len(self.parts) >= 2 and self.parts[1] == ASSIGNMENT

    def __repr__(self):
        return shlex.quote(self.data)

    def __hash__(self):
        return hash(self.data)


def to_word(value) -> Word:
    if value is None or isinstance(value, Word):
        return value

    if isinstance(value, (list, tuple)):
        return Word(*value)

    return Word(value)
