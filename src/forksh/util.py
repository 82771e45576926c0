from typing import Iterable, List
import shlex


def is_callable(method) -> bool:
    return hasattr(method, '__call__')


def quote_items(items: List[str]) -> Iterable[str]:
    """Map shlex.quote() to all items.
    """
    for arg in items:
        yield shlex.quote(str(arg))
