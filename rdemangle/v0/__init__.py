from .ast import MAX_COMPLEXITY, MAX_DEPTH
from .errors import ErrorKind, UnableToDemangle
from .symbol import Symbol, is_v0_symbol


def parse(text, **kwargs) -> Symbol:
    """Parse a v0 mangled symbol name.

    Args:
        text: The mangled symbol name, as str or bytes.
        max_complexity: Optional override of the arena capacity.
        max_depth: Optional override of the recursion ceiling.
        config: Optional DemanglerConfig.

    Returns:
        The parsed Symbol, call display() for its text.

    Raises:
        UnableToDemangle: With the ErrorKind of the first failing production.
    """
    return Symbol.parse(text, **kwargs)


def demangle(text, **kwargs) -> str:
    return parse(text, **kwargs).display()


def try_demangle(text, **kwargs) -> str:
    """Demangle the given name, or hand it back unchanged if it can't be parsed."""
    try:
        return demangle(text, **kwargs)
    except UnableToDemangle:
        if isinstance(text, (bytes, bytearray)):
            return bytes(text).decode("latin-1")
        return text


__all__ = [
    "MAX_COMPLEXITY",
    "MAX_DEPTH",
    "ErrorKind",
    "Symbol",
    "UnableToDemangle",
    "demangle",
    "is_v0_symbol",
    "parse",
    "try_demangle",
]
