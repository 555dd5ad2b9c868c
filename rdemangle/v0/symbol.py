import string
from typing import Optional

from .ast import MAX_COMPLEXITY, MAX_DEPTH
from .errors import ErrorKind, UnableToDemangle
from .parser import SymbolParser
from .renderer import Renderer

# "_R" is the canonical form, dbghelp on Windows strips the underscore and
# Mach-O adds another one
PREFIXES = ("__R", "_R", "R")
LLVM_SUFFIX = ".llvm."


def is_v0_symbol(text) -> bool:
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("latin-1")
    return text.startswith(PREFIXES)


def strip_prefix(text: str) -> str:
    for prefix in PREFIXES:
        if text.startswith(prefix):
            return text[len(prefix) :]
    raise UnableToDemangle(text, ErrorKind.UNKNOWN_PREFIX)


def split_suffix(text: str, strip_llvm: bool = True):
    """Separate a symbol body from a trailing ".suffix" such as ".llvm.1234" or ".cold"."""
    if strip_llvm and LLVM_SUFFIX in text:
        index = text.find(LLVM_SUFFIX)
        candidate = text[index + len(LLVM_SUFFIX) :]
        if not candidate or any(ch not in string.hexdigits + "@" for ch in candidate):
            raise UnableToDemangle(text, ErrorKind.INVALID, "malformed .llvm. suffix")
        text = text[:index]
    if "." in text:
        index = text.index(".")
        return text[:index], text[index:]
    return text, ""


class Symbol:
    """A successfully parsed v0 symbol, rendered on demand."""

    def __init__(self, mangled: str, parser: SymbolParser, root: int, suffix: str = "") -> None:
        self.mangled = mangled
        self.text = parser.text
        self.arena = parser.arena
        self.root = root
        self.suffix = suffix
        self._display = None

    @classmethod
    def parse(cls, mangled, max_complexity: Optional[int] = None, max_depth: Optional[int] = None, config=None) -> "Symbol":
        if config is not None:
            max_complexity = max_complexity if max_complexity is not None else config.MAX_COMPLEXITY
            max_depth = max_depth if max_depth is not None else config.MAX_DEPTH
        strip_llvm = config.STRIP_LLVM_SUFFIX if config is not None else True
        keep_suffix = config.KEEP_SUFFIX if config is not None else True
        if isinstance(mangled, (bytes, bytearray)):
            mangled = bytes(mangled).decode("latin-1")

        remainder = strip_prefix(mangled)
        if not remainder:
            raise UnableToDemangle(mangled, ErrorKind.SYMBOL_TOO_SMALL)
        if any(ord(ch) > 0x7F for ch in remainder):
            raise UnableToDemangle(mangled, ErrorKind.NOT_ASCII)

        body, suffix = split_suffix(remainder, strip_llvm)
        parser = SymbolParser(
            body,
            max_complexity=max_complexity if max_complexity is not None else MAX_COMPLEXITY,
            max_depth=max_depth if max_depth is not None else MAX_DEPTH,
        )
        try:
            root = parser.parse()
        except RecursionError:
            raise UnableToDemangle(mangled, ErrorKind.TOO_COMPLEX, "Recursion limit exceeded") from None
        return cls(mangled, parser, root, suffix if keep_suffix else "")

    def display(self) -> str:
        if self._display is None:
            self._display = Renderer(self.arena, self.text).render(self.root) + self.suffix
        return self._display

    def __str__(self):
        return self.display()

    def __repr__(self):
        return f"Symbol({self.mangled!r})"
