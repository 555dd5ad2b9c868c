"""Node model of a parsed v0 symbol.

Nodes never own their children. Every child is referenced by its slot in the
Arena, so a node can be reserved before its children are parsed and filled in
afterwards, and a backreference can reparse an earlier byte range into fresh
slots without any node being shared.
"""

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from .errors import ErrorKind, UnableToDemangle

# Path nodes reference generic arguments by slot, keep this well below 2**16.
MAX_COMPLEXITY = 256
MAX_DEPTH = 100

LIFETIME_LETTERS = string.ascii_lowercase + string.ascii_uppercase

BASIC_TYPES = {
    "b": "bool",
    "c": "char",
    "e": "str",
    "u": "()",
    "a": "i8",
    "s": "i16",
    "l": "i32",
    "x": "i64",
    "n": "i128",
    "i": "isize",
    "h": "u8",
    "t": "u16",
    "m": "u32",
    "y": "u64",
    "o": "u128",
    "j": "usize",
    "f": "f32",
    "d": "f64",
    "z": "!",
    "p": "_",
    "v": "...",
}

SIGNED_INTEGERS = ("i8", "i16", "i32", "i64", "i128", "isize")
UNSIGNED_INTEGERS = ("u8", "u16", "u32", "u64", "u128", "usize")


def basic_type(tag: str) -> Optional[str]:
    return BASIC_TYPES.get(tag)


class Namespace(Enum):
    UNKNOWN = 0
    VALUE = 1
    TYPE = 2
    CLOSURE = 3

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "Namespace":
        return {"v": cls.VALUE, "t": cls.TYPE, "C": cls.CLOSURE}.get(tag, cls.UNKNOWN)


@dataclass(frozen=True)
class Lifetime:
    index: int

    @property
    def is_elided(self) -> bool:
        return self.index == 0

    def letter(self) -> Optional[str]:
        if 0 < self.index <= len(LIFETIME_LETTERS):
            return LIFETIME_LETTERS[self.index - 1]
        return None


@dataclass(frozen=True)
class Ident:
    """An identifier slice, `punycode` is set for `u`-prefixed identifiers."""

    name: str
    punycode: bool = False

    def __bool__(self):
        return bool(self.name)


# <type> ["n"] {hex-digit} "_" | "p"
@dataclass(frozen=True)
class Const:
    negated: bool
    type_slot: int
    span: Tuple[int, int] = (0, 0)


@dataclass(frozen=True)
class GenericLifetime:
    lifetime: Lifetime


@dataclass(frozen=True)
class GenericType:
    slot: int


@dataclass(frozen=True)
class GenericConst:
    const: Const


GenericArg = Union[GenericLifetime, GenericType, GenericConst]


@dataclass(frozen=True)
class EmptyType:
    pass


EMPTY = EmptyType()


@dataclass(frozen=True)
class BasicType:
    name: str


@dataclass(frozen=True)
class CratePath:
    """[disambiguator] <ident>, the crate root."""

    disambiguator: Optional[int]
    ident: Ident


@dataclass(frozen=True)
class NestedPath:
    """<namespace> <path> [disambiguator] <ident>, renders as ...::ident"""

    namespace: Namespace
    parent: int
    disambiguator: Optional[int]
    ident: Ident


@dataclass(frozen=True)
class GenericPath:
    """<path> {generic-arg} "E", renders as ...<T1, T2>"""

    base: int
    args: Tuple[GenericArg, ...]


@dataclass(frozen=True)
class InherentImplPath:
    """<T>"""

    self_type: int


@dataclass(frozen=True)
class TraitImplPath:
    """<T as Trait>"""

    self_type: int
    trait: int


@dataclass(frozen=True)
class ArrayType:
    element: int
    length: Const


@dataclass(frozen=True)
class SliceType:
    element: int


@dataclass(frozen=True)
class TupleType:
    elements: Tuple[int, ...]


@dataclass(frozen=True)
class RefType:
    lifetime: Optional[Lifetime]
    inner: int
    mutable: bool = False


@dataclass(frozen=True)
class PointerType:
    inner: int
    mutable: bool = False


@dataclass(frozen=True)
class FnSigType:
    binder: Optional[int]
    is_unsafe: bool
    name: Optional[Ident]
    args: Tuple[int, ...]
    ret: Optional[int]


@dataclass(frozen=True)
class DynTraitBound:
    path: int
    bindings: Tuple[Tuple[Ident, int], ...] = ()


@dataclass(frozen=True)
class DynTraitType:
    binder: Optional[int]
    traits: Tuple[DynTraitBound, ...]
    lifetime: Lifetime


@dataclass
class Arena:
    """Fixed-capacity table of nodes addressed by slot index."""

    capacity: int = MAX_COMPLEXITY
    owner: str = ""
    slots: List[object] = field(init=False)
    next_slot: int = field(init=False, default=0)

    def __post_init__(self):
        self.slots = [EMPTY] * self.capacity

    def reserve(self) -> int:
        if self.next_slot >= self.capacity:
            raise UnableToDemangle(self.owner, ErrorKind.TOO_COMPLEX)
        slot = self.next_slot
        self.next_slot += 1
        return slot

    def fill(self, slot: int, node) -> int:
        self.slots[slot] = node
        return slot

    def push(self, node) -> int:
        return self.fill(self.reserve(), node)

    def __getitem__(self, slot: int):
        return self.slots[slot]

    def __len__(self):
        return self.next_slot

    def __iter__(self):
        return iter(self.slots[: self.next_slot])
