import string
from typing import List, Optional

from .ast import (
    MAX_COMPLEXITY,
    MAX_DEPTH,
    SIGNED_INTEGERS,
    UNSIGNED_INTEGERS,
    Arena,
    ArrayType,
    BasicType,
    Const,
    CratePath,
    DynTraitBound,
    DynTraitType,
    FnSigType,
    GenericConst,
    GenericLifetime,
    GenericPath,
    GenericType,
    Ident,
    InherentImplPath,
    Lifetime,
    Namespace,
    NestedPath,
    PointerType,
    RefType,
    SliceType,
    TraitImplPath,
    TupleType,
    basic_type,
)
from .cursor import Cursor
from .errors import ErrorKind, UnableToDemangle

# base-62 numbers and identifier lengths are machine words in the mangling scheme
MAX_BASE62_VALUE = 2**64 - 1
MAX_LENGTH_DIGITS = 19
HEX_NIBBLES = "0123456789abcdef"
CONST_TYPES = SIGNED_INTEGERS + UNSIGNED_INTEGERS + ("bool", "char")


class SymbolParser:
    """Recursive descent over the v0 grammar, one method per production.

    Every production that builds a node returns the slot it was stored in. Path
    productions return None for the "E" terminator, callers that need a node
    go through _require().
    """

    def __init__(self, text: str, max_complexity: int = MAX_COMPLEXITY, max_depth: int = MAX_DEPTH) -> None:
        self.cursor = Cursor(text)
        self.arena = Arena(max_complexity, owner=text)
        self.max_depth = max_depth
        self.depth = 0

    @property
    def text(self) -> str:
        return self.cursor.text

    def fail(self, kind: ErrorKind, message: Optional[str] = None):
        raise UnableToDemangle(self.text, kind, message)

    def _enter(self):
        if self.depth >= self.max_depth:
            self.fail(ErrorKind.TOO_COMPLEX, "Recursion limit exceeded")
        self.depth += 1

    def _require(self, slot: Optional[int]) -> int:
        if slot is None:
            self.fail(ErrorKind.INVALID, f"unexpected terminator at offset {self.cursor.position - 1}")
        return slot

    def _at_generic_suffix(self) -> bool:
        # "c" <ident> after a generic path, a "c" not followed by an identifier
        # length is a char argument of the enclosing generic
        text = self.text
        pos = self.cursor.position
        if not text.startswith("c", pos):
            return False
        if text.startswith("u", pos + 1):
            pos += 1
        return pos + 1 < len(text) and text[pos + 1] in string.digits

    def _backref(self, production):
        target = self.consume_base62()
        current = self.cursor.position
        if target >= current - 1:
            self.fail(ErrorKind.BACKREF_IS_FRONTREF)
        self.cursor.position = target
        try:
            return production()
        finally:
            self.cursor.position = current

    def parse(self) -> int:
        root = self._require(self.consume_path())
        # optional instantiating crate, validated but never rendered
        next_tag = self.cursor.peek()
        if next_tag is not None and next_tag in string.ascii_uppercase:
            self._require(self.consume_path())
        return root

    def consume_base62(self) -> int:
        if self.cursor.take("_"):
            return 0
        num = 0
        while True:
            ch = self.cursor.consume()
            if ch is None:
                self.fail(ErrorKind.DECODING_BASE62_NUM)
            if ch == "_":
                break
            if ch in string.digits:
                digit = ord(ch) - ord("0")
            elif ch in string.ascii_lowercase:
                digit = 10 + ord(ch) - ord("a")
            elif ch in string.ascii_uppercase:
                digit = 36 + ord(ch) - ord("A")
            else:
                self.fail(ErrorKind.DECODING_BASE62_NUM)
            num = num * 62 + digit
            if num > MAX_BASE62_VALUE:
                self.fail(ErrorKind.DECODING_BASE62_NUM, "base-62 number overflows")
        num += 1
        if num > MAX_BASE62_VALUE:
            self.fail(ErrorKind.DECODING_BASE62_NUM, "base-62 number overflows")
        return num

    def consume_disambiguator(self) -> Optional[int]:
        if self.cursor.take("s"):
            return self.consume_base62()
        return None

    def consume_lifetime(self) -> Lifetime:
        return Lifetime(self.consume_base62())

    def consume_ident(self) -> Ident:
        cursor = self.cursor
        text = self.text
        is_punycode = False
        pos = cursor.position
        if text.startswith("u", pos) and pos + 1 < len(text) and text[pos + 1] in string.digits:
            is_punycode = True
            pos += 1

        digits_end = pos
        while digits_end < len(text) and text[digits_end] in string.digits:
            digits_end += 1
        if digits_end == pos:
            return Ident("")
        if digits_end - pos > MAX_LENGTH_DIGITS:
            self.fail(ErrorKind.PATH_LENGTH_NOT_NUMBER)
        length = int(text[pos:digits_end])

        cursor.position = digits_end
        # separator emitted when the identifier itself starts with a digit or "_"
        cursor.take("_")
        start = cursor.position
        if start + length > len(text):
            self.fail(ErrorKind.PATH_LENGTH_NOT_NUMBER, f"identifier of length {length} runs past the end")
        cursor.position = start + length
        return Ident(text[start : start + length], is_punycode)

    def consume_path(self) -> Optional[int]:
        self._enter()
        try:
            cursor = self.cursor
            arena = self.arena
            tag = cursor.consume()
            if tag == "C":
                # [disambiguator] <ident>
                disambiguator = self.consume_disambiguator()
                ident = self.consume_ident()
                return arena.push(CratePath(disambiguator, ident))

            elif tag in ("M", "X", "Y"):
                # "M" <impl-path> <type> | "X" <impl-path> <type> <path> | "Y" <type> <path>
                spot = arena.reserve()
                if tag != "Y":
                    self.consume_disambiguator()
                    self._require(self.consume_path())
                self_type = self._require(self.consume_type())
                if tag == "M":
                    return arena.fill(spot, InherentImplPath(self_type))
                trait = self._require(self.consume_path())
                return arena.fill(spot, TraitImplPath(self_type, trait))

            elif tag == "N":
                # <namespace> <path> [disambiguator] <ident>
                namespace = Namespace.from_tag(cursor.consume())
                spot = arena.reserve()
                parent = self._require(self.consume_path())
                disambiguator = self.consume_disambiguator()
                ident = self.consume_ident()
                return arena.fill(spot, NestedPath(namespace, parent, disambiguator, ident))

            elif tag == "I":
                # <path> {generic-arg} "E" ["c" <ident>]
                spot = arena.reserve()
                base = self._require(self.consume_path())
                args = self.consume_generic_args()
                arena.fill(spot, GenericPath(base, tuple(args)))
                if self._at_generic_suffix():
                    cursor.offset(1)
                    self.consume_ident()
                return spot

            elif tag == "B":
                return self._backref(self.consume_path)

            elif tag == "E":
                return None

            elif tag is None:
                self.fail(ErrorKind.INVALID, "unexpected end of symbol")
            self.fail(ErrorKind.INVALID, f"unknown path tag {tag!r} at offset {cursor.position - 1}")
        finally:
            self.depth -= 1

    def consume_generic_args(self) -> list:
        args = []
        while not self.cursor.take("E"):
            if self.cursor.take("L"):
                args.append(GenericLifetime(self.consume_lifetime()))
            elif self.cursor.take("K"):
                args.append(GenericConst(self.consume_const()))
            else:
                args.append(GenericType(self._require(self.consume_type())))
        return args

    def consume_types(self) -> List[int]:
        slots = []
        while not self.cursor.take("E"):
            slots.append(self._require(self.consume_type()))
        return slots

    def consume_type(self) -> Optional[int]:
        self._enter()
        try:
            cursor = self.cursor
            arena = self.arena
            tag = cursor.consume()
            if tag is None:
                self.fail(ErrorKind.INVALID, "unexpected end of symbol")

            if tag == "A":
                spot = arena.reserve()
                element = self._require(self.consume_type())
                return arena.fill(spot, ArrayType(element, self.consume_const()))

            elif tag == "S":
                spot = arena.reserve()
                return arena.fill(spot, SliceType(self._require(self.consume_type())))

            elif tag == "T":
                spot = arena.reserve()
                return arena.fill(spot, TupleType(tuple(self.consume_types())))

            elif tag == "R" or tag == "Q":
                lifetime = None
                if cursor.take("L"):
                    lifetime = self.consume_lifetime()
                spot = arena.reserve()
                inner = self._require(self.consume_type())
                return arena.fill(spot, RefType(lifetime, inner, mutable=(tag == "Q")))

            elif tag == "P" or tag == "O":
                spot = arena.reserve()
                inner = self._require(self.consume_type())
                return arena.fill(spot, PointerType(inner, mutable=(tag == "O")))

            elif tag == "F":
                # [binder] ["U"] ["K" "C" <ident>] {type} "E" ("u" | <type>)
                if cursor.take("G"):
                    self.fail(ErrorKind.INVALID, "higher-ranked binders in fn signatures are not supported")
                is_unsafe = cursor.take("U")
                name = None
                if cursor.take("K"):
                    if not cursor.take("C"):
                        self.fail(ErrorKind.INVALID, "only the C abi is supported in fn signatures")
                    name = self.consume_ident()
                spot = arena.reserve()
                args = self.consume_types()
                ret = None
                if not cursor.take("u"):
                    ret = self._require(self.consume_type())
                return arena.fill(spot, FnSigType(None, is_unsafe, name, tuple(args), ret))

            elif tag == "D":
                # [binder] {<path> {"p" <ident> <type>}} "E" "L" <lifetime>
                if cursor.take("G"):
                    self.fail(ErrorKind.INVALID, "higher-ranked binders in dyn traits are not supported")
                spot = arena.reserve()
                traits = []
                while not cursor.take("E"):
                    path = self._require(self.consume_path())
                    bindings = []
                    while cursor.take("p"):
                        ident = self.consume_ident()
                        bindings.append((ident, self._require(self.consume_type())))
                    traits.append(DynTraitBound(path, tuple(bindings)))
                if not cursor.take("L"):
                    self.fail(ErrorKind.DECODING_BASE62_NUM, "dyn trait is missing its lifetime")
                lifetime = self.consume_lifetime()
                return arena.fill(spot, DynTraitType(None, tuple(traits), lifetime))

            elif tag == "B":
                return self._backref(self.consume_type)

            name = basic_type(tag)
            if name is not None:
                return arena.push(BasicType(name))
            # named type
            cursor.offset(-1)
            return self.consume_path()
        finally:
            self.depth -= 1

    def consume_const(self) -> Const:
        self._enter()
        try:
            cursor = self.cursor
            if cursor.take("p"):
                return Const(False, self.arena.push(BasicType("_")))
            if cursor.take("B"):
                return self._backref(self.consume_const)

            type_slot = self._require(self.consume_type())
            negated = cursor.take("n")
            start = cursor.position
            end = self.text.find("_", start)
            if end == -1:
                self.fail(ErrorKind.CONST_DELIMITER_NOT_FOUND)
            cursor.position = end + 1
            self._check_const(type_slot, self.text[start:end], negated)
            return Const(negated, type_slot, (start, end))
        finally:
            self.depth -= 1

    def _check_const(self, type_slot: int, digits: str, negated: bool):
        node = self.arena[type_slot]
        if not isinstance(node, BasicType) or node.name not in CONST_TYPES:
            self.fail(ErrorKind.INVALID, "unsupported const type")
        if not digits or any(ch not in HEX_NIBBLES for ch in digits):
            self.fail(ErrorKind.INVALID, f"malformed const value {digits!r}")
        if node.name in ("bool", "char") and negated:
            self.fail(ErrorKind.INVALID, f"negated {node.name} const")
        if node.name == "bool" and digits not in ("0", "1"):
            self.fail(ErrorKind.INVALID, f"bool const out of range {digits!r}")
        if node.name == "char":
            value = int(digits, 16) if len(digits) <= 8 else -1
            if not 0 <= value <= 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                self.fail(ErrorKind.INVALID, f"char const out of range {digits!r}")
