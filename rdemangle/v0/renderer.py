import math

from .ast import (
    SIGNED_INTEGERS,
    UNSIGNED_INTEGERS,
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
)


def format_decimal(num: int) -> str:
    """Render an integer in decimal without growing the result one digit at a time."""
    if num < 0:
        return "-" + format_decimal(-num)
    if num == 0:
        return "0"
    width = math.ceil(math.log10(num + 1))
    # log10 on floats is off by one for some values past 2**53
    while 10**width <= num:
        width += 1
    while width > 1 and 10 ** (width - 1) > num:
        width -= 1
    digits = [""] * width
    for index in range(width):
        power = 10 ** (width - index - 1)
        digit, num = divmod(num, power)
        digits[index] = chr(ord("0") + digit)
    return "".join(digits)


def ident_to_str(ident: Ident) -> str:
    if not ident.punycode:
        return ident.name
    ascii_part, sep, encoded = ident.name.rpartition("_")
    payload = f"{ascii_part}-{encoded}" if sep else encoded
    try:
        return payload.encode("ascii").decode("punycode")
    except ValueError:
        return "punycode{" + payload + "}"


CHAR_ESCAPES = {
    "\0": "\\0",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "\\": "\\\\",
    "'": "\\'",
}


def char_to_str(ch: str) -> str:
    """Quote a char constant the way Rust's Debug output does."""
    if ch in CHAR_ESCAPES:
        escaped = CHAR_ESCAPES[ch]
    elif ch.isprintable():
        escaped = ch
    else:
        escaped = "\\u{%x}" % ord(ch)
    return "'" + escaped + "'"


def lifetime_to_str(lifetime: Lifetime) -> str:
    return "'" + (lifetime.letter() or "_")


class Renderer:
    """Turns the arena of a parsed symbol back into source-level text."""

    def __init__(self, arena, text: str) -> None:
        self.arena = arena
        self.text = text
        self.out = []

    def render(self, slot: int = 0) -> str:
        self.out = []
        self.print_node(slot)
        return "".join(self.out)

    def print_sep_list(self, items, printer, sep=", "):
        for index, item in enumerate(items):
            if index > 0:
                self.out.append(sep)
            printer(item)

    def print_node(self, slot: int):
        node = self.arena[slot]
        if isinstance(node, BasicType):
            self.out.append(node.name)

        elif isinstance(node, CratePath):
            self.out.append(ident_to_str(node.ident))

        elif isinstance(node, NestedPath):
            self.print_node(node.parent)
            if node.namespace is Namespace.CLOSURE:
                self.out.append("::{closure")
                if node.ident:
                    self.out.append(":" + ident_to_str(node.ident))
                if node.disambiguator:
                    self.out.append("#" + format_decimal(node.disambiguator))
                self.out.append("}")
            else:
                self.out.append("::" + ident_to_str(node.ident))

        elif isinstance(node, GenericPath):
            self.print_generic_path(node)

        elif isinstance(node, InherentImplPath):
            self.out.append("<")
            self.print_node(node.self_type)
            self.out.append(">")

        elif isinstance(node, TraitImplPath):
            self.out.append("<")
            self.print_node(node.self_type)
            self.out.append(" as ")
            self.print_node(node.trait)
            self.out.append(">")

        elif isinstance(node, ArrayType):
            self.out.append("[")
            self.print_node(node.element)
            self.out.append("; ")
            self.print_const(node.length)
            self.out.append("]")

        elif isinstance(node, SliceType):
            self.out.append("[")
            self.print_node(node.element)
            self.out.append("]")

        elif isinstance(node, TupleType):
            self.out.append("(")
            self.print_sep_list(node.elements, self.print_node)
            if len(node.elements) == 1:
                self.out.append(",")
            self.out.append(")")

        elif isinstance(node, RefType):
            self.out.append("&")
            if node.lifetime is not None and not node.lifetime.is_elided:
                self.out.append(lifetime_to_str(node.lifetime) + " ")
            if node.mutable:
                self.out.append("mut ")
            self.print_node(node.inner)

        elif isinstance(node, PointerType):
            self.out.append("*mut " if node.mutable else "*const ")
            self.print_node(node.inner)

        elif isinstance(node, FnSigType):
            if node.is_unsafe:
                self.out.append("unsafe ")
            if node.name:
                self.out.append("fn " + ident_to_str(node.name) + "(")
            else:
                self.out.append("fn(")
            self.print_sep_list(node.args, self.print_node)
            self.out.append(")")
            if node.ret is not None:
                self.out.append(" -> ")
                self.print_node(node.ret)

        elif isinstance(node, DynTraitType):
            self.out.append("dyn ")
            self.print_sep_list(node.traits, self.print_dyn_trait, " + ")
            letter = node.lifetime.letter()
            if letter:
                self.out.append(" + '" + letter)

        else:
            raise ValueError(f"slot {slot} holds no renderable node: {node!r}")

    def print_generic_path(self, node: GenericPath, bindings=()):
        self.print_node(node.base)
        base = self.arena[node.base]
        # generics on types don't get a turbofish
        if isinstance(base, NestedPath) and base.namespace is Namespace.TYPE:
            self.out.append("<")
        else:
            self.out.append("::<")
        self.print_sep_list(node.args, self.print_generic_arg)
        if bindings:
            if node.args:
                self.out.append(", ")
            self.print_sep_list(bindings, self.print_binding)
        self.out.append(">")

    def print_generic_arg(self, arg):
        if isinstance(arg, GenericLifetime):
            self.out.append(lifetime_to_str(arg.lifetime))
        elif isinstance(arg, GenericType):
            self.print_node(arg.slot)
        elif isinstance(arg, GenericConst):
            self.print_const(arg.const)

    def print_binding(self, binding):
        ident, slot = binding
        self.out.append(ident_to_str(ident) + " = ")
        self.print_node(slot)

    def print_dyn_trait(self, bound: DynTraitBound):
        path = self.arena[bound.path]
        if isinstance(path, GenericPath) and bound.bindings:
            self.print_generic_path(path, bound.bindings)
            return
        self.print_node(bound.path)
        if bound.bindings:
            self.out.append("<")
            self.print_sep_list(bound.bindings, self.print_binding)
            self.out.append(">")

    def print_const(self, const: Const):
        type_name = self.arena[const.type_slot].name
        if type_name == "_":
            self.out.append("_")
            return
        start, end = const.span
        hex_val = self.text[start:end]
        if type_name in SIGNED_INTEGERS or type_name in UNSIGNED_INTEGERS:
            if const.negated:
                self.out.append("-")
            self.out.append(format_decimal(int(hex_val, 16)))
        elif type_name == "bool":
            self.out.append("true" if hex_val == "1" else "false")
        elif type_name == "char":
            self.out.append(char_to_str(chr(int(hex_val, 16))))
        else:
            raise NotImplementedError(f"rendering {type_name} constants")
