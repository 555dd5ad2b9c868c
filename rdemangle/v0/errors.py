from enum import Enum


class ErrorKind(Enum):
    UNKNOWN_PREFIX = "symbol does not start with a v0 prefix"
    SYMBOL_TOO_SMALL = "symbol is empty after its prefix"
    NOT_ASCII = "symbol contains non-ascii bytes"
    TOO_COMPLEX = "symbol exceeds the node or depth limit"
    PATH_LENGTH_NOT_NUMBER = "identifier length is not a valid number"
    CONST_DELIMITER_NOT_FOUND = "const value is not terminated"
    BACKREF_IS_FRONTREF = "backreference does not point backwards"
    DECODING_BASE62_NUM = "malformed base-62 number"
    INVALID = "invalid or unsupported grammar tag"


class UnableToDemangle(Exception):
    def __init__(self, given_str, kind=ErrorKind.INVALID, message=None):
        self.given_str = given_str
        self.kind = kind
        self.message = message if message is not None else kind.value
        super().__init__(self.message)

    def __str__(self):
        return f"[{self.given_str}] {self.message}"
