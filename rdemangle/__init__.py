from .v0 import ErrorKind, Symbol, UnableToDemangle, demangle, parse, try_demangle
