#!/usr/bin/python

import logging

import lief

from rdemangle.DemanglerConfig import DemanglerConfig
from rdemangle.v0 import UnableToDemangle, demangle

from .AbstractLabelProvider import AbstractLabelProvider

lief.logging.disable()
LOGGER = logging.getLogger(__name__)

# IMAGE_SCN_MEM_EXECUTE
PE_SECTION_EXECUTABLE = 0x20000000


class RustSymbolProvider(AbstractLabelProvider):
    """Resolver for v0 mangled Rust symbols found in ELF and PE files"""

    def __init__(self, config):
        if config is None:
            config = DemanglerConfig()
        self._config = config
        # addr:func_name
        self._func_symbols = {}
        self.num_failed = 0

    def isSymbolProvider(self):
        return True

    def update(self, binary_info):
        self._func_symbols = {}
        self.num_failed = 0
        if binary_info.isElf():
            self._update_elf(binary_info)
        elif binary_info.isPe():
            self._update_pe(binary_info)
        LOGGER.debug("Recovered %d Rust symbols (%d kept mangled)", len(self._func_symbols), self.num_failed)

    def is_rust_binary(self, binary_info):
        """Checks for byte sequences the Rust runtime leaves in its binaries."""
        signatures = [b"RUST_BACKTRACE", b"RUST_MIN_STACK", b"/rustc/"]
        return any(sig in binary_info.raw_data for sig in signatures)

    def _parse_binary(self, binary_info):
        try:
            return lief.parse(binary_info.raw_data)
        except Exception as exc:
            LOGGER.debug("Failed to parse binary with LIEF: %s", type(exc).__name__)
            return None

    def _update_elf(self, binary_info):
        lief_binary = self._parse_binary(binary_info)
        if not lief_binary:
            return
        self._func_symbols.update(self._parse_lief_symbols(lief_binary.symtab_symbols))
        self._func_symbols.update(self._parse_lief_symbols(lief_binary.dynamic_symbols))

    def _update_pe(self, binary_info):
        lief_binary = self._parse_binary(binary_info)
        if not lief_binary:
            return
        self._func_symbols.update(self._parse_pe_exports(lief_binary))
        for address, name in self._parse_coff_symbols(lief_binary).items():
            self._func_symbols.setdefault(address, name)

    def _parse_pe_exports(self, lief_binary):
        function_symbols = {}
        for function in lief_binary.exported_functions:
            if self._is_rust_symbol(function.name):
                self._add_symbol(function_symbols, lief_binary.imagebase + function.address, function.name)
        return function_symbols

    def _parse_coff_symbols(self, lief_binary):
        function_symbols = {}
        code_base_address = None
        for section in lief_binary.sections:
            if section.characteristics & PE_SECTION_EXECUTABLE:
                code_base_address = lief_binary.imagebase + section.virtual_address
                break
        if code_base_address is None:
            return function_symbols
        for symbol in lief_binary.symbols:
            if not (hasattr(symbol.complex_type, "name") and symbol.complex_type.name == "FUNCTION"):
                continue
            if self._is_rust_symbol(symbol.name):
                self._add_symbol(function_symbols, code_base_address + symbol.value, symbol.name)
        return function_symbols

    def _parse_lief_symbols(self, symbols):
        function_symbols = {}
        for symbol in symbols:
            if symbol is not None and symbol.is_function and symbol.value != 0 and self._is_rust_symbol(symbol.name):
                self._add_symbol(function_symbols, symbol.value, symbol.name)
        return function_symbols

    def _is_rust_symbol(self, name):
        """Check if a symbol name looks like a v0 mangled Rust symbol.

        The bare "R" prefix accepted by the demangler is left out, it also starts
        plenty of C exports such as ReadFile or RAND_bytes.
        """
        return name.startswith(("_R", "__R"))

    def demangle_name(self, raw_name):
        """Demangle a raw symbol name, falling back to the name itself if configured to."""
        try:
            return demangle(raw_name, config=self._config)
        except UnableToDemangle as exc:
            LOGGER.debug("Failed to demangle Rust symbol %s: %s", raw_name, exc.kind.name)
            self.num_failed += 1
            if self._config.FALLBACK_TO_MANGLED:
                return raw_name
            return None

    def _add_symbol(self, function_symbols, address, raw_name):
        name = self.demangle_name(raw_name)
        if name:
            function_symbols[address] = name

    def getSymbol(self, address):
        return self._func_symbols.get(address, "")

    def getFunctionSymbols(self):
        return self._func_symbols
