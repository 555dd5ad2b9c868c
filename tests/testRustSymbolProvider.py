import unittest
from unittest import mock

from rdemangle.common.BinaryInfo import BinaryInfo
from rdemangle.DemanglerConfig import DemanglerConfig
from rdemangle.labelprovider.RustSymbolProvider import RustSymbolProvider


class MockSymbol:
    def __init__(self, name, value, is_function=True):
        self.name = name
        self.value = value
        self.is_function = is_function
        self.complex_type = type("obj", (object,), {"name": "FUNCTION"})


class MockLiefBinary:
    def __init__(self, symbols, exported_functions=None, sections=None):
        self.exported_functions = exported_functions if exported_functions else []
        self.symtab_symbols = symbols
        self.dynamic_symbols = []
        self.imagebase = 0x400000
        self.sections = sections if sections else []
        self.symbols = symbols


class MockSection:
    def __init__(self, characteristics, virtual_address):
        self.characteristics = characteristics
        self.virtual_address = virtual_address


class MockExport:
    def __init__(self, name, address):
        self.name = name
        self.address = address


class TestRustSymbolProvider(unittest.TestCase):
    def test_elf_symbols(self):
        provider = RustSymbolProvider(None)

        sym_legacy = MockSymbol("_ZN3foo3barE", 0x1000)
        sym_v0 = MockSymbol("_RNvC6_123foo3bar", 0x2000)
        sym_normal = MockSymbol("main", 0x3000)
        sym_data = MockSymbol("_RNvC3foo4DATA", 0x4000, is_function=False)
        sym_undefined = MockSymbol("_RNvC3foo3baz", 0)

        results = provider._parse_lief_symbols([sym_legacy, sym_v0, sym_normal, sym_data, sym_undefined, None])

        self.assertEqual({0x2000: "123foo::bar"}, results)

    def test_bare_r_prefix_is_not_rust(self):
        provider = RustSymbolProvider(None)
        results = provider._parse_lief_symbols([MockSymbol("RAND_bytes", 0x10), MockSymbol("ReadFile", 0x20), MockSymbol("__RNvC3foo3bar", 0x30)])
        self.assertEqual({0x30: "foo::bar"}, results)
        self.assertEqual(0, provider.num_failed)
        self.assertFalse(provider._is_rust_symbol("RNvC3foo3bar"))
        self.assertTrue(provider._is_rust_symbol("_RNvC3foo3bar"))

    def test_fallback_to_mangled(self):
        provider = RustSymbolProvider(None)
        results = provider._parse_lief_symbols([MockSymbol("_RZbroken", 0x1000), MockSymbol("_RNvC3foo3bar", 0x2000)])
        self.assertEqual("_RZbroken", results[0x1000])
        self.assertEqual("foo::bar", results[0x2000])
        self.assertEqual(1, provider.num_failed)

    def test_drop_failures(self):
        config = DemanglerConfig()
        config.FALLBACK_TO_MANGLED = False
        provider = RustSymbolProvider(config)
        results = provider._parse_lief_symbols([MockSymbol("_RZbroken", 0x1000)])
        self.assertEqual({}, results)
        self.assertEqual(1, provider.num_failed)

    def test_pe_exports(self):
        provider = RustSymbolProvider(None)
        exp_v0 = MockExport("_RNvC3foo3bar", 0x1000)
        exp_normal = MockExport("ReadFile", 0x2000)
        mock_binary = MockLiefBinary([], exported_functions=[exp_v0, exp_normal])

        results = provider._parse_pe_exports(mock_binary)

        self.assertEqual({0x401000: "foo::bar"}, results)

    def test_coff_symbols(self):
        provider = RustSymbolProvider(None)
        sections = [MockSection(0x40000040, 0x4000), MockSection(0x60000020, 0x1000)]
        mock_binary = MockLiefBinary([MockSymbol("_RNvC3foo3bar", 0x10)], sections=sections)

        results = provider._parse_coff_symbols(mock_binary)

        self.assertEqual({0x401010: "foo::bar"}, results)

    def test_coff_symbols_without_code_section(self):
        provider = RustSymbolProvider(None)
        mock_binary = MockLiefBinary([MockSymbol("_RNvC3foo3bar", 0x10)])
        self.assertEqual({}, provider._parse_coff_symbols(mock_binary))

    def test_update_elf(self):
        provider = RustSymbolProvider(None)
        mock_binary = MockLiefBinary([MockSymbol("_RNCNvC8rustdump6decodes0_", 0x1234)])
        with mock.patch("rdemangle.labelprovider.RustSymbolProvider.lief.parse", return_value=mock_binary):
            provider.update(BinaryInfo(b"\x7fELF" + b"\x00" * 60))
        self.assertEqual("rustdump::decode::{closure#1}", provider.getSymbol(0x1234))
        self.assertEqual("", provider.getSymbol(0x9999))
        self.assertEqual({0x1234: "rustdump::decode::{closure#1}"}, provider.getFunctionSymbols())

    def test_update_pe_prefers_exports(self):
        provider = RustSymbolProvider(None)
        sections = [MockSection(0x60000020, 0x1000)]
        exports = [MockExport("_RNvC3foo6export", 0x1000)]
        mock_binary = MockLiefBinary([MockSymbol("_RNvC3foo4coff", 0x0)], exported_functions=exports, sections=sections)
        with mock.patch("rdemangle.labelprovider.RustSymbolProvider.lief.parse", return_value=mock_binary):
            provider.update(BinaryInfo(b"MZ" + b"\x00" * 62))
        self.assertEqual("foo::export", provider.getSymbol(0x401000))

    def test_update_unknown_format(self):
        provider = RustSymbolProvider(None)
        with mock.patch("rdemangle.labelprovider.RustSymbolProvider.lief.parse") as lief_parse:
            provider.update(BinaryInfo(b"random binary data"))
        lief_parse.assert_not_called()
        self.assertEqual({}, provider.getFunctionSymbols())

    def test_unparseable_binary(self):
        provider = RustSymbolProvider(None)
        with mock.patch("rdemangle.labelprovider.RustSymbolProvider.lief.parse", return_value=None):
            provider.update(BinaryInfo(b"\x7fELF"))
        self.assertEqual({}, provider.getFunctionSymbols())

    def test_detection_logic(self):
        provider = RustSymbolProvider(None)
        self.assertTrue(provider.is_rust_binary(BinaryInfo(b"some code... /rustc/ ... more code")))
        self.assertFalse(provider.is_rust_binary(BinaryInfo(b"random binary data")))


if __name__ == "__main__":
    unittest.main()
