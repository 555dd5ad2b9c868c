#!/usr/bin/python

import contextlib
import io
import logging
import os
import tempfile
import unittest

from .context import config

import demangle

logging.disable(logging.CRITICAL)


class CliTestSuite(unittest.TestCase):
    """Command line front end"""

    def testDemangleSymbols(self):
        output = io.StringIO()
        num_failed = demangle.demangleSymbols(["_RNvC3foo3bar\n", "\n", "_ZN3foo3barE\n"], config, output=output)
        self.assertEqual(1, num_failed)
        self.assertEqual("foo::bar\n_ZN3foo3barE\n", output.getvalue())

    def testDemangleSymbolsStrict(self):
        output = io.StringIO()
        num_failed = demangle.demangleSymbols(["_RZ", "_R"], config, strict=True, output=output)
        self.assertEqual(2, num_failed)
        self.assertEqual("_RZ: INVALID\n_R: SYMBOL_TOO_SMALL\n", output.getvalue())

    def testMainExitStatus(self):
        with contextlib.redirect_stdout(io.StringIO()) as output:
            self.assertEqual(0, demangle.main(["_RC8demangle"]))
        self.assertEqual("demangle\n", output.getvalue())
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertEqual(0, demangle.main(["_RZ"]))
            self.assertEqual(1, demangle.main(["-s", "_RZ"]))

    def testMissingFile(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            self.assertEqual(1, demangle.main(["-f", os.path.join(tmp_dir, "missing.bin")]))

    def testListBinarySymbolsOfUnknownFormat(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            file_path = os.path.join(tmp_dir, "blob.bin")
            with open(file_path, "wb") as fout:
                fout.write(b"neither ELF nor PE")
            output = io.StringIO()
            self.assertEqual(0, demangle.listBinarySymbols(file_path, config, output=output))
            self.assertEqual("", output.getvalue())


if __name__ == "__main__":
    unittest.main()
