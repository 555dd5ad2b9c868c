import argparse
import logging
import os
import sys

from rdemangle.common.BinaryInfo import BinaryInfo
from rdemangle.DemanglerConfig import DemanglerConfig
from rdemangle.labelprovider.RustSymbolProvider import RustSymbolProvider
from rdemangle.v0 import UnableToDemangle, demangle

LOGGER = logging.getLogger(__name__)


def demangleSymbols(symbols, config, strict=False, output=None):
    """Print one line per symbol, return the number of symbols that could not be demangled."""
    output = output if output is not None else sys.stdout
    num_failed = 0
    for symbol in symbols:
        symbol = symbol.strip()
        if not symbol:
            continue
        try:
            print(demangle(symbol, config=config), file=output)
        except UnableToDemangle as exc:
            num_failed += 1
            LOGGER.debug("%s: %s", exc.kind.name, exc)
            if strict:
                print("{}: {}".format(symbol, exc.kind.name), file=output)
            else:
                print(symbol, file=output)
    return num_failed


def listBinarySymbols(file_path, config, output=None):
    output = output if output is not None else sys.stdout
    binary_info = BinaryInfo.fromFile(file_path)
    provider = RustSymbolProvider(config)
    if not provider.is_rust_binary(binary_info):
        LOGGER.warning("No Rust runtime signatures found in %s", file_path)
    provider.update(binary_info)
    for address, name in sorted(provider.getFunctionSymbols().items()):
        print("0x{:x}: {}".format(address, name), file=output)
    return provider.num_failed


def main(argv=None):
    parser = argparse.ArgumentParser(description='Demangle Rust v0 symbol names, given as arguments, on stdin, or taken from a binary.')
    parser.add_argument('-f', '--file', type=str, default='', help='List the demangled function symbols of an ELF or PE file.')
    parser.add_argument('-s', '--strict', action='store_true', default=False, help='Report failures with their error kind and exit with status 1.')
    parser.add_argument('-v', '--verbose', action='store_true', default=False, help='Enable debug logging.')
    parser.add_argument('symbols', type=str, nargs='*', help='Mangled symbol names, read from stdin if omitted.')
    args = parser.parse_args(argv)

    config = DemanglerConfig()
    if args.verbose:
        config.LOG_LEVEL = logging.DEBUG
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    if args.file:
        if not os.path.isfile(args.file):
            LOGGER.error("No such file: %s", args.file)
            return 1
        num_failed = listBinarySymbols(args.file, config)
    else:
        num_failed = demangleSymbols(args.symbols or sys.stdin, config, strict=args.strict)
    return 1 if (args.strict and num_failed) else 0


if __name__ == "__main__":
    sys.exit(main())
