import logging
import os

from rdemangle.v0.ast import MAX_COMPLEXITY, MAX_DEPTH


class DemanglerConfig(object):

    # note to self: always change this in setup.py as well!
    VERSION = "0.3.0"
    PROJECT_ROOT = str(os.path.abspath(os.sep.join([os.path.dirname(os.path.abspath(__file__)), ".."])))

    LOG_LEVEL = logging.INFO
    LOG_FORMAT = "%(asctime)-15s: %(name)-32s - %(message)s"

    # upper bounds for a single parse, symbols exceeding either are rejected as too complex
    MAX_COMPLEXITY = MAX_COMPLEXITY
    MAX_DEPTH = MAX_DEPTH

    # drop ".llvm.<hash>" suffixes added by LTO
    STRIP_LLVM_SUFFIX = True
    # append any other ".suffix" (e.g. ".cold") to the demangled name
    KEEP_SUFFIX = True
    # label providers keep the mangled name if demangling fails
    FALLBACK_TO_MANGLED = True
