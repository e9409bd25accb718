"""RadixBench core - a radix tree over byte-string keys."""

import logging

from .errors import InvalidKeyError, RadixTreeError
from .pretty_print import pretty_print, render
from .radix_tree import RadixNode, Tree, common_prefix_length, index_for_prefix

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Tree",
    "RadixNode",
    "common_prefix_length",
    "index_for_prefix",
    "render",
    "pretty_print",
    "RadixTreeError",
    "InvalidKeyError",
]
