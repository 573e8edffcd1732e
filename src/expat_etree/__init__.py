"""Expat ElementTree.

An XML element-tree API built incrementally from the event stream of the
expat tokenizer, with namespace-aware names in {uri}local form, a
configurable entity table and structured parse errors.

Progressive API Disclosure:
- Level 1: Simple functions - from_string(), load()
- Level 2: Configured sessions - ParserSession with ParserConfig, fed whole
  or in chunks
- Level 3: Custom event sources - TreeBuilder driven directly
"""

__version__ = "0.1.0"
__author__ = "Expat ElementTree Team"

# Level 1: Simple functions
from .api import ElementTree, from_string, load

# Level 2: Configured sessions
from .parsing import ParserSession, ParserState
from .shared import (
    EmptyDocumentError,
    ParseError,
    ParserConfig,
    ParserStateError,
    TagMismatchError,
    TokenizerError,
    UnclosedElementsError,
    UndefinedEntityError,
)

# Level 3: Tree building
from .tree import Element, TreeBuilder, create_element, sub_element

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "ElementTree",
    "from_string",
    "load",

    # Level 2: Sessions and configuration
    "ParserConfig",
    "ParserSession",
    "ParserState",

    # Level 3: Tree building
    "Element",
    "TreeBuilder",
    "create_element",
    "sub_element",

    # Errors
    "EmptyDocumentError",
    "ParseError",
    "ParserStateError",
    "TagMismatchError",
    "TokenizerError",
    "UnclosedElementsError",
    "UndefinedEntityError",
]
