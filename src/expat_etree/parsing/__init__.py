"""Tokenizer-facing layer: name and entity resolution and parse sessions.

Key Components:
    ParserSession: Facade driving one tokenizer session into a TreeBuilder
    QNameResolver: Per-session memo turning uri}local names into {uri}local
    EntityResolver: Entity table for references the tokenizer cannot expand
    ExpatTokenizer: Tokenizer binding built on xml.parsers.expat
"""

from .entities import EntityResolver, entity_name
from .names import QNameResolver
from .session import ParserSession, ParserState
from .tokenizer import ExpatTokenizer, Tokenizer, TokenSink

__all__ = [
    "EntityResolver",
    "ExpatTokenizer",
    "ParserSession",
    "ParserState",
    "QNameResolver",
    "TokenSink",
    "Tokenizer",
    "entity_name",
]
