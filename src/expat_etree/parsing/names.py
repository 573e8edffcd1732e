"""Qualified-name resolution for namespace-aware tokenizers.

A namespace-aware expat reports names as ``uri}local`` (URI, separator,
local name). The resolver rewrites them into Clark notation,
``{uri}local``, and memoises every result for the lifetime of one session.
"""

from typing import Dict

DEFAULT_SEPARATOR = "}"


class QNameResolver:
    """Memoising resolver from raw tokenizer names to Clark notation.

    One resolver belongs to one parse session; a fresh session always starts
    with an empty cache.

    Examples:
        >>> resolver = QNameResolver()
        >>> resolver.resolve("http://x}y")
        '{http://x}y'
        >>> resolver.resolve("plain")
        'plain'
    """

    def __init__(self, separator: str = DEFAULT_SEPARATOR) -> None:
        if len(separator) != 1:
            raise ValueError("Namespace separator must be a single character")
        self._separator = separator
        self._names: Dict[str, str] = {}
        self.hits = 0
        self.misses = 0

    @property
    def separator(self) -> str:
        """Separator placed by the tokenizer between URI and local name."""
        return self._separator

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, raw_name: object) -> bool:
        return raw_name in self._names

    def resolve(self, raw_name: str) -> str:
        """Resolve a raw tokenizer name, consulting the cache first."""
        name = self._names.get(raw_name)
        if name is not None:
            self.hits += 1
            return name
        self.misses += 1
        name = raw_name
        if self._separator in raw_name:
            uri, _, local = raw_name.rpartition(self._separator)
            name = "{" + uri + "}" + local
        self._names[raw_name] = name
        return name
