"""Entity table consulted for entity references the tokenizer leaves alone."""

from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

ENTITY_PREFIX = "&"
ENTITY_SUFFIX = ";"


def entity_name(raw_text: str) -> Optional[str]:
    """Extract the entity name from raw ``&name;`` text.

    Returns None when the text is not an entity reference. Character
    references (``&#...;``) are never reported here by the tokenizer and are
    rejected as well.
    """
    if (
        len(raw_text) > 2
        and raw_text.startswith(ENTITY_PREFIX)
        and raw_text.endswith(ENTITY_SUFFIX)
        and raw_text[1] != "#"
    ):
        return raw_text[1:-1]
    return None


class EntityResolver:
    """Read-only mapping from entity name to replacement text.

    The table is copied on construction, so later changes to the source
    mapping do not affect a running session.
    """

    def __init__(self, entities: Optional[Mapping[str, str]] = None) -> None:
        self._entities = MappingProxyType(dict(entities or {}))

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def resolve(self, name: str) -> Optional[str]:
        """Return the replacement text for name, or None if undefined."""
        return self._entities.get(name)

    def names(self) -> List[str]:
        """Declared entity names, in no particular order."""
        return list(self._entities)

    def items(self) -> List[Tuple[str, str]]:
        """Declared (name, replacement) pairs."""
        return list(self._entities.items())
