"""Upload parsers package.

Public API
----------
BaseParser        — Abstract base; inherit to create a new parser.
ParseResult       — Dataclass returned by every ``parser.parse()`` call.
EntityParser      — CSV/XLSX parser for the importable entities.
ENTITY_COLUMNS    — Column layout (name, type, required) per entity.

Usage example::

    from marine_ops.parsers import EntityParser

    result = EntityParser(raw_bytes, "work_progress", "progress.xlsx").parse()
    print(result.summary())
"""

from marine_ops.parsers.base_parser import BaseParser, CellError, ParseResult
from marine_ops.parsers.entity_parser import ENTITY_COLUMNS, EntityParser, ImportColumn

__all__ = [
    "BaseParser",
    "CellError",
    "ParseResult",
    "EntityParser",
    "ENTITY_COLUMNS",
    "ImportColumn",
]
