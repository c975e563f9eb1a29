"""Pagination capability: ``elements=10|30`` (both ends inclusive, 0-based)."""

import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from ..utils.logging import get_logger
from .errors import MalformedQuery
from .tokenizer import CLAUSE_SEPARATOR, strip_quotes

logger = get_logger(__name__)

CAPABILITY = "elements"
MAX_ELEMENTS = 500

_INDEX_RE = re.compile(r"^\d+$")


class ElementRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @model_validator(mode="after")
    def _check_order(self) -> "ElementRange":
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"invalid element range {self.start}|{self.end}")
        return self

    @property
    def size(self) -> int:
        return self.end - self.start + 1

    def apply(self, records: List[Any]) -> List[Any]:
        return list(records[self.start:self.end + 1])

    def to_query(self) -> str:
        return f"{self.start}{CLAUSE_SEPARATOR}{self.end}"


def parse_elements(raw: Optional[str], max_size: int = MAX_ELEMENTS) -> Optional[ElementRange]:
    """
    Parse an ``elements`` capability string.

    Ranges wider than ``max_size`` (never more than 500) are clamped to
    ``start + max_size - 1`` instead of being rejected.

    Returns:
        ElementRange, or None when raw is empty

    Raises:
        MalformedQuery: Unless raw is two non-negative integers with start <= end
    """
    if raw is None:
        return None
    text = strip_quotes(raw)
    if not text:
        return None

    parts = [part.strip() for part in text.split(CLAUSE_SEPARATOR)]
    if len(parts) != 2:
        raise MalformedQuery(CAPABILITY, "expected <start>|<end>", text)
    if not all(_INDEX_RE.match(part) for part in parts):
        raise MalformedQuery(CAPABILITY, "start and end must be non-negative integers", text)

    start, end = int(parts[0]), int(parts[1])
    if start > end:
        raise MalformedQuery(CAPABILITY, "start is after end", text)

    cap = max(1, min(max_size, MAX_ELEMENTS))
    if end - start + 1 > cap:
        clamped = start + cap - 1
        logger.debug(f"Clamping elements {start}|{end} to {start}|{clamped} (max {cap})")
        end = clamped
    return ElementRange(start=start, end=end)
