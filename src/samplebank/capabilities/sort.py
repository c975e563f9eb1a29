"""Sort capability: ``sort=balance|lastUpdate-``.

Keys are applied left to right; later keys only break ties left by earlier
ones. ``+`` (or no suffix) is ascending, ``-`` is descending. The
``attribute::+`` / ``attribute::-`` spelling is accepted as well.
"""

from functools import cmp_to_key
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .errors import MalformedQuery
from .records import attribute_of, compare_values
from .tokenizer import join_clauses, tokenize, validate_attributes

CAPABILITY = "sort"


class SortKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    attribute: str
    descending: bool = False

    def compare(self, left: Any, right: Any) -> int:
        result = compare_values(attribute_of(left, self.attribute), attribute_of(right, self.attribute))
        return -result if self.descending else result

    def to_query(self) -> str:
        return f"{self.attribute}-" if self.descending else self.attribute


class SortSpec(BaseModel):
    """Ordered sort keys with a composite comparator."""

    model_config = ConfigDict(frozen=True)

    keys: Tuple[SortKey, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.keys

    def compare(self, left: Any, right: Any) -> int:
        for key in self.keys:
            result = key.compare(left, right)
            if result:
                return result
        return 0

    def apply(self, records: List[Any]) -> List[Any]:
        """Return a new, stably sorted list."""
        if not self.keys:
            return list(records)
        return sorted(records, key=cmp_to_key(self.compare))

    def to_query(self) -> str:
        return join_clauses(key.to_query() for key in self.keys)


def parse_sort(raw: Optional[str], vocabulary=None) -> SortSpec:
    """
    Parse a ``sort`` capability string.

    Raises:
        MalformedQuery: On an empty clause or a direction other than + or -
    """
    clauses = tokenize(raw, CAPABILITY, allow_bare=True)
    validate_attributes(clauses, vocabulary, CAPABILITY)

    keys = []
    for clause in clauses:
        if clause.operand:
            raise MalformedQuery(CAPABILITY, f"unknown sort direction '{clause.operand}'", clause.to_query())
        keys.append(SortKey(attribute=clause.attribute, descending=clause.suffix == "-"))
    return SortSpec(keys=tuple(keys))
