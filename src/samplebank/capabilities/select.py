"""Selection capability: ``select=balance::100+|balance::1000-``.

Clauses are grouped per attribute. Without a suffix the operands of an
attribute form a set (any of them may match). With a ``+``/``-`` suffix
they form an inclusive range: ``+`` marks the lower bound and ``-`` the
upper bound. Criteria on different attributes must all hold.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .errors import MalformedQuery
from .records import attribute_of, coerce_operand, compare_values, normalize_value
from .tokenizer import Clause, join_clauses, tokenize, validate_attributes

CAPABILITY = "select"


class SelectionCriterion(BaseModel):
    """Match rule for one attribute, either a value set or a range."""

    model_config = ConfigDict(frozen=True)

    attribute: str
    values: Tuple[str, ...] = Field(default=(), description="Set mode operands (OR)")
    lower: Optional[str] = Field(default=None, description="Inclusive lower bound")
    upper: Optional[str] = Field(default=None, description="Inclusive upper bound")

    @property
    def is_range(self) -> bool:
        return not self.values

    def matches(self, record: Any) -> bool:
        value = attribute_of(record, self.attribute)
        if value is None:
            return False
        if not self.is_range:
            return any(_equals(value, operand) for operand in self.values)
        if self.lower is not None and not _at_least(value, self.lower):
            return False
        if self.upper is not None and not _at_most(value, self.upper):
            return False
        return True

    def to_query(self) -> str:
        if not self.is_range:
            return join_clauses(f"{self.attribute}::{value}" for value in self.values)
        parts = []
        if self.lower is not None:
            parts.append(f"{self.attribute}::{self.lower}+")
        if self.upper is not None:
            parts.append(f"{self.attribute}::{self.upper}-")
        return join_clauses(parts)


class SelectionCriteria(BaseModel):
    """All selection criteria of one request, conjoined."""

    model_config = ConfigDict(frozen=True)

    criteria: Tuple[SelectionCriterion, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.criteria

    def matches(self, record: Any) -> bool:
        return all(criterion.matches(record) for criterion in self.criteria)

    def apply(self, records: List[Any]) -> List[Any]:
        return [record for record in records if self.matches(record)]

    def to_query(self) -> str:
        return join_clauses(criterion.to_query() for criterion in self.criteria)


def _equals(value: Any, operand: str) -> bool:
    coerced = coerce_operand(value, operand)
    if coerced is None:
        return False
    return normalize_value(value) == coerced


def _at_least(value: Any, bound: str) -> bool:
    coerced = coerce_operand(value, bound)
    return coerced is not None and compare_values(value, coerced) >= 0


def _at_most(value: Any, bound: str) -> bool:
    coerced = coerce_operand(value, bound)
    return coerced is not None and compare_values(value, coerced) <= 0


def _build_criterion(attribute: str, clauses: List[Clause]) -> SelectionCriterion:
    bounded = [clause for clause in clauses if clause.suffix is not None]
    if not bounded:
        values: List[str] = []
        for clause in clauses:
            if clause.operand not in values:
                values.append(clause.operand)
        return SelectionCriterion(attribute=attribute, values=tuple(values))

    if len(bounded) != len(clauses):
        raise MalformedQuery(
            CAPABILITY,
            f"attribute '{attribute}' mixes exact values and range bounds",
            join_clauses(clause.to_query() for clause in clauses),
        )

    lowers = [clause.operand for clause in bounded if clause.suffix == "+"]
    uppers = [clause.operand for clause in bounded if clause.suffix == "-"]
    if len(lowers) > 1:
        raise MalformedQuery(CAPABILITY, f"attribute '{attribute}' has more than one lower bound", "|".join(lowers))
    if len(uppers) > 1:
        raise MalformedQuery(CAPABILITY, f"attribute '{attribute}' has more than one upper bound", "|".join(uppers))

    return SelectionCriterion(
        attribute=attribute,
        lower=lowers[0] if lowers else None,
        upper=uppers[0] if uppers else None,
    )


def parse_select(raw: Optional[str], vocabulary=None) -> SelectionCriteria:
    """
    Parse a ``select`` capability string.

    Args:
        raw: Raw query-string value
        vocabulary: Optional attribute names the target record type exposes

    Returns:
        SelectionCriteria (empty when raw is empty)

    Raises:
        MalformedQuery: On syntax errors, empty operands, mixed set/range
            clauses or repeated bounds for one attribute
    """
    clauses = tokenize(raw, CAPABILITY)
    validate_attributes(clauses, vocabulary, CAPABILITY)

    grouped: Dict[str, List[Clause]] = {}
    for clause in clauses:
        if not clause.operand:
            raise MalformedQuery(CAPABILITY, "clause has no value", clause.to_query())
        grouped.setdefault(clause.attribute, []).append(clause)

    return SelectionCriteria(
        criteria=tuple(_build_criterion(attribute, group) for attribute, group in grouped.items())
    )
