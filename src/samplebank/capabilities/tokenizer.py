"""Clause tokenizer shared by all capability grammars.

A capability string is a pipe-delimited list of clauses, each of the form
``attribute::operand`` with an optional trailing ``+`` or ``-`` suffix:

    balance::100+|balance::1000-
"""

from typing import Iterable, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import MalformedQuery

CLAUSE_SEPARATOR = "|"
KEY_SEPARATOR = "::"
SUFFIXES = ("+", "-")


class Clause(BaseModel):
    """One ``attribute::operand[suffix]`` unit of a capability string."""

    model_config = ConfigDict(frozen=True)

    attribute: str = Field(..., description="Attribute or keyword the clause applies to")
    operand: str = Field(default="", description="Operand with any suffix removed")
    suffix: Optional[Literal["+", "-"]] = Field(default=None, description="Trailing + or -")

    def to_query(self) -> str:
        """Render the canonical clause text."""
        if not self.operand:
            if self.suffix is None:
                return self.attribute
            return f"{self.attribute}{KEY_SEPARATOR}{self.suffix}"
        return f"{self.attribute}{KEY_SEPARATOR}{self.operand}{self.suffix or ''}"


def strip_quotes(raw: str) -> str:
    """Trim whitespace and one pair of enclosing double quotes."""
    text = raw.strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        text = text[1:-1].strip()
    return text


def _peel_suffix(text: str) -> tuple[str, Optional[str]]:
    if text and text[-1] in SUFFIXES:
        return text[:-1].rstrip(), text[-1]
    return text, None


def tokenize(raw: Optional[str], capability: str, allow_bare: bool = False) -> List[Clause]:
    """
    Split a raw capability string into clauses.

    Args:
        raw: Raw query-string value (None or empty means capability absent)
        capability: Capability name, used for error reporting
        allow_bare: Accept clauses without '::' (bare attribute names)

    Returns:
        Clauses in the order they were given

    Raises:
        MalformedQuery: If a clause is empty, lacks '::' (unless allow_bare),
            ends in a bare '::' (when allow_bare) or has no attribute name
    """
    if raw is None:
        return []
    text = strip_quotes(raw)
    if not text:
        return []

    clauses: List[Clause] = []
    for segment in text.split(CLAUSE_SEPARATOR):
        fragment = segment.strip()
        if not fragment:
            raise MalformedQuery(capability, "empty clause", text)

        if KEY_SEPARATOR in fragment:
            attribute, operand = fragment.split(KEY_SEPARATOR, 1)
            attribute = attribute.strip()
            operand, suffix = _peel_suffix(operand.strip())
            if allow_bare and not operand and suffix is None:
                raise MalformedQuery(capability, f"clause has nothing after '{KEY_SEPARATOR}'", fragment)
        elif allow_bare:
            attribute, suffix = _peel_suffix(fragment)
            operand = ""
        else:
            raise MalformedQuery(capability, f"clause is missing '{KEY_SEPARATOR}'", fragment)

        if not attribute:
            raise MalformedQuery(capability, "clause has no attribute name", fragment)
        clauses.append(Clause(attribute=attribute, operand=operand, suffix=suffix))

    return clauses


def validate_attributes(
    clauses: Iterable[Clause],
    vocabulary: Optional[Iterable[str]],
    capability: str,
) -> None:
    """
    Check clause attributes against a record type's exposed vocabulary.

    Attribute names are case-sensitive. A None vocabulary accepts anything.
    """
    if vocabulary is None:
        return
    allowed = set(vocabulary)
    for clause in clauses:
        if clause.attribute not in allowed:
            raise MalformedQuery(capability, f"unknown attribute '{clause.attribute}'", clause.to_query())


def join_clauses(parts: Iterable[str]) -> str:
    """Join rendered clauses with the clause separator."""
    return CLAUSE_SEPARATOR.join(parts)
