"""Filtering capability: ``filter=balance::+|name::+``.

``+`` asks for only the listed attributes, ``-`` asks for everything but
them. The result is advisory: the representation builder may honor it
fully, partly or not at all.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .errors import MalformedQuery
from .tokenizer import join_clauses, tokenize, validate_attributes

CAPABILITY = "filter"


class ProjectionSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.include and not self.exclude

    def allows(self, name: str) -> bool:
        if name.startswith("_"):
            return True
        if self.include:
            return name in self.include
        return name not in self.exclude

    def project(self, representation: Mapping[str, Any]) -> Dict[str, Any]:
        """Copy a representation keeping only the allowed top-level keys."""
        return {key: value for key, value in representation.items() if self.allows(key)}

    def to_query(self) -> str:
        if self.include:
            return join_clauses(f"{name}::+" for name in self.include)
        return join_clauses(f"{name}::-" for name in self.exclude)


def parse_filter(raw: Optional[str], vocabulary=None) -> ProjectionSpec:
    """
    Parse a ``filter`` capability string.

    Raises:
        MalformedQuery: If a clause isn't ``attribute::+`` or ``attribute::-``,
            or include and exclude clauses are mixed
    """
    clauses = tokenize(raw, CAPABILITY)
    validate_attributes(clauses, vocabulary, CAPABILITY)

    include: List[str] = []
    exclude: List[str] = []
    for clause in clauses:
        if clause.operand or clause.suffix is None:
            raise MalformedQuery(CAPABILITY, "clause must be <attribute>::+ or <attribute>::-", clause.to_query())
        target = include if clause.suffix == "+" else exclude
        if clause.attribute not in target:
            target.append(clause.attribute)

    if include and exclude:
        raise MalformedQuery(CAPABILITY, "include (+) and exclude (-) can't be mixed", raw)
    return ProjectionSpec(include=tuple(include), exclude=tuple(exclude))
