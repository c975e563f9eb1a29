"""Composition capability: ``embed=transaction::list|owner::sparse``."""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .errors import MalformedQuery
from .tokenizer import join_clauses, tokenize

CAPABILITY = "embed"


class EmbedItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    concept: str
    projection: str

    def to_query(self) -> str:
        return f"{self.concept}::{self.projection}"


class EmbedRequest(BaseModel):
    """Requested related objects, in request order. Duplicates are kept."""

    model_config = ConfigDict(frozen=True)

    items: Tuple[EmbedItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.items

    def concepts(self) -> List[str]:
        seen: List[str] = []
        for item in self.items:
            if item.concept not in seen:
                seen.append(item.concept)
        return seen

    def for_concept(self, concept: str) -> List[EmbedItem]:
        return [item for item in self.items if item.concept == concept]

    def to_query(self) -> str:
        return join_clauses(item.to_query() for item in self.items)


def parse_embed(raw: Optional[str]) -> EmbedRequest:
    """
    Parse an ``embed`` capability string.

    Only syntax is checked here; whether a concept can be embedded is up to
    the representation builder, which may ignore it.
    """
    items = []
    for clause in tokenize(raw, CAPABILITY):
        if not clause.operand or clause.suffix is not None:
            raise MalformedQuery(CAPABILITY, "clause must be <concept>::<projection>", clause.to_query())
        items.append(EmbedItem(concept=clause.attribute, projection=clause.operand))
    return EmbedRequest(items=tuple(items))
