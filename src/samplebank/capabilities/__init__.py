"""API capability query engine.

Six small grammars a client uses to shape a collection response:
select, sort, interval, elements, filter and embed. Parsers raise
MalformedQuery; applying parsed capabilities never fails.
"""

from .elements import MAX_ELEMENTS, ElementRange, parse_elements
from .embed import EmbedItem, EmbedRequest, parse_embed
from .errors import MalformedQuery
from .filter import ProjectionSpec, parse_filter
from .interval import TemporalWindow, parse_interval
from .pipeline import CAPABILITIES, CapabilityQuery, apply, parse_query
from .records import AttributeBag, Record
from .select import SelectionCriteria, SelectionCriterion, parse_select
from .sort import SortKey, SortSpec, parse_sort
from .tokenizer import Clause, tokenize

__all__ = [
    "CAPABILITIES",
    "MAX_ELEMENTS",
    "AttributeBag",
    "CapabilityQuery",
    "Clause",
    "ElementRange",
    "EmbedItem",
    "EmbedRequest",
    "MalformedQuery",
    "ProjectionSpec",
    "Record",
    "SelectionCriteria",
    "SelectionCriterion",
    "SortKey",
    "SortSpec",
    "TemporalWindow",
    "apply",
    "parse_elements",
    "parse_embed",
    "parse_filter",
    "parse_interval",
    "parse_query",
    "parse_select",
    "parse_sort",
    "tokenize",
]
