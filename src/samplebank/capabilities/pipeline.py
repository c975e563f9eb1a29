"""Capability pipeline: select -> interval -> sort -> elements.

Filter and embed don't change the record sequence; they travel with the
result to the representation builder.
"""

from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .elements import MAX_ELEMENTS, ElementRange, parse_elements
from .embed import EmbedRequest, parse_embed
from .filter import ProjectionSpec, parse_filter
from .interval import TemporalWindow, parse_interval
from .records import attribute_of
from .select import SelectionCriteria, parse_select
from .sort import SortSpec, parse_sort

CAPABILITIES = ("select", "sort", "interval", "elements", "filter", "embed")


def apply(
    records: Iterable[Any],
    select: Optional[SelectionCriteria] = None,
    interval: Optional[TemporalWindow] = None,
    sort: Optional[SortSpec] = None,
    elements: Optional[ElementRange] = None,
    time_attribute: Optional[str] = None,
) -> List[Any]:
    """
    Apply parsed capabilities to a materialized record sequence.

    Args:
        records: Candidate records in store order (not modified)
        select: Selection criteria
        interval: Temporal window, matched against time_attribute
        sort: Sort keys
        elements: Inclusive index range, applied last
        time_attribute: Record attribute holding the record's instant

    Returns:
        New list of the selected, ordered, sliced records
    """
    result = list(records)
    if select is not None and not select.is_empty:
        result = select.apply(result)
    if interval is not None and not interval.is_unbounded and time_attribute:
        result = [record for record in result if interval.contains(attribute_of(record, time_attribute))]
    if sort is not None and not sort.is_empty:
        result = sort.apply(result)
    if elements is not None:
        result = elements.apply(result)
    return result


class CapabilityQuery(BaseModel):
    """All capabilities parsed from one request's query string."""

    model_config = ConfigDict(frozen=True)

    select: SelectionCriteria = SelectionCriteria()
    sort: SortSpec = SortSpec()
    interval: TemporalWindow = TemporalWindow()
    elements: Optional[ElementRange] = None
    filter: ProjectionSpec = ProjectionSpec()
    embed: EmbedRequest = EmbedRequest()

    def apply(self, records: Iterable[Any], time_attribute: Optional[str] = None) -> List[Any]:
        return apply(
            records,
            select=self.select,
            interval=self.interval,
            sort=self.sort,
            elements=self.elements,
            time_attribute=time_attribute,
        )

    def to_params(self) -> dict:
        """Canonical query-string values for the capabilities that are set."""
        params = {
            "select": self.select.to_query(),
            "sort": self.sort.to_query(),
            "interval": self.interval.to_query(),
            "elements": self.elements.to_query() if self.elements else "",
            "filter": self.filter.to_query(),
            "embed": self.embed.to_query(),
        }
        return {name: value for name, value in params.items() if value}


def parse_query(
    params: Mapping[str, Optional[str]],
    now: datetime,
    vocabulary: Optional[Iterable[str]] = None,
    max_elements: int = MAX_ELEMENTS,
) -> CapabilityQuery:
    """
    Parse every capability present in a query-string mapping.

    Unknown parameter names are ignored. ``now`` is captured by the caller
    once per request.

    Raises:
        MalformedQuery: From the first capability that fails to parse
    """
    names = list(vocabulary) if vocabulary is not None else None
    return CapabilityQuery(
        select=parse_select(params.get("select"), names),
        sort=parse_sort(params.get("sort"), names),
        interval=parse_interval(params.get("interval"), now),
        elements=parse_elements(params.get("elements"), max_elements),
        filter=parse_filter(params.get("filter"), names),
        embed=parse_embed(params.get("embed")),
    )
