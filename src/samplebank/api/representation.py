"""Representation building: applies filter and embed to response bodies.

Both capabilities are advisory. Projection is honored on top-level
attributes only, and embed concepts without a resolver are skipped.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from ..capabilities import EmbedRequest, ProjectionSpec
from ..utils.logging import get_logger
from .models import RecordModel

logger = get_logger(__name__)

# Resolver: projection name -> embedded value, or None if the projection isn't offered
EmbedResolver = Callable[[str], Optional[Any]]


def resolve_embeds(embed: EmbedRequest, resolvers: Mapping[str, EmbedResolver]) -> Dict[str, Any]:
    """
    Resolve requested embeds with the resolvers a resource offers.

    The first request for a concept is keyed by the concept name; further
    requests for the same concept with another projection are keyed
    ``concept::projection``.
    """
    embedded: Dict[str, Any] = {}
    for item in embed.items:
        resolver = resolvers.get(item.concept)
        if resolver is None:
            logger.debug(f"Ignoring embed of unknown concept '{item.concept}'")
            continue
        key = item.concept if item.concept not in embedded else item.to_query()
        if key in embedded:
            continue
        value = resolver(item.projection)
        if value is None:
            logger.debug(f"Ignoring embed '{item.to_query()}': projection not offered")
            continue
        embedded[key] = value
    return embedded


def build_representation(
    record: RecordModel,
    projection: Optional[ProjectionSpec] = None,
    embedded: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    body = record.to_representation()
    if embedded:
        body["_embedded"] = embedded
    if projection is not None and not projection.is_empty:
        body = projection.project(body)
    return body


def build_collection(
    name: str,
    href: str,
    items: List[Dict[str, Any]],
    total: int,
    query: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Wrap a page of representations.

    Args:
        name: Collection name (accounts, transactions, events)
        href: Self link of the collection
        items: Item representations, already paged
        total: Number of records in the store before any capability
        query: Canonical capability values the page was built with
    """
    return {
        "_links": {"self": {"href": href}},
        name: items,
        "count": len(items),
        "total": total,
        "query": query or {},
    }
