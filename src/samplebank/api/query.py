"""Request-scoped capability parsing shared by the API functions."""

from typing import Any, Dict, Mapping, Optional, Type

from ..capabilities import CapabilityQuery, parse_query
from ..config.loader import BASE_CONFIG, get_max_elements, get_time_attribute
from ..utils.time import Clock, SystemClock
from .models import RecordModel


def parse_request(
    params: Mapping[str, Optional[str]],
    record_type: Type[RecordModel],
    clock: Optional[Clock] = None,
    config: Optional[Dict[str, Any]] = None,
) -> CapabilityQuery:
    """
    Parse the capability parameters of one request.

    The clock is read exactly once here so every capability of the request
    sees the same ``now``.

    Raises:
        MalformedQuery: If any capability string is malformed
    """
    now = (clock or SystemClock()).now()
    return parse_query(
        params,
        now,
        vocabulary=record_type.vocabulary(),
        max_elements=get_max_elements(config or BASE_CONFIG),
    )


def time_attribute(concept: str, config: Optional[Dict[str, Any]] = None) -> str:
    return get_time_attribute(config or BASE_CONFIG, concept)
