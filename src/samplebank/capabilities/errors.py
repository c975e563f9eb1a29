"""Errors raised while parsing capability query strings."""

from typing import Optional


class MalformedQuery(ValueError):
    """
    A capability string could not be parsed.

    Raised only while parsing; applying already-parsed capabilities never
    raises. The transport layer maps this to a "bad request" outcome.
    """

    def __init__(self, capability: str, reason: str, raw_fragment: Optional[str] = None):
        self.capability = capability
        self.reason = reason
        self.raw_fragment = raw_fragment
        message = f"{capability}: {reason}"
        if raw_fragment is not None:
            message = f"{message} ({raw_fragment!r})"
        super().__init__(message)

    def to_dict(self) -> dict:
        """Error body for the transport layer."""
        return {
            "error": "malformed_query",
            "capability": self.capability,
            "reason": self.reason,
            "fragment": self.raw_fragment,
        }
