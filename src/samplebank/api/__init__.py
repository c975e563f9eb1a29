"""API layer: canonical query surface for the REST transport.

This module is the thin adapter between query-string values and the
capability engine. Key rules:

1. No SQLAlchemy imports - only call repo functions (Session for type hints)
2. Capability strings are parsed here, once per request, with one clock read
3. Return plain representation dicts ready for HAL rendering
4. Writes never commit; the caller owns the transaction
"""
