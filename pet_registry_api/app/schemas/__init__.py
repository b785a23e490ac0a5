"""
Pydantic schema definitions for API payloads.

Schemas are separated from the record store to decouple the API
representation from persistence.  The stored record itself is the
``Pet`` model; request bodies only carry the fields a caller may set.
"""
