"""
Pydantic schema definitions for API payloads.

Schemas are separated from the database tables so the API
representation (camelCase keys, optional fields) can differ from the
stored columns.
"""
