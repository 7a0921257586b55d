"""
Pydantic schema definitions for API payloads.

Each domain (users, posts, events, participations, etc.) defines its
own Pydantic models for request and response bodies.  Schemas are
separated from the storage layer to decouple API representation from
persistence.
"""
