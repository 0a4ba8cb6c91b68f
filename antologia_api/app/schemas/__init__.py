"""
Pydantic schema definitions for API payloads.

Each entity (authors, anthology entries, likes) defines its own Pydantic
models for request and response bodies.  Write payloads are validated
explicitly by the service layer through ``common.parse_payload`` before
anything reaches the database.
"""
