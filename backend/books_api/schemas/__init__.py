"""Pydantic Schemas: request/response validation for the /book endpoints.

Invariants:
    - Schemas validate at the system boundary (request bodies, responses)
"""
