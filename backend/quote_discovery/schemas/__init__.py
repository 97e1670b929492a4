"""Pydantic Schemas: validated records for corpus ingestion, storage and the API.

Invariants:
    - Schemas validate at system boundaries (corpus ingestion, persisted blobs, HTTP)
    - Domain enums from core/domain_types.py used for enum fields
    - camelCase on the wire, snake_case in Python

Design Decisions:
    - Separate from models: schemas are data contracts, models are persistence
"""
