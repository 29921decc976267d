"""
Pydantic schema definitions for API payloads.

Schemas are kept apart from the stores so the API representation of
a dog does not depend on how it is persisted.
"""
