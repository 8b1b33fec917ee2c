"""
Pydantic schema definitions for API payloads.

Each resource (events, nudges) defines its own response models.
Stored documents are validated into these models on the way out, which
keeps MongoDB specifics (``ObjectId``, naive UTC timestamps) out of the
JSON responses.
"""
