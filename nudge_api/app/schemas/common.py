"""
Shared pieces of the document schemas.

Documents come straight out of MongoDB, so ``ObjectId`` values are
rendered as 24-hex strings and naive timestamps (pymongo returns UTC
without tzinfo) are marked as UTC before validation.  Unknown fields
are kept: the collections are schema-less and the API only interprets
the fields declared on each model.

Other writers share the database, so a declared field may hold a value
of the wrong type (``NaN`` for a number, a string for a nested object).
Such values are read as ``None`` instead of failing the whole response.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)


def normalise_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    # NaN and infinities have no JSON form.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: normalise_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalise_value(item) for item in value]
    return value


class DocumentModel(BaseModel):
    """Base for models read from a collection."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., alias="_id", examples=["65a1f0c2e4b0a1b2c3d4e5f6"])

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalise_value(data)
        return data

    @field_validator("*", mode="wrap")
    @classmethod
    def _tolerate_bad_values(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        try:
            return handler(value)
        except ValidationError:
            logger.warning(
                "Ignoring unreadable %s.%s value %r", cls.__name__, info.field_name, value
            )
            return None


class PaginationBase(BaseModel):
    currentPage: int
    totalPages: int
    limit: int
