"""Shared base classes for stored documents and their subdocuments."""

from datetime import datetime
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from hrpulse.utils.datetime_utils import utc_now

DocumentT = TypeVar("DocumentT", bound="BaseDocument")


class BaseDocument(BaseModel):
    """A document stored in its own collection.

    ``id`` is the integer ``_id`` taken from the counters collection
    (``MongoDBOperations.next_sequence``) before the insert; it is ``None``
    only for documents that have not been stored yet.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_assignment=True)

    id: Optional[int] = Field(default=None, alias="_id")
    created_at: datetime = Field(default_factory=utc_now)

    def to_dict(self, **kwargs: Any) -> Dict[str, Any]:
        """Document as written to MongoDB (``_id`` key, enums as values)."""
        return self.model_dump(by_alias=True, **kwargs)

    @classmethod
    def from_dict(cls: Type[DocumentT], data: Dict[str, Any]) -> DocumentT:
        return cls.model_validate(data)


class TimestampedDocument(BaseDocument):
    """Document whose updates also stamp ``updated_at``."""

    updated_at: datetime = Field(default_factory=utc_now)


class EmbeddedDocument(BaseModel):
    """Subdocument stored inside a parent document, with no ``_id`` of its own."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


__all__ = ["BaseDocument", "TimestampedDocument", "EmbeddedDocument"]
