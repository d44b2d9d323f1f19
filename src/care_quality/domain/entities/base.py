"""Shared base for records exchanged with the document store."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar, Self

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from care_quality.core.exceptions import RecordValidationError


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]
"""Datetime normalised to UTC; naive values are taken to be UTC already."""


class Record(BaseModel):
    """Immutable record with camelCase document field names.

    Python code uses snake_case attributes; ``to_document`` and
    ``from_document`` translate to and from the stored shape.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        frozen=True,
        extra="ignore",
    )

    collection: ClassVar[str] = ""

    id: str | None = None

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Self:
        """Validate a stored document into a record.

        Raises:
            RecordValidationError: If the document is missing fields or holds invalid values.
        """
        try:
            return cls.model_validate(dict(document))
        except ValidationError as e:
            errors = [{"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in e.errors()]
            raise RecordValidationError(cls.collection, document.get("id"), errors) from e

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document shape, without the id."""
        return self.model_dump(by_alias=True, exclude={"id"})
