"""
Shared schema building blocks
"""
from datetime import datetime, timezone
from typing import Annotated, ClassVar, Optional, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator


def to_naive_utc(value: datetime) -> datetime:
    # Columns store naive UTC; offsets from clients are normalised here
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


NaiveDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


class UpdateSchema(BaseModel):
    """
    Base for partial updates.

    Unknown keys are rejected (422). Fields listed in `not_nullable` map to
    NOT NULL columns, so an explicit null for them is rejected as well.
    """
    model_config = ConfigDict(extra="forbid")

    not_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class AddressBlock(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
