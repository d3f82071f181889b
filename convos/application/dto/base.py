"""Shared pydantic configuration for the wire format."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_pascal

from convos.utils.timestamps import format_timestamp

Timestamp = Annotated[datetime, PlainSerializer(format_timestamp, return_type=str)]


class RequestBody(BaseModel):
    """Exact field set: unknown keys are rejected, required keys must be present."""

    model_config = ConfigDict(
        alias_generator=to_pascal, populate_by_name=True, extra="forbid"
    )


class ResponseBody(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal, populate_by_name=True, from_attributes=True
    )

    def to_json(self) -> dict:
        """Serialize with wire names, leaving out absent values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
