"""Shared pydantic configuration for API shapes."""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    A resource as returned by the API.

    camelCase on the wire, snake_case in Python. Unknown fields are ignored
    so backend additions don't break parsing.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def accept_document_id(cls, data: Any) -> Any:
        """Some endpoints return the raw document with `_id` instead of `id`."""
        if isinstance(data, dict) and "_id" in data and "id" not in data:
            data = {**data, "id": str(data["_id"])}
        return data


class PayloadModel(BaseModel):
    """Request body sent to the API. Unset fields are left out."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
