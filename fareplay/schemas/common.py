"""
Shared schema building blocks.

Wire payloads use camelCase field names; models use snake_case attributes
with camelCase aliases and accept either form on input.
"""
from typing import Annotated

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    # Validate only; keep the caller's exact text so signatures stay stable
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError as e:
        raise ValueError(f"Invalid URL: {e.errors()[0]['msg']}") from e
    return value


Url = Annotated[str, AfterValidator(_check_url)]


class FareModel(BaseModel):
    """Base model for Fare Protocol payloads."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_wire(self) -> dict:
        """Dump in wire form (camelCase keys, no None values)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
