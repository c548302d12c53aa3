"""Base schema configuration for all Pydantic models.

All API and downstream schemas inherit from one of the public classes:
    - APIRequest: incoming request bodies
    - APIResponse: outgoing response bodies
    - DownstreamResponse: payloads received from the recipe catalog
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # Accept both snake_case and camelCase
        use_enum_values=True,
        validate_default=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Incoming request bodies; unknown properties are ignored."""

    model_config = ConfigDict(extra="ignore")


class APIResponse(_BaseSchema):
    """Outgoing response bodies; only declared properties are emitted."""

    model_config = ConfigDict(extra="forbid")


class DownstreamResponse(_BaseSchema):
    """Responses received from the catalog.

    Extra fields are ignored - the catalog returns far more than we use.
    """

    model_config = ConfigDict(extra="ignore")
