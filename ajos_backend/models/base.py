"""
Base model configuration
Shared pydantic base for entity records and API request bodies
"""

from pydantic import BaseModel as PydanticBaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseModel(PydanticBaseModel):
    """camelCase on the wire, snake_case in Python.

    Client payloads and cached records use camelCase keys; backend rows use the
    snake_case field names. Unknown keys are rejected, so backend rows are filtered
    to known columns before validation.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def model_dump(self, **kwargs):
        """Dump with camelCase keys unless by_alias=False is passed."""
        kwargs.setdefault("by_alias", True)
        return super().model_dump(**kwargs)
