"""Shared schema base classes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for API payloads.

    The web client speaks camelCase JSON; attributes stay snake_case in Python.
    Both spellings are accepted on input, camelCase is emitted on output.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    msg: str
