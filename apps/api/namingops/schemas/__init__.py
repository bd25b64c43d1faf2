"""Pydantic schemas for API request/response models."""

from namingops.schemas.auth import MeResponse, TokenPayload, UserSession
from namingops.schemas.common import CamelModel, MessageResponse
from namingops.schemas.form_config import (
    FieldDescriptor,
    FormConfigurationCreate,
    FormConfigurationRead,
    FormConfigurationUpdate,
)
from namingops.schemas.naming_request import (
    NamingRequestCreate,
    NamingRequestRead,
    NamingRequestUpdate,
)

__all__ = [
    "MeResponse",
    "TokenPayload",
    "UserSession",
    "CamelModel",
    "MessageResponse",
    "FieldDescriptor",
    "FormConfigurationCreate",
    "FormConfigurationRead",
    "FormConfigurationUpdate",
    "NamingRequestCreate",
    "NamingRequestRead",
    "NamingRequestUpdate",
]
