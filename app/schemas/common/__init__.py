"""Shared schema building blocks."""

from app.schemas.common.base import BaseDBSchema, BaseSchema
from app.schemas.common.response import ApiResponse, ErrorResponse, success_response

__all__ = ["BaseSchema", "BaseDBSchema", "ApiResponse", "ErrorResponse", "success_response"]
