"""Pydantic schemas for API request/response models."""

from notifyhub.schemas.endpoint import (
    AddLabelRequest,
    EndpointFilter,
    EndpointLinks,
    LabelAttributes,
)
from notifyhub.schemas.pagination import PaginationLinks, PaginationMeta

__all__ = [
    "AddLabelRequest",
    "EndpointFilter",
    "EndpointLinks",
    "LabelAttributes",
    "PaginationLinks",
    "PaginationMeta",
]
