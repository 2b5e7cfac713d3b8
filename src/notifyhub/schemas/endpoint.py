"""Pydantic v2 schemas around the notification endpoint API.

The endpoint body itself is the polymorphic wire object handled by
:mod:`notifyhub.notification.codec`; these schemas cover the parts of
requests and responses that sit next to it (labels, links, filters).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

RESOURCE_TYPE = "notificationEndpoints"


class EndpointFilter(BaseModel):
    """Filter for listing notification endpoints.

    ``resource_ids`` is filled in by the service from the ownership
    mappings when a user filter is requested.
    """

    org_id: str | None = None
    user_id: str | None = None
    endpoint_type: str | None = None
    resource_ids: list[str] | None = None


class LabelAttributes(BaseModel):
    """Label as embedded in endpoint responses."""

    id: str
    name: str
    properties: dict[str, str] = Field(default_factory=dict)


class EndpointLinks(BaseModel):
    """Related-resource links for a single endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    self_: str = Field(alias="self")
    labels: str
    members: str
    owners: str

    @classmethod
    def for_endpoint(cls, prefix: str, endpoint_id: str) -> EndpointLinks:
        base = f"{prefix}/{endpoint_id}"
        return cls(
            self_=base,
            labels=f"{base}/labels",
            members=f"{base}/members",
            owners=f"{base}/owners",
        )


class AddLabelRequest(BaseModel):
    """Request body for attaching a label to an endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    label_id: str = Field(..., alias="labelID", min_length=1)
