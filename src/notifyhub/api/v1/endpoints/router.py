"""Notification endpoint CRUD and label routes.

Endpoint bodies are the flat polymorphic wire object produced by
:mod:`notifyhub.notification.codec`, so create and replace read the raw
request body instead of a fixed pydantic schema. Responses add the
endpoint's ``labels`` and ``links`` next to the encoded fields.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from notifyhub.api.deps import get_endpoint_service, get_user_id
from notifyhub.config import get_settings
from notifyhub.errors import EndpointError, InvalidConfig, InvalidRequest
from notifyhub.notification.codec import decode, encode, load_object
from notifyhub.notification.endpoint import NotificationEndpoint
from notifyhub.notification.update import ChangeSet, FullReplace
from notifyhub.schemas.endpoint import (
    AddLabelRequest,
    EndpointFilter,
    EndpointLinks,
    LabelAttributes,
)
from notifyhub.schemas.pagination import build_links, encode_cursor
from notifyhub.services.endpoint_service import EndpointService

router = APIRouter()

COLLECTION_PATH = "/notification-endpoints"


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def _http_error(exc: EndpointError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def _collection_prefix() -> str:
    return f"{get_settings().api_prefix}{COLLECTION_PATH}"


def _endpoint_response(
    endpoint: NotificationEndpoint, labels: list[LabelAttributes]
) -> dict[str, Any]:
    """Encode an endpoint and attach its labels and related links."""
    payload = encode(endpoint)
    payload["labels"] = [label.model_dump() for label in labels]
    payload["links"] = EndpointLinks.for_endpoint(
        _collection_prefix(), endpoint.base.id
    ).model_dump(by_alias=True)
    return payload


def _page_size(raw: str | None) -> int:
    """Parse ``page[size]``, falling back to the default and capping at the maximum."""
    settings = get_settings()
    if raw is None:
        return settings.default_page_size
    try:
        size = int(raw)
    except ValueError:
        size = 0
    if size < 1:
        raise InvalidRequest(f"page[size] must be a positive integer, got {raw!r}")
    return min(size, settings.max_page_size)


def _label_ids(payload: dict[str, Any]) -> list[str]:
    labels = payload.get("labels") or []
    if not isinstance(labels, list) or not all(isinstance(i, str) for i in labels):
        raise InvalidConfig("labels must be a list of label IDs")
    return labels


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("", status_code=201)
async def create_endpoint(
    request: Request,
    user_id: str | None = Depends(get_user_id),
    service: EndpointService = Depends(get_endpoint_service),
) -> dict[str, Any]:
    """Create a notification endpoint and attach any labels it names."""
    try:
        payload = load_object(await request.body())
        label_ids = _label_ids(payload)
        endpoint = decode(payload)
        endpoint = await service.create(endpoint, user_id=user_id)
    except EndpointError as exc:
        raise _http_error(exc) from exc

    labels = await service.attach_labels(endpoint.base.id, label_ids)
    return _endpoint_response(endpoint, labels)


@router.get("")
async def list_endpoints(
    request: Request,
    org_id: str | None = Query(default=None, alias="orgID"),
    user: str | None = Query(default=None),
    endpoint_type: str | None = Query(default=None, alias="type"),
    page_after: str | None = Query(default=None, alias="page[after]"),
    page_size: str | None = Query(default=None, alias="page[size]"),
    service: EndpointService = Depends(get_endpoint_service),
) -> dict[str, Any]:
    """List notification endpoints with cursor-based pagination.

    ``orgID``, ``user`` and ``type`` narrow the result; ``user`` keeps only
    endpoints the user owns or is a member of.
    """
    filter = EndpointFilter(org_id=org_id, user_id=user, endpoint_type=endpoint_type)

    try:
        size = _page_size(page_size)
        endpoints, pagination_meta = await service.find(
            filter, page_size=size, after=page_after
        )
    except EndpointError as exc:
        raise _http_error(exc) from exc

    params = {
        name: value
        for name, value in (("orgID", org_id), ("user", user), ("type", endpoint_type))
        if value
    }
    next_cursor = None
    if pagination_meta.has_next and endpoints:
        last = endpoints[-1].base
        next_cursor = encode_cursor(last.created_at, last.id)
    base_url = str(request.url).split("?")[0]
    links = build_links(base_url, size, next_cursor=next_cursor, params=params)

    items = []
    for endpoint in endpoints:
        labels = await service.resource_labels(endpoint.base.id)
        items.append(_endpoint_response(endpoint, labels))

    return {
        "notificationEndpoints": items,
        "meta": pagination_meta.model_dump(),
        "links": links.model_dump(exclude_none=True),
    }


@router.get("/{endpoint_id}")
async def get_endpoint(
    endpoint_id: str,
    service: EndpointService = Depends(get_endpoint_service),
) -> dict[str, Any]:
    """Get a single notification endpoint."""
    try:
        endpoint = await service.find_by_id(endpoint_id)
    except EndpointError as exc:
        raise _http_error(exc) from exc

    labels = await service.resource_labels(endpoint_id)
    return _endpoint_response(endpoint, labels)


@router.put("/{endpoint_id}")
async def replace_endpoint(
    endpoint_id: str,
    request: Request,
    service: EndpointService = Depends(get_endpoint_service),
) -> dict[str, Any]:
    """Replace a notification endpoint with the full body sent.

    Echoing a ``"secret: ..."`` reference keeps the stored secret; an empty
    or omitted secret clears it.
    """
    try:
        endpoint = decode(await request.body())
        endpoint.base.id = endpoint_id
        endpoint = await service.update(endpoint_id, FullReplace(endpoint))
    except EndpointError as exc:
        raise _http_error(exc) from exc

    labels = await service.resource_labels(endpoint_id)
    return _endpoint_response(endpoint, labels)


@router.patch("/{endpoint_id}")
async def patch_endpoint(
    endpoint_id: str,
    request: Request,
    service: EndpointService = Depends(get_endpoint_service),
) -> dict[str, Any]:
    """Update name, description or status of a notification endpoint."""
    try:
        change_set = ChangeSet.from_payload(load_object(await request.body()))
        endpoint = await service.update(endpoint_id, change_set)
    except EndpointError as exc:
        raise _http_error(exc) from exc

    labels = await service.resource_labels(endpoint_id)
    return _endpoint_response(endpoint, labels)


@router.delete("/{endpoint_id}", status_code=204)
async def delete_endpoint(
    endpoint_id: str,
    service: EndpointService = Depends(get_endpoint_service),
) -> None:
    """Delete a notification endpoint along with its secrets and mappings."""
    try:
        await service.delete(endpoint_id)
    except EndpointError as exc:
        raise _http_error(exc) from exc


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


@router.get("/{endpoint_id}/labels")
async def list_endpoint_labels(
    endpoint_id: str,
    service: EndpointService = Depends(get_endpoint_service),
) -> dict[str, Any]:
    try:
        labels = await service.labels_for(endpoint_id)
    except EndpointError as exc:
        raise _http_error(exc) from exc

    return {
        "labels": [label.model_dump() for label in labels],
        "links": {"self": f"{_collection_prefix()}/{endpoint_id}/labels"},
    }


@router.post("/{endpoint_id}/labels", status_code=201)
async def add_endpoint_label(
    endpoint_id: str,
    body: AddLabelRequest,
    service: EndpointService = Depends(get_endpoint_service),
) -> dict[str, Any]:
    """Attach an existing label to a notification endpoint."""
    try:
        label = await service.add_label(endpoint_id, body.label_id)
    except EndpointError as exc:
        raise _http_error(exc) from exc

    return {
        "label": label.model_dump(),
        "links": {"self": f"{_collection_prefix()}/{endpoint_id}/labels"},
    }


@router.delete("/{endpoint_id}/labels/{label_id}", status_code=204)
async def remove_endpoint_label(
    endpoint_id: str,
    label_id: str,
    service: EndpointService = Depends(get_endpoint_service),
) -> None:
    """Detach a label from a notification endpoint."""
    try:
        await service.remove_label(endpoint_id, label_id)
    except EndpointError as exc:
        raise _http_error(exc) from exc
