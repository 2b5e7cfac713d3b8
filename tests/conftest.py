"""
Shared test fixtures for the notification endpoint test suite.

Provides in-memory collaborators for the endpoint service, deterministic
id and clock sources, and an async test client wrapping the FastAPI app
via ASGITransport.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport

from notifyhub.api.deps import get_endpoint_service
from notifyhub.app import create_app
from notifyhub.errors import Conflict, NotFound
from notifyhub.notification.endpoint import NotificationEndpoint
from notifyhub.schemas.endpoint import EndpointFilter, LabelAttributes
from notifyhub.schemas.pagination import PaginationMeta, decode_cursor
from notifyhub.services.endpoint_service import EndpointService

ORG_ID = "50f7ba1150f7ba11"
NOW = datetime(2026, 1, 1, tzinfo=UTC)


# ─── In-memory collaborators ──────────────────────────────────────────


class InMemoryEndpointStore:
    """Dict-backed EndpointStore; hands out deep copies like a real store."""

    def __init__(self) -> None:
        self.endpoints: dict[str, NotificationEndpoint] = {}

    async def get(self, endpoint_id, *, for_update=False):
        if endpoint_id not in self.endpoints:
            raise NotFound(f"Notification endpoint not found: {endpoint_id}")
        return self.endpoints[endpoint_id].model_copy(deep=True)

    async def put(self, endpoint):
        base = endpoint.base
        for other in self.endpoints.values():
            if (
                other.base.id != base.id
                and other.base.org_id == base.org_id
                and other.base.name == base.name
            ):
                raise Conflict(f"Notification endpoint named '{base.name}' already exists")
        self.endpoints[base.id] = endpoint.model_copy(deep=True)

    async def delete(self, endpoint_id):
        if endpoint_id not in self.endpoints:
            raise NotFound(f"Notification endpoint not found: {endpoint_id}")
        del self.endpoints[endpoint_id]

    async def find(self, filter: EndpointFilter, page_size=20, after=None):
        items = sorted(
            self.endpoints.values(), key=lambda e: (e.base.created_at, e.base.id)
        )
        if filter.org_id:
            items = [e for e in items if e.base.org_id == filter.org_id]
        if filter.endpoint_type:
            items = [e for e in items if e.endpoint_type == filter.endpoint_type]
        if filter.resource_ids is not None:
            items = [e for e in items if e.base.id in filter.resource_ids]
        if after:
            cursor = decode_cursor(after)
            items = [e for e in items if (e.base.created_at, e.base.id) > cursor]

        page = items[:page_size]
        meta = PaginationMeta(has_next=len(items) > page_size, has_prev=after is not None)
        return [e.model_copy(deep=True) for e in page], meta


class InMemorySecretStore:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.fail_deletes = False

    async def put_secret(self, key, value):
        self.values[key] = value

    async def get_secret(self, key):
        return self.values.get(key)

    async def delete_secret(self, key):
        if self.fail_deletes:
            raise RuntimeError("secret store unavailable")
        self.values.pop(key, None)


class InMemoryLabelStore:
    def __init__(self) -> None:
        self.labels: dict[str, LabelAttributes] = {}
        self.mappings: set[tuple[str, str]] = set()
        self.failing_labels: set[str] = set()
        self.fail_cascade = False

    def add(self, label_id, name, **properties):
        self.labels[label_id] = LabelAttributes(id=label_id, name=name, properties=properties)
        return self.labels[label_id]

    async def find_label_by_id(self, label_id):
        return self.labels.get(label_id)

    async def find_resource_labels(self, resource_id):
        return sorted(
            (self.labels[lid] for lid, rid in self.mappings if rid == resource_id),
            key=lambda label: label.name,
        )

    async def create_label_mapping(self, label_id, resource_id, resource_type):
        if label_id in self.failing_labels:
            raise RuntimeError(f"cannot map label {label_id}")
        if label_id not in self.labels:
            raise NotFound(f"Label not found: {label_id}")
        self.mappings.add((label_id, resource_id))

    async def delete_label_mapping(self, label_id, resource_id):
        if (label_id, resource_id) not in self.mappings:
            raise NotFound(f"Label {label_id} is not attached to {resource_id}")
        self.mappings.discard((label_id, resource_id))

    async def delete_resource_label_mappings(self, resource_id):
        if self.fail_cascade:
            raise RuntimeError("label store unavailable")
        self.mappings = {m for m in self.mappings if m[1] != resource_id}


class InMemoryOwnershipStore:
    def __init__(self) -> None:
        self.mappings: list[tuple[str, str, str]] = []

    async def create_owner_mapping(self, resource_id, resource_type, user_id):
        self.mappings.append((resource_id, resource_type, user_id))

    async def find_resource_ids_for_user(self, user_id, resource_type):
        return [r for r, t, u in self.mappings if u == user_id and t == resource_type]

    async def delete_resource_mappings(self, resource_id):
        self.mappings = [m for m in self.mappings if m[0] != resource_id]


class SequentialIDGenerator:
    """Yields the given ids in order, then numbered fallbacks."""

    def __init__(self, *ids: str) -> None:
        self.ids = list(ids)
        self.count = 0

    def generate(self):
        if self.ids:
            return self.ids.pop(0)
        self.count += 1
        return f"{self.count:016x}"


class SteppingClock:
    """Starts at NOW and advances one second per call."""

    def __init__(self, start: datetime = NOW) -> None:
        self.current = start

    def now(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


# ─── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def store():
    return InMemoryEndpointStore()


@pytest.fixture
def secrets():
    return InMemorySecretStore()


@pytest.fixture
def labels():
    return InMemoryLabelStore()


@pytest.fixture
def ownership():
    return InMemoryOwnershipStore()


@pytest.fixture
def id_generator():
    return SequentialIDGenerator("020f755c3c082000", "020f755c3c082001", "020f755c3c082002")


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def service(store, secrets, labels, ownership, id_generator, clock):
    return EndpointService(
        store=store,
        secrets=secrets,
        labels=labels,
        ownership=ownership,
        id_generator=id_generator,
        clock=clock,
    )


@pytest.fixture
def app(service):
    """FastAPI app with the in-memory service injected."""
    app = create_app()
    app.dependency_overrides[get_endpoint_service] = lambda: service
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(app):
    """Async HTTP client wrapping the app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
