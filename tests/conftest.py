"""
Shared fixtures for the link preview test suite.

Upstream services are never contacted: every outgoing request goes through an
``httpx.MockTransport`` that dispatches on host and records the call, so tests
can assert both on results and on how many upstream requests were made.
"""

from typing import AsyncGenerator, Callable, Dict, List, Optional
from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from redis import asyncio as aioredis

from preview_api.app import app
from preview_api.services.link_preview_service import (
    LinkPreviewService,
    build_link_preview_service,
    get_link_preview_dependency,
)

PUBLIC_ORIGIN = "https://app.example.org"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeClock:
    """Settable replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UpstreamRouter:
    def __init__(self) -> None:
        self.routes: Dict[str, Handler] = {}
        self.calls: List[httpx.Request] = []

    def on(self, host: str, handler: Handler) -> None:
        self.routes[host] = handler

    def on_html(self, host: str, html: str, status_code: int = 200) -> None:
        self.on(
            host,
            lambda request: httpx.Response(
                status_code, text=html, headers={"Content-Type": "text/html"}
            ),
        )

    def on_json(self, host: str, payload, status_code: int = 200) -> None:
        self.on(host, lambda request: httpx.Response(status_code, json=payload))

    def count(self, host: Optional[str] = None) -> int:
        if host is None:
            return len(self.calls)
        return sum(1 for call in self.calls if call.url.host == host)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.routes.get(request.url.host)
        if handler is None:
            return httpx.Response(404, text="not found")
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def page(
    title: str = "Example page",
    description: str = "An example description",
    image: Optional[str] = "/images/cover.png",
    extra_head: str = "",
    body: str = "",
) -> str:
    meta = [
        f'<meta property="og:title" content="{title}">',
        f'<meta property="og:description" content="{description}">',
    ]
    if image:
        meta.append(f'<meta property="og:image" content="{image}">')
    return (
        "<html><head>"
        f"<title>{title}</title>"
        + "".join(meta)
        + '<link rel="icon" href="/favicon.ico">'
        + extra_head
        + f"</head><body>{body}</body></html>"
    )


def make_fake_redis() -> AsyncMock:
    """
    AsyncMock Redis client backed by a dict. Expiry passed as ``ex`` is
    recorded in ``expiries`` but never enforced.
    """
    store: Dict[str, str] = {}
    expiries: Dict[str, Optional[int]] = {}

    async def get(key):
        return store.get(key)

    async def set(key, value, ex=None):
        store[key] = value
        expiries[key] = ex
        return True

    async def delete(*keys):
        removed = 0
        for key in keys:
            if store.pop(key, None) is not None:
                removed += 1
            expiries.pop(key, None)
        return removed

    mock = AsyncMock(spec=aioredis.Redis)
    mock.get = AsyncMock(side_effect=get)
    mock.set = AsyncMock(side_effect=set)
    mock.delete = AsyncMock(side_effect=delete)
    mock.ping = AsyncMock(return_value=True)
    mock.store = store
    mock.expiries = expiries
    return mock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> UpstreamRouter:
    return UpstreamRouter()


@pytest.fixture
def fake_redis() -> AsyncMock:
    return make_fake_redis()


@pytest.fixture
async def service(
    upstream: UpstreamRouter, clock: FakeClock
) -> AsyncGenerator[LinkPreviewService, None]:
    svc = build_link_preview_service(
        transport=upstream.transport,
        clock=clock,
        public_origin=PUBLIC_ORIGIN,
    )
    yield svc
    await svc.aclose()


@pytest.fixture
async def service_factory(upstream: UpstreamRouter, clock: FakeClock):
    """Build a service with upstream credentials configured."""
    created: List[LinkPreviewService] = []

    def build(**kwargs) -> LinkPreviewService:
        svc = build_link_preview_service(
            transport=upstream.transport,
            clock=clock,
            public_origin=PUBLIC_ORIGIN,
            **kwargs,
        )
        created.append(svc)
        return svc

    yield build
    for svc in created:
        await svc.aclose()


@pytest.fixture
async def api_client(service: LinkPreviewService) -> AsyncGenerator[AsyncClient, None]:
    async def override() -> LinkPreviewService:
        return service

    app.dependency_overrides[get_link_preview_dependency] = override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
