"""
Shared fixtures.

The storefront backend is replaced by an in-process fake served through
httpx.MockTransport, so every test exercises the real client, controllers
and surfaces without network access.
"""
import json
from typing import Any, Optional

import httpx
import pytest

from shopclone_server.config import Settings
from shopclone_server.storefront_client import StorefrontClient
from shopclone_server.store import Storefront

SEED_PRODUCTS = [
    {
        "id": "p1",
        "title": "Wireless Headphones",
        "price": 30.0,
        "category": "Electronics",
        "rating": 4.2,
        "image": "https://img.example.com/headphones.jpg",
        "buy_url": "https://shop.example.com/headphones",
        "description": "Over-ear, 30h battery",
    },
    {
        "id": "p2",
        "title": "Camping Lantern",
        "price": 20.0,
        "category": "Outdoors",
        "image": "https://img.example.com/lantern.jpg",
    },
    {
        "id": "p3",
        "title": "Ceramic Mug",
        "price": 8.5,
        "category": "Home",
    },
]


class FakeBackend:
    """Minimal stand-in for the storefront REST backend."""

    def __init__(self, products: Optional[list[dict[str, Any]]] = None) -> None:
        self.products: list[dict[str, Any]] = list(SEED_PRODUCTS if products is None else products)
        self.requests: list[httpx.Request] = []
        self.orders: list[dict[str, Any]] = []
        self.created: list[dict[str, Any]] = []
        self.fail_products = False
        self.order_response: tuple[int, Any] = (200, {"order_id": "ord-1001"})
        self.create_response: Optional[tuple[int, Any]] = None

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path == "/api/products":
            if self.fail_products:
                return httpx.Response(500, text="boom")
            q = request.url.params.get("q", "").lower()
            category = request.url.params.get("category", "")
            matches = [
                p
                for p in self.products
                if (not q or q in p["title"].lower()) and (not category or p["category"] == category)
            ]
            return httpx.Response(200, json=matches)

        if request.method == "POST" and path == "/api/products/seed":
            self.products = list(SEED_PRODUCTS)
            return httpx.Response(200, json={"inserted": len(SEED_PRODUCTS)})

        if request.method == "POST" and path == "/api/products":
            body = json.loads(request.content)
            self.created.append(body)
            if self.create_response is not None:
                status, payload = self.create_response
                return httpx.Response(status, json=payload)
            product = {"id": f"p{len(self.products) + 1}", **body}
            self.products.append(product)
            return httpx.Response(201, json=product)

        if request.method == "POST" and path == "/api/orders":
            body = json.loads(request.content)
            self.orders.append(body)
            status, payload = self.order_response
            return httpx.Response(status, json=payload)

        return httpx.Response(404, json={"detail": "Not Found"})


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def settings() -> Settings:
    return Settings(backend_url="http://backend.test")


@pytest.fixture
def client(backend: FakeBackend, settings: Settings) -> StorefrontClient:
    return StorefrontClient(settings, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def storefront(client: StorefrontClient) -> Storefront:
    return Storefront(client=client)
