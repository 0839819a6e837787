"""Shared fixtures for content search tests."""

import asyncio
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx
import pytest

from content_search.config import Config
from content_search.config.loader import ENV_OVERRIDES
from content_search.models import ContentRecord, RankedField, RequestConfig
from content_search.provider import ContentProvider
from content_search.synonyms import SynonymTable

MIRRORS = [
    "https://mirror-a.test/content.json",
    "https://mirror-b.test/content.json",
    "https://mirror-c.test/content.json",
]

CONTENT_TREE = {
    "pathList": [
        {
            "name": "home",
            "title": "Home",
            "description": "Welcome page",
            "children": [
                {
                    "name": "imprint",
                    "title": "Imprint",
                    "description": "Imprint page of the company",
                    "children": [{"name": "imprint-leaf"}],
                },
                {
                    "name": "insurance",
                    "title": "Autoversicherung",
                    "description": "auto insurance for every car",
                    "children": [{"name": "insurance-leaf"}],
                },
                {"name": "contact", "title": "Contact"},
            ],
        }
    ]
}

ASSET_TREE = {
    "pathList": [
        {
            "name": "brochure",
            "type": "dam:Asset",
            "title": "Car brochure",
            "description": "Brochure download",
            "children": [{"name": "rendition"}],
        }
    ]
}


class StubProvider(ContentProvider):
    """Provider over plain dict nodes, recording hook calls."""

    def __init__(self, urls: Optional[List[str]] = None) -> None:
        self.urls = list(urls if urls is not None else MIRRORS)
        self.calls: List[str] = []
        self.fields = [
            # name, weight, synonym weight, full match
            ("title", 3, 1, False),
            ("description", 1, 1, False),
            ("keywords", 2, 1, True),
        ]

    def flatten(self, node: Mapping[str, Any], type_tag: Optional[str]) -> ContentRecord:
        fields = {
            key: node[key]
            for key in ("name", "title", "description", "keywords")
            if key in node
        }
        return ContentRecord(fields, type_tag=type_tag or node.get("type", "cq:Page"))

    def ranked_fields(self, record: ContentRecord) -> List[RankedField]:
        return [
            RankedField(record.get(name), weight, synonym_weight, full_match)
            for name, weight, synonym_weight, full_match in self.fields
        ]

    def source_urls(self, request_config: Optional[RequestConfig] = None) -> List[str]:
        if request_config is None:
            return self.urls
        return [f"{url}?type={request_config.type}" for url in self.urls]

    def request_options(self) -> Dict[str, Any]:
        return {"headers": {"Authorization": "Basic dGVzdDp0ZXN0"}}

    def record_key(self, record: ContentRecord) -> Optional[str]:
        return record.get("name")

    async def before_setup(self) -> None:
        self.calls.append("before_setup")

    async def after_setup(self) -> None:
        self.calls.append("after_setup")

    async def before_refresh(self) -> None:
        self.calls.append("before_refresh")

    async def after_refresh(self) -> None:
        self.calls.append("after_refresh")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep configuration environment variables out of tests."""
    for name in list(ENV_OVERRIDES) + ["ENVIRONMENT"]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def synonym_table() -> SynonymTable:
    return SynonymTable(
        [
            ["auto", "car"],
            ["impressum", "imprint"],
            ["haus", "gebäude"],
        ]
    )


@pytest.fixture
def config() -> Config:
    return Config.from_dict(
        {
            "service": {"name": "test-search"},
            "refresh": {"interval_minutes": 60, "enable_manual_trigger": True},
            "fetch": {"timeout": 1},
        }
    )


@pytest.fixture
def content_tree() -> Dict[str, Any]:
    return CONTENT_TREE


@pytest.fixture
def asset_tree() -> Dict[str, Any]:
    return ASSET_TREE


class MirrorStub:
    """Routes mock requests by host and counts them."""

    def __init__(self) -> None:
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def route(self, host: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[host] = handler

    def handler(self, request: httpx.Request):
        self.requests.append(request)
        route = self.routes.get(request.url.host)
        if route is None:
            raise httpx.ConnectError("connection refused", request=request)
        return route(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def hosts(self) -> List[str]:
        return [request.url.host for request in self.requests]


@pytest.fixture
def mirrors() -> MirrorStub:
    return MirrorStub()


def json_response(data: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    """Build a handler answering with a JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=data)

    return handler


@pytest.fixture
def respond_json():
    return json_response


@pytest.fixture
def mirror_urls() -> List[str]:
    return list(MIRRORS)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll until predicate holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def wait_for():
    return wait_until
