from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from honeycomb_mcp.client import HoneycombAPI
from honeycomb_mcp.config import EnvironmentRegistry, HoneycombConfig, HoneycombEnvironment

Route = Union[httpx.Response, List[httpx.Response], Callable[[httpx.Request], httpx.Response]]


def _copy(response: httpx.Response) -> httpx.Response:
    return httpx.Response(response.status_code, content=response.content, headers=response.headers)


class FakeHoneycomb:
    """Routes requests by (method, path) and records every request it sees."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, route: Route) -> None:
        self.routes[(method, path)] = route

    def json(self, method: str, path: str, body: Any, status: int = 200) -> None:
        self.add(method, path, httpx.Response(status, json=body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(route, list):
            # Sequence of responses; the last one repeats
            return _copy(route.pop(0) if len(route) > 1 else route[0])
        if callable(route):
            return route(request)
        return _copy(route)

    def paths(self, method: str) -> List[str]:
        return [r.url.path for r in self.requests if r.method == method]


def make_registry() -> EnvironmentRegistry:
    return EnvironmentRegistry(
        HoneycombConfig(
            environments=[
                HoneycombEnvironment(name="prod", base_url="https://api.honeycomb.io", api_key="abc"),
                HoneycombEnvironment(name="eu", base_url="https://api.eu1.honeycomb.io/", api_key="xyz"),
            ]
        )
    )


@pytest.fixture
def fake() -> FakeHoneycomb:
    return FakeHoneycomb()


@pytest.fixture
def registry() -> EnvironmentRegistry:
    return make_registry()


@pytest.fixture
def api(fake: FakeHoneycomb, registry: EnvironmentRegistry) -> HoneycombAPI:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake.handler))
    return HoneycombAPI(registry, http_client=http_client)
