"""
Test configuration - isolates configuration, cache and logs in a temp directory
and provides an in-memory stand-in for the hosted database REST endpoint.

AJOS_CONFIG_FILE must point at the temp location before the package is imported:
the logger and the configuration loader are process-wide singletons.
"""

import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import httpx
import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="ajos-tests-"))
os.environ["AJOS_CONFIG_FILE"] = str(_CONFIG_DIR / "config.toml")
for _var in ("AJOS_BACKEND_URL", "AJOS_BACKEND_KEY", "AJOS_GEMINI_API_KEY"):
    os.environ.pop(_var, None)

import ajos_backend  # noqa: E402,F401  (adds the package directory to sys.path)

from core.cache import CacheStore  # noqa: E402
from core.rate_limit import RateLimiter  # noqa: E402
from core.remote import RemoteBackend  # noqa: E402
from core.storage import Storage  # noqa: E402

BACKEND_URL = "https://project.example.co"
BACKEND_KEY = "anon-key"


class FakePostgrest:
    """In-memory tables answering the select/insert/update/delete calls RemoteBackend makes"""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.requests: List[httpx.Request] = []
        # (method, table) pairs answered with HTTP 500
        self.failures: Set[Tuple[str, str]] = set()
        # Columns the table does not have yet; writes or sorts using them get HTTP 400
        self.missing_columns: Dict[str, Set[str]] = {}

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def fail(self, method: str, table: str) -> None:
        self.failures.add((method, table))

    def requests_for(self, method: str, table: Optional[str] = None) -> List[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and (table is None or r.url.path.endswith(f"/{table}"))
        ]

    def _uses_missing(self, table: str, columns) -> bool:
        return bool(self.missing_columns.get(table, set()) & set(columns))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        table = request.url.path.rsplit("/", 1)[-1]
        method = request.method

        if (method, table) in self.failures:
            return httpx.Response(500, text="internal error")

        if method == "GET":
            order = request.url.params.get("order", "")
            sort_columns = [part.split(".")[0] for part in order.split(",") if part]
            if self._uses_missing(table, sort_columns):
                return httpx.Response(400, text="column does not exist")
            return httpx.Response(200, json=[dict(r) for r in self.rows(table)])

        record_id = request.url.params.get("id", "").replace("eq.", "", 1)

        if method == "POST":
            row = json.loads(request.content)
            if self._uses_missing(table, row):
                return httpx.Response(400, text="column does not exist")
            self.rows(table).append(row)
            return httpx.Response(201)

        if method == "PATCH":
            values = json.loads(request.content)
            if self._uses_missing(table, values):
                return httpx.Response(400, text="column does not exist")
            for row in self.rows(table):
                if row.get("id") == record_id:
                    row.update(values)
            return httpx.Response(204)

        if method == "DELETE":
            self.tables[table] = [r for r in self.rows(table) if r.get("id") != record_id]
            return httpx.Response(204)

        return httpx.Response(405)


@pytest.fixture
def fake_backend():
    return FakePostgrest()


@pytest.fixture
def cache(tmp_path):
    return CacheStore(str(tmp_path / "cache.db"))


@pytest.fixture
def remote(fake_backend):
    return RemoteBackend(
        BACKEND_URL, BACKEND_KEY, transport=httpx.MockTransport(fake_backend.handler)
    )


@pytest.fixture
def storage(cache, remote):
    return Storage(cache, remote, RateLimiter(max_requests=1000, window_seconds=60))
