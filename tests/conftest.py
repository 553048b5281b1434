from __future__ import annotations

import json
import base64
import logging
from typing import Any, Dict, Generator, List, Optional, Tuple
from urllib.parse import unquote

import httpx
import pytest

import regscout.utils.logger as logger_module


@pytest.fixture(autouse=True)
def reset_regscout_logging() -> Generator[None, None, None]:
    """Undo any ``setup_logging`` call so ``caplog`` keeps working."""
    yield
    root_logger = logging.getLogger("regscout")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
    logger_module._logging_configured = False


GITHUB_API = "https://api.github.test"
NPM_TEMPLATE = "https://registry.npm.test/{package}"
INDEX_URL = "https://index.test/index.json"


def encode_manifest(manifest: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap *manifest* the way the GitHub contents API returns files."""
    raw = base64.b64encode(json.dumps(manifest).encode("utf-8")).decode("ascii")
    # GitHub wraps base64 at 60 columns
    wrapped = "\n".join(raw[i:i + 60] for i in range(0, len(raw), 60))
    return {"type": "file", "encoding": "base64", "content": wrapped}


class FakeUpstream:
    """In-memory GitHub, npm and index endpoints behind an httpx MockTransport.

    Unknown repositories, branches and packages answer 404. Every request
    is recorded in :attr:`requests`.
    """

    def __init__(self) -> None:
        self.index: Dict[str, Any] = {}
        self.branches: Dict[str, List[str]] = {}
        self.tags: Dict[str, List[str]] = {}
        self.manifests: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.npm: Dict[str, Dict[str, Any]] = {}
        self.failures: Dict[str, int] = {}
        self.requests: List[httpx.Request] = []

    def add_repo(
        self,
        full_name: str,
        *,
        branches: Optional[List[str]] = None,
        tags: Optional[List[str]] = None,
        manifests: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> None:
        self.branches[full_name] = list(branches or [])
        self.tags[full_name] = list(tags or [])
        for branch, manifest in (manifests or {}).items():
            self.manifests[(full_name, branch)] = encode_manifest(manifest)

    def add_raw_manifest(self, full_name: str, branch: str, payload: Dict[str, Any]) -> None:
        """Serve *payload* verbatim as the contents-API answer."""
        self.manifests[(full_name, branch)] = payload

    def fail(self, path_fragment: str, status: int = 500) -> None:
        """Answer *status* for every URL containing *path_fragment*."""
        self.failures[path_fragment] = status

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        for fragment, status in self.failures.items():
            if fragment in url:
                return httpx.Response(status, json={"message": "boom"})

        host = request.url.host
        path = unquote(request.url.path)
        if host == "index.test":
            return httpx.Response(200, json=self.index)
        if host == "registry.npm.test":
            return self._npm(path.lstrip("/"))
        if host == "api.github.test":
            return self._github(path, request.url.params.get("ref"))
        return httpx.Response(404)

    def _npm(self, name: str) -> httpx.Response:
        if name not in self.npm:
            return httpx.Response(404, json={"error": "Not found"})
        return httpx.Response(200, json=self.npm[name])

    def _github(self, path: str, ref: Optional[str]) -> httpx.Response:
        parts = path.strip("/").split("/")
        if len(parts) < 4 or parts[0] != "repos":
            return httpx.Response(404)
        full_name = f"{parts[1]}/{parts[2]}"
        if full_name not in self.branches:
            return httpx.Response(404, json={"message": "Not Found"})

        endpoint = parts[3]
        if endpoint == "branches":
            return httpx.Response(200, json=[{"name": b} for b in self.branches[full_name]])
        if endpoint == "tags":
            return httpx.Response(200, json=[{"name": t} for t in self.tags[full_name]])
        if endpoint == "contents":
            manifest = self.manifests.get((full_name, ref or ""))
            if manifest is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=manifest)
        return httpx.Response(404)

    def github_calls(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == "api.github.test"]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()
