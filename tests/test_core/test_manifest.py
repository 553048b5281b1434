from __future__ import annotations

import json
import base64
import pytest
from typing import Any, Dict

from regscout.core.manifest import ManifestInspector, decode_manifest, extract_snapshot
from regscout.core.source_control import SourceControlProber
from regscout.exceptions import SourceControlError
from regscout.models import ManifestSnapshot, RepositoryRef
from regscout.utils.http import HTTPClient

REF = RepositoryRef("scope", "pkg-a")
CORE = "@elizaos/core"


def _payload(text: str) -> Dict[str, Any]:
    return {"content": base64.b64encode(text.encode("utf-8")).decode("ascii")}


def _inspector(upstream: Any) -> ManifestInspector:
    http = HTTPClient(transport=upstream.transport())
    return ManifestInspector(SourceControlProber(http, "https://api.github.test"))


@pytest.mark.unit
class TestDecodeManifest:
    def test_decodes_base64_json(self) -> None:
        payload = _payload(json.dumps({"version": "1.0.0"}))
        assert decode_manifest(payload) == {"version": "1.0.0"}

    def test_tolerates_line_breaks(self) -> None:
        raw = base64.b64encode(json.dumps({"name": "x" * 100}).encode()).decode()
        wrapped = "\n".join(raw[i:i + 60] for i in range(0, len(raw), 60))

        assert decode_manifest({"content": wrapped}) == {"name": "x" * 100}

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"content": None},
            {"content": "!!!not base64!!!"},
            _payload("{not json"),
            _payload("[1, 2, 3]"),
        ],
        ids=["missing", "null", "bad-base64", "bad-json", "not-object"],
    )
    def test_malformed(self, payload: Dict[str, Any]) -> None:
        with pytest.raises(SourceControlError) as exc_info:
            decode_manifest(payload, repository="scope/pkg-a")

        assert exc_info.value.repository == "scope/pkg-a"


@pytest.mark.unit
class TestExtractSnapshot:
    def test_dependencies(self) -> None:
        manifest = {"version": "0.9.0", "dependencies": {CORE: "^0.5.0"}}
        assert extract_snapshot(manifest, CORE) == ManifestSnapshot("0.9.0", "^0.5.0")

    def test_dependencies_win_over_peer(self) -> None:
        manifest = {
            "dependencies": {CORE: "^1.0.0"},
            "peerDependencies": {CORE: "^0.1.0"},
        }
        assert extract_snapshot(manifest, CORE).dependency_range == "^1.0.0"

    def test_peer_dependencies_fallback(self) -> None:
        manifest = {"dependencies": {"left-pad": "1.0.0"}, "peerDependencies": {CORE: "workspace:*"}}
        assert extract_snapshot(manifest, CORE).dependency_range == "workspace:*"

    def test_empty_declaration_falls_through(self) -> None:
        manifest = {"dependencies": {CORE: ""}, "peerDependencies": {CORE: "^1.0.0"}}
        assert extract_snapshot(manifest, CORE).dependency_range == "^1.0.0"

    def test_dev_dependencies_are_ignored(self) -> None:
        manifest = {"version": "1.0.0", "devDependencies": {CORE: "^1.0.0"}}
        assert extract_snapshot(manifest, CORE).dependency_range is None

    def test_no_declaration(self) -> None:
        assert extract_snapshot({"version": 3, "dependencies": []}, CORE) == ManifestSnapshot()


@pytest.mark.unit
class TestManifestInspector:
    @pytest.mark.asyncio
    async def test_inspect(self, upstream: Any) -> None:
        upstream.add_repo(
            "scope/pkg-a",
            manifests={"main": {"version": "0.9.0", "dependencies": {CORE: "^0.5.0"}}},
        )

        snapshot = await _inspector(upstream).inspect(REF, "main")

        assert snapshot == ManifestSnapshot(version="0.9.0", dependency_range="^0.5.0")

    @pytest.mark.asyncio
    async def test_missing_manifest(self, upstream: Any) -> None:
        upstream.add_repo("scope/pkg-a")
        assert await _inspector(upstream).inspect(REF, "main") is None

    @pytest.mark.asyncio
    async def test_malformed_manifest(self, upstream: Any) -> None:
        upstream.add_repo("scope/pkg-a")
        upstream.add_raw_manifest("scope/pkg-a", "main", _payload("{oops"))

        assert await _inspector(upstream).inspect(REF, "main") is None
