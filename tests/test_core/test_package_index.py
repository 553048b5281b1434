from __future__ import annotations

import pytest
from typing import Any

from regscout.core.package_index import PackageIndexProber, guess_package_name
from regscout.models import PackageIndexSummary, Unavailable
from regscout.utils.http import HTTPClient

NPM = "https://registry.npm.test/{package}"


def _prober(upstream: Any) -> PackageIndexProber:
    return PackageIndexProber(HTTPClient(transport=upstream.transport()), NPM)


@pytest.mark.unit
class TestGuessPackageName:
    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("@elizaos-plugins/plugin-solana", "@elizaos/plugin-solana"),
            ("@elizaos/plugin-bootstrap", "@elizaos/plugin-bootstrap"),
            ("@scope/pkg-a", "@scope/pkg-a"),
            ("plain-package", "plain-package"),
        ],
    )
    def test_default_prefixes(self, identifier: str, expected: str) -> None:
        assert guess_package_name(identifier) == expected

    def test_custom_prefixes(self) -> None:
        prefixes = {"@old/": "@new/", "@other/": "@else/"}
        assert guess_package_name("@other/x", prefixes) == "@else/x"


@pytest.mark.unit
class TestPackageIndexProber:
    @pytest.mark.asyncio
    async def test_list_versions(self, upstream: Any) -> None:
        upstream.npm["@scope/pkg-a"] = {"versions": {"0.9.0": {}, "1.2.0": {}}}

        assert await _prober(upstream).list_versions("@scope/pkg-a") == ["0.9.0", "1.2.0"]
        assert upstream.requests[0].url.path == "/@scope/pkg-a"

    @pytest.mark.asyncio
    async def test_summarize(self, upstream: Any) -> None:
        upstream.npm["@scope/pkg-a"] = {
            "versions": {"0.1.0": {}, "0.9.0": {}, "1.0.0-beta.1": {}, "1.2.0": {}, "2.0.0": {}}
        }

        summary = await _prober(upstream).summarize("@scope/pkg-a")

        assert summary == PackageIndexSummary(repo="@scope/pkg-a", v0="0.9.0", v1="1.2.0")
        assert summary.to_json() == {"repo": "@scope/pkg-a", "v0": "0.9.0", "v1": "1.2.0"}

    @pytest.mark.asyncio
    async def test_not_found(self, upstream: Any) -> None:
        summary = await _prober(upstream).summarize("@scope/none")

        assert summary.found is False
        assert summary.to_json() == {"repo": "@scope/none"}

    @pytest.mark.asyncio
    async def test_versions_not_a_mapping(self, upstream: Any) -> None:
        upstream.npm["@scope/odd"] = {"versions": ["1.0.0"]}

        result = await _prober(upstream).list_versions("@scope/odd")

        assert isinstance(result, Unavailable)

    @pytest.mark.asyncio
    async def test_empty_versions_is_found(self, upstream: Any) -> None:
        upstream.npm["@scope/empty"] = {"versions": {}}

        summary = await _prober(upstream).summarize("@scope/empty")

        assert summary == PackageIndexSummary(repo="@scope/empty", v0=None, v1=None)

    @pytest.mark.asyncio
    async def test_server_error(self, upstream: Any) -> None:
        upstream.fail("registry.npm.test", status=503)

        summary = await _prober(upstream).summarize("@scope/pkg-a")

        assert summary == PackageIndexSummary.missing("@scope/pkg-a")
