# -*- coding: utf-8 -*-
"""Location: ./tests/unit/helmvm/test_schemas.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for the release, registry and repository schemas.
"""

# Standard
from datetime import datetime, timezone

# Third-Party
from pydantic import ValidationError
import pytest

# First-Party
from helmvm.schemas import (
    AddRepositoryRequest,
    ChartVersion,
    RegistryMapping,
    Release,
    ReleaseFilter,
    ReleaseHistory,
    RollbackRequest,
    SetRegistryRequest,
    ValuesUpdateRequest,
    VersionUpgradeRequest,
)


class TestRelease:
    def test_from_backend_json(self):
        release = Release.model_validate(
            {
                "name": "web",
                "namespace": "prod",
                "chart": "nginx",
                "chartVersion": "1.2.0",
                "appVersion": "1.25",
                "status": "deployed",
                "updated": "2025-03-01T12:00:00Z",
                "revision": 7,
                "hasRegistry": True,
            }
        )
        assert release.chart_version == "1.2.0"
        assert release.app_version == "1.25"
        assert release.updated == datetime(2025, 3, 1, 12, tzinfo=timezone.utc)
        assert release.has_registry is True
        assert release.key == "prod/web"

    def test_defaults(self):
        release = Release(name="web", namespace="prod", chart="nginx", chart_version="1.0.0")
        assert release.app_version == ""
        assert release.revision == 0
        assert release.updated is None
        assert release.has_registry is False

    def test_dump_uses_camel_case(self):
        release = Release(name="web", namespace="prod", chart="nginx", chartVersion="1.0.0")
        dumped = release.model_dump(by_alias=True)
        assert {"chartVersion", "appVersion", "hasRegistry"} <= set(dumped)

    def test_chart_version_required(self):
        with pytest.raises(ValidationError):
            Release(name="web", namespace="prod", chart="nginx")


class TestSmallModels:
    def test_release_filter_accepts_alias(self):
        assert ReleaseFilter.model_validate({"namespace": "dev", "hasRegistry": False}).has_registry is False

    def test_chart_version(self):
        version = ChartVersion.model_validate({"version": "1.3.0", "appVersion": "1.26"})
        assert version.app_version == "1.26"
        assert version.description == ""

    def test_history(self):
        entry = ReleaseHistory.model_validate({"revision": 2, "status": "superseded", "chart": "nginx-1.1.0"})
        assert entry.revision == 2
        assert entry.updated is None


class TestRequests:
    def test_upgrade_trims_version(self):
        request = VersionUpgradeRequest.model_validate({"chartVersion": "  1.3.0 "})
        assert request.chart_version == "1.3.0"
        assert request.values is None

    @pytest.mark.parametrize("version", ["", "   ", None])
    def test_upgrade_requires_version(self, version):
        with pytest.raises(ValidationError, match="chartVersion is required"):
            VersionUpgradeRequest(chartVersion=version)

    def test_upgrade_carries_values(self):
        request = VersionUpgradeRequest(chartVersion="1.3.0", values={"replicas": 2})
        assert request.values == {"replicas": 2}

    def test_values_update_requires_mapping(self):
        with pytest.raises(ValidationError):
            ValuesUpdateRequest(values=["a"])
        with pytest.raises(ValidationError):
            ValuesUpdateRequest()

    def test_values_update_accepts_empty_mapping(self):
        assert ValuesUpdateRequest(values={}).values == {}

    @pytest.mark.parametrize("revision", [0, -1])
    def test_rollback_requires_positive_revision(self, revision):
        with pytest.raises(ValidationError, match="revision must be a positive integer"):
            RollbackRequest(revision=revision)

    def test_rollback(self):
        assert RollbackRequest(revision=2).revision == 2

    def test_set_registry_trims(self):
        assert SetRegistryRequest(registry=" oci://r.example.com/charts ").registry == "oci://r.example.com/charts"

    def test_set_registry_required(self):
        with pytest.raises(ValidationError, match="registry is required"):
            SetRegistryRequest(registry="  ")


class TestRegistryMapping:
    def test_key_and_aliases(self):
        mapping = RegistryMapping.model_validate({"namespace": "prod", "releaseName": "web", "registry": "oci://r"})
        assert mapping.key == "prod/web"
        assert mapping.chart_name == ""
        assert mapping.model_dump(by_alias=True) == {"namespace": "prod", "releaseName": "web", "chartName": "", "registry": "oci://r"}

    def test_registry_required(self):
        with pytest.raises(ValidationError):
            RegistryMapping(namespace="prod", releaseName="web")


class TestAddRepositoryRequest:
    @pytest.mark.parametrize("url", ["https://charts.bitnami.com/bitnami", "http://localhost:8080"])
    def test_accepts_http_urls(self, url):
        assert AddRepositoryRequest(name="repo", url=url).url == url

    @pytest.mark.parametrize("url", ["ftp://example.com", "charts.example.com", "https://"])
    def test_rejects_other_urls(self, url):
        with pytest.raises(ValidationError, match="url must be a valid HTTP or HTTPS URL"):
            AddRepositoryRequest(name="repo", url=url)

    def test_name_required(self):
        with pytest.raises(ValidationError, match="name is required"):
            AddRepositoryRequest(name="", url="https://example.com")
