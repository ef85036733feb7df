# -*- coding: utf-8 -*-
"""Location: ./tests/unit/helmvm/services/test_release_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for the release service.
"""

# Standard
from typing import Any, Dict, List, Optional

# Third-Party
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
from helmvm.services.backend import RegistryMappingNotFoundError, ReleaseBackend, ReleaseBackendError, ReleaseNotFoundError
from helmvm.services.registry_store import RegistryMappingTable
from helmvm.services.release_service import filter_releases, mark_registry, ReleaseReferenceError, ReleaseService


class InMemoryBackend(ReleaseBackend):
    """Backend keeping releases in a dict and mappings in a config map data dict."""

    def __init__(self, releases: List[Release]):
        self.releases = {r.key: r for r in releases}
        self.configmap_data: Dict[str, str] = {}

    def _release(self, namespace: str, name: str) -> Release:
        try:
            return self.releases[f"{namespace}/{name}"]
        except KeyError as exc:
            raise ReleaseNotFoundError(namespace, name, cause=exc) from exc

    def _table(self) -> RegistryMappingTable:
        return RegistryMappingTable.from_configmap_data(self.configmap_data)

    async def list_releases(self) -> List[Release]:
        return list(self.releases.values())

    async def get_release(self, namespace: str, name: str) -> Release:
        return self._release(namespace, name)

    async def get_available_versions(self, namespace: str, name: str) -> List[ChartVersion]:
        self._release(namespace, name)
        return [ChartVersion(version="1.3.0"), ChartVersion(version="1.2.0")]

    async def get_history(self, namespace: str, name: str) -> List[ReleaseHistory]:
        release = self._release(namespace, name)
        return [ReleaseHistory(revision=n) for n in range(release.revision, 0, -1)]

    async def upgrade_release(self, namespace: str, name: str, request: VersionUpgradeRequest) -> Release:
        release = self._release(namespace, name)
        upgraded = release.model_copy(update={"chart_version": request.chart_version, "revision": release.revision + 1})
        self.releases[release.key] = upgraded
        return upgraded

    async def rollback_release(self, namespace: str, name: str, revision: int) -> Release:
        release = self._release(namespace, name)
        rolled = release.model_copy(update={"revision": release.revision + 1, "status": f"rolled back to {revision}"})
        self.releases[release.key] = rolled
        return rolled

    async def get_values(self, namespace: str, name: str) -> Dict[str, Any]:
        self._release(namespace, name)
        return {}

    async def update_values(self, namespace: str, name: str, values: Dict[str, Any]) -> Release:
        release = self._release(namespace, name)
        return release.model_copy(update={"revision": release.revision + 1})

    async def list_registry_mappings(self) -> List[RegistryMapping]:
        return self._table().list()

    async def get_registry_mapping(self, namespace: str, name: str) -> Optional[RegistryMapping]:
        return self._table().get(namespace, name)

    async def set_registry_mapping(self, mapping: RegistryMapping) -> None:
        table = self._table()
        table.set(mapping)
        self.configmap_data.update(table.to_configmap_data())

    async def delete_registry_mapping(self, namespace: str, name: str) -> None:
        table = self._table()
        table.delete(namespace, name)
        self.configmap_data.update(table.to_configmap_data())


def make_release(namespace: str, name: str, **kwargs) -> Release:
    return Release(name=name, namespace=namespace, chart=kwargs.pop("chart", name), chartVersion=kwargs.pop("chart_version", "1.0.0"), revision=kwargs.pop("revision", 1), **kwargs)


@pytest.fixture
def memory_backend():
    return InMemoryBackend([make_release("prod", "web", chart="nginx", revision=3), make_release("dev", "api")])


@pytest.fixture
def service(memory_backend):
    return ReleaseService(memory_backend)


class TestHelpers:
    def test_mark_registry(self):
        releases = [make_release("prod", "web"), make_release("dev", "api", hasRegistry=True)]
        mappings = [RegistryMapping(namespace="prod", releaseName="web", registry="oci://r")]
        marked = mark_registry(releases, mappings)
        assert [r.has_registry for r in marked] == [True, False]
        assert releases[0].has_registry is False

    def test_filter_without_filter(self):
        releases = [make_release("prod", "web")]
        assert filter_releases(releases) == releases

    def test_filter_combines_conditions(self):
        releases = [
            make_release("prod", "web", hasRegistry=True),
            make_release("prod", "db"),
            make_release("dev", "web", hasRegistry=True),
        ]
        result = filter_releases(releases, ReleaseFilter(namespace="prod", hasRegistry=True))
        assert [r.key for r in result] == ["prod/web"]
        result = filter_releases(releases, ReleaseFilter(hasRegistry=False))
        assert [r.key for r in result] == ["prod/db"]


class TestListing:
    @pytest.mark.asyncio
    async def test_list_marks_registry(self, service):
        await service.set_registry("prod", "web", SetRegistryRequest(registry="oci://r.example.com/charts"))
        releases = await service.list_releases()
        assert {r.key: r.has_registry for r in releases} == {"prod/web": True, "dev/api": False}

    @pytest.mark.asyncio
    async def test_list_filtered(self, service):
        await service.set_registry("prod", "web", SetRegistryRequest(registry="oci://r"))
        assert [r.key for r in await service.list_releases(ReleaseFilter(hasRegistry=False))] == ["dev/api"]
        assert [r.key for r in await service.list_releases(ReleaseFilter(namespace="prod"))] == ["prod/web"]

    @pytest.mark.asyncio
    async def test_get_release(self, service):
        release = await service.get_release("dev", "api")
        assert release.has_registry is False

    @pytest.mark.asyncio
    async def test_get_missing_release(self, service):
        with pytest.raises(ReleaseNotFoundError, match="release prod/missing not found"):
            await service.get_release("prod", "missing")

    @pytest.mark.asyncio
    async def test_versions_and_history(self, service):
        assert [v.version for v in await service.get_available_versions("prod", "web")] == ["1.3.0", "1.2.0"]
        assert [h.revision for h in await service.get_history("prod", "web")] == [3, 2, 1]


class TestUpgradeAndRollback:
    @pytest.mark.asyncio
    async def test_upgrade(self, service):
        release = await service.upgrade("prod", "web", VersionUpgradeRequest(chartVersion="1.3.0"))
        assert release.chart_version == "1.3.0"
        assert release.revision == 4

    @pytest.mark.asyncio
    async def test_rollback_passes_revision(self, backend, release):
        backend.rollback_release.return_value = release
        await ReleaseService(backend).rollback("prod", "web", RollbackRequest(revision=2))
        backend.rollback_release.assert_awaited_once_with("prod", "web", 2)

    @pytest.mark.asyncio
    async def test_update_values_passes_document(self, backend):
        await ReleaseService(backend).update_values("prod", "web", ValuesUpdateRequest(values={"replicas": 4}))
        backend.update_values.assert_awaited_once_with("prod", "web", {"replicas": 4})

    @pytest.mark.asyncio
    async def test_get_values(self, backend):
        assert (await ReleaseService(backend).get_values("prod", "web"))["replicas"] == 2


class TestRegistry:
    @pytest.mark.asyncio
    async def test_set_registry_uses_release_chart(self, service, memory_backend):
        mapping = await service.set_registry("prod", "web", SetRegistryRequest(registry="oci://r"))
        assert mapping.chart_name == "nginx"
        assert mapping.key == "prod/web"
        assert "prod/web" in memory_backend.configmap_data["mappings"]

    @pytest.mark.asyncio
    async def test_set_registry_on_missing_release(self, service, memory_backend):
        with pytest.raises(ReleaseNotFoundError):
            await service.set_registry("prod", "missing", SetRegistryRequest(registry="oci://r"))
        assert memory_backend.configmap_data == {}

    @pytest.mark.asyncio
    async def test_get_registry(self, service):
        await service.set_registry("prod", "web", SetRegistryRequest(registry="oci://r"))
        assert (await service.get_registry("prod", "web")).registry == "oci://r"

    @pytest.mark.asyncio
    async def test_get_missing_registry(self, service):
        with pytest.raises(RegistryMappingNotFoundError, match="registry mapping not found for dev/api"):
            await service.get_registry("dev", "api")

    @pytest.mark.asyncio
    async def test_delete_registry(self, service):
        await service.set_registry("prod", "web", SetRegistryRequest(registry="oci://r"))
        await service.delete_registry("prod", "web")
        assert (await service.get_release("prod", "web")).has_registry is False
        await service.delete_registry("prod", "web")


class TestRepositories:
    @pytest.mark.asyncio
    async def test_default_backend_has_no_repositories(self, service):
        assert await service.list_repositories() == []

    @pytest.mark.asyncio
    async def test_default_backend_refuses_repository_changes(self, service):
        with pytest.raises(ReleaseBackendError, match="not supported"):
            await service.add_repository(AddRepositoryRequest(name="bitnami", url="https://charts.bitnami.com/bitnami"))
        with pytest.raises(ReleaseBackendError):
            await service.remove_repository("bitnami")
        with pytest.raises(ReleaseBackendError):
            await service.update_repository("bitnami")

    @pytest.mark.asyncio
    async def test_repository_calls_reach_backend(self, backend):
        service = ReleaseService(backend)
        request = AddRepositoryRequest(name="bitnami", url="https://charts.bitnami.com/bitnami")
        await service.add_repository(request)
        await service.update_repository("bitnami")
        await service.remove_repository("bitnami")
        backend.add_repository.assert_awaited_once_with(request)
        backend.update_repository.assert_awaited_once_with("bitnami")
        backend.remove_repository.assert_awaited_once_with("bitnami")


class TestReleaseReference:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("namespace,name", [("", "web"), ("prod", ""), ("  ", "web"), ("prod", " ")])
    @pytest.mark.parametrize(
        "call",
        [
            lambda s, ns, n: s.get_release(ns, n),
            lambda s, ns, n: s.get_available_versions(ns, n),
            lambda s, ns, n: s.get_history(ns, n),
            lambda s, ns, n: s.upgrade(ns, n, VersionUpgradeRequest(chartVersion="1.3.0")),
            lambda s, ns, n: s.rollback(ns, n, RollbackRequest(revision=1)),
            lambda s, ns, n: s.get_values(ns, n),
            lambda s, ns, n: s.update_values(ns, n, ValuesUpdateRequest(values={"a": 1})),
            lambda s, ns, n: s.get_registry(ns, n),
            lambda s, ns, n: s.set_registry(ns, n, SetRegistryRequest(registry="oci://r")),
            lambda s, ns, n: s.delete_registry(ns, n),
        ],
    )
    async def test_blank_reference_never_reaches_backend(self, backend, call, namespace, name):
        with pytest.raises(ReleaseReferenceError, match="namespace and name are required"):
            await call(ReleaseService(backend), namespace, name)
        assert backend.method_calls == []

    def test_reference_error_is_a_value_error(self):
        assert issubclass(ReleaseReferenceError, ValueError)
