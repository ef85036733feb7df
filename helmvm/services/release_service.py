# -*- coding: utf-8 -*-
"""Location: ./helmvm/services/release_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Release Service Implementation.
This module implements release management on top of a :class:`ReleaseBackend`.
It handles:
- Listing releases, marking those with a registry mapping and filtering them
- Chart version upgrades and rollbacks with validated requests
- Registry mapping lookup, creation and removal
- Chart repository management
"""

# Standard
import logging
from typing import Any, Dict, List, Optional

# First-Party
from helmvm.schemas import (
    AddRepositoryRequest,
    ChartVersion,
    RegistryMapping,
    Release,
    ReleaseFilter,
    ReleaseHistory,
    Repository,
    RollbackRequest,
    SetRegistryRequest,
    ValuesUpdateRequest,
    VersionUpgradeRequest,
)
from helmvm.services.backend import RegistryMappingNotFoundError, ReleaseBackend
from helmvm.services.registry_store import RegistryMappingTable

logger = logging.getLogger(__name__)


class ReleaseReferenceError(ValueError):
    """A release was addressed without a namespace or a name."""

    def __init__(self) -> None:
        super().__init__("namespace and name are required")


def require_reference(namespace: str, name: str) -> None:
    """Reject blank release coordinates before they reach the backend.

    Raises:
        ReleaseReferenceError: If ``namespace`` or ``name`` is blank.

    Examples:
        >>> require_reference("prod", "web")
        >>> require_reference("prod", " ")
        Traceback (most recent call last):
        ...
        helmvm.services.release_service.ReleaseReferenceError: namespace and name are required
    """
    if not (namespace and namespace.strip()) or not (name and name.strip()):
        raise ReleaseReferenceError()


def mark_registry(releases: List[Release], mappings: List[RegistryMapping]) -> List[Release]:
    """Return copies of ``releases`` with ``has_registry`` set from ``mappings``.

    Args:
        releases: Releases as reported by the backend.
        mappings: Stored registry mappings.

    Returns:
        List[Release]: Releases with ``has_registry`` filled in.

    Examples:
        >>> r = Release(name="web", namespace="prod", chart="nginx", chartVersion="1.0.0")
        >>> m = RegistryMapping(namespace="prod", releaseName="web", registry="oci://r")
        >>> [x.has_registry for x in mark_registry([r], [m])]
        [True]
        >>> [x.has_registry for x in mark_registry([r], [])]
        [False]
    """
    table = RegistryMappingTable(mappings)
    return [release.model_copy(update={"has_registry": release.key in table}) for release in releases]


def filter_releases(releases: List[Release], release_filter: Optional[ReleaseFilter] = None) -> List[Release]:
    """Keep releases matching the namespace and registry filters.

    An empty namespace filter matches every namespace.

    Examples:
        >>> a = Release(name="a", namespace="prod", chart="c", chartVersion="1", hasRegistry=True)
        >>> b = Release(name="b", namespace="dev", chart="c", chartVersion="1")
        >>> [r.name for r in filter_releases([a, b], ReleaseFilter(namespace="dev"))]
        ['b']
        >>> [r.name for r in filter_releases([a, b], ReleaseFilter(hasRegistry=True))]
        ['a']
        >>> [r.name for r in filter_releases([a, b], ReleaseFilter(namespace=""))]
        ['a', 'b']
    """
    if release_filter is None:
        return list(releases)
    result = []
    for release in releases:
        if release_filter.namespace and release.namespace != release_filter.namespace:
            continue
        if release_filter.has_registry is not None and release.has_registry != release_filter.has_registry:
            continue
        result.append(release)
    return result


class ReleaseService:
    """Release operations over a backend.

    Examples:
        >>> from unittest.mock import AsyncMock
        >>> service = ReleaseService(AsyncMock())
        >>> isinstance(service, ReleaseService)
        True
    """

    def __init__(self, backend: ReleaseBackend) -> None:
        """Initialize the service.

        Args:
            backend: Backend serving releases and mappings.
        """
        self._backend = backend

    async def list_releases(self, release_filter: Optional[ReleaseFilter] = None) -> List[Release]:
        """List releases with registry presence, optionally filtered.

        Args:
            release_filter: Namespace / registry filters.

        Returns:
            List[Release]: Matching releases.
        """
        releases = await self._backend.list_releases()
        mappings = await self._backend.list_registry_mappings()
        marked = mark_registry(releases, mappings)
        result = filter_releases(marked, release_filter)
        logger.debug(f"Listed {len(result)} of {len(releases)} releases")
        return result

    async def get_release(self, namespace: str, name: str) -> Release:
        """Return one release with its registry presence."""
        require_reference(namespace, name)
        release = await self._backend.get_release(namespace, name)
        mapping = await self._backend.get_registry_mapping(namespace, name)
        return release.model_copy(update={"has_registry": mapping is not None})

    async def get_available_versions(self, namespace: str, name: str) -> List[ChartVersion]:
        """Return chart versions the release can move to."""
        require_reference(namespace, name)
        return await self._backend.get_available_versions(namespace, name)

    async def get_history(self, namespace: str, name: str) -> List[ReleaseHistory]:
        """Return the release's revision history."""
        require_reference(namespace, name)
        return await self._backend.get_history(namespace, name)

    async def upgrade(self, namespace: str, name: str, request: VersionUpgradeRequest) -> Release:
        """Move a release to another chart version.

        Args:
            namespace: Release namespace.
            name: Release name.
            request: Validated upgrade request.

        Returns:
            Release: The upgraded release.
        """
        require_reference(namespace, name)
        logger.info(f"Upgrading {namespace}/{name} to chart version {request.chart_version}")
        return await self._backend.upgrade_release(namespace, name, request)

    async def rollback(self, namespace: str, name: str, request: RollbackRequest) -> Release:
        """Roll a release back to an earlier revision.

        Args:
            namespace: Release namespace.
            name: Release name.
            request: Validated rollback request.

        Returns:
            Release: The release after rollback.
        """
        require_reference(namespace, name)
        logger.info(f"Rolling back {namespace}/{name} to revision {request.revision}")
        return await self._backend.rollback_release(namespace, name, request.revision)

    async def get_values(self, namespace: str, name: str) -> Dict[str, Any]:
        """Return the release's values document."""
        require_reference(namespace, name)
        return await self._backend.get_values(namespace, name)

    async def update_values(self, namespace: str, name: str, request: ValuesUpdateRequest) -> Release:
        """Redeploy a release with new values."""
        require_reference(namespace, name)
        logger.info(f"Updating values of {namespace}/{name} ({len(request.values)} top-level keys)")
        return await self._backend.update_values(namespace, name, request.values)

    # ------------------------------------------------------------------
    # Registry mappings
    # ------------------------------------------------------------------

    async def get_registry(self, namespace: str, name: str) -> RegistryMapping:
        """Return the release's registry mapping.

        Raises:
            RegistryMappingNotFoundError: If the release has no mapping.
        """
        require_reference(namespace, name)
        mapping = await self._backend.get_registry_mapping(namespace, name)
        if mapping is None:
            raise RegistryMappingNotFoundError(namespace, name)
        return mapping

    async def set_registry(self, namespace: str, name: str, request: SetRegistryRequest) -> RegistryMapping:
        """Associate a release with a registry.

        The chart name is taken from the deployed release.

        Args:
            namespace: Release namespace.
            name: Release name.
            request: Validated registry request.

        Returns:
            RegistryMapping: The stored mapping.

        Raises:
            ReleaseNotFoundError: If the release does not exist.
        """
        require_reference(namespace, name)
        release = await self._backend.get_release(namespace, name)
        mapping = RegistryMapping(namespace=namespace, release_name=name, chart_name=release.chart, registry=request.registry)
        await self._backend.set_registry_mapping(mapping)
        logger.info(f"Registry of {mapping.key} set to {mapping.registry}")
        return mapping

    async def delete_registry(self, namespace: str, name: str) -> None:
        """Remove a release's registry mapping."""
        require_reference(namespace, name)
        await self._backend.delete_registry_mapping(namespace, name)
        logger.info(f"Registry mapping of {namespace}/{name} removed")

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def list_repositories(self) -> List[Repository]:
        """Return configured chart repositories."""
        return await self._backend.list_repositories()

    async def add_repository(self, request: AddRepositoryRequest) -> None:
        """Add a chart repository."""
        await self._backend.add_repository(request)
        logger.info(f"Repository {request.name} added ({request.url})")

    async def remove_repository(self, name: str) -> None:
        """Remove a chart repository."""
        await self._backend.remove_repository(name)
        logger.info(f"Repository {name} removed")

    async def update_repository(self, name: str) -> None:
        """Refresh a chart repository's index."""
        await self._backend.update_repository(name)
