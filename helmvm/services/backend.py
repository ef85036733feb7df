"""Abstract base class every release backend must implement.

Design notes
------------
* Every method is ``async``; concrete backends talk to a cluster or to a REST
  API and must not block the event loop.
* The interface mirrors the resources of the release API one-to-one: releases,
  chart versions, history, values, registry mappings and repositories.
* Exceptions are narrow so services and the values editor can handle them the
  same way whichever backend raised them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from helmvm.schemas import (
    AddRepositoryRequest,
    ChartVersion,
    RegistryMapping,
    Release,
    ReleaseHistory,
    Repository,
    VersionUpgradeRequest,
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ReleaseBackendError(Exception):
    """Raised when the backend fails to serve a request."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class ReleaseNotFoundError(ReleaseBackendError):
    """The requested release does not exist."""

    def __init__(self, namespace: str, name: str, cause: Exception | None = None):
        self.namespace = namespace
        self.name = name
        super().__init__(f"release {namespace}/{name} not found", cause=cause)


class RegistryMappingNotFoundError(ReleaseBackendError):
    """The release has no registry mapping."""

    def __init__(self, namespace: str, name: str):
        self.namespace = namespace
        self.name = name
        super().__init__(f"registry mapping not found for {namespace}/{name}")


class BackendUnavailableError(ReleaseBackendError):
    """Specialisation: the backend is completely unreachable."""


# ---------------------------------------------------------------------------
# Backend ABC
# ---------------------------------------------------------------------------


class ReleaseBackend(ABC):
    """Backend interface for releases, registry mappings and repositories."""

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    @abstractmethod
    async def list_releases(self) -> List[Release]:
        """Return every release in every namespace."""

    @abstractmethod
    async def get_release(self, namespace: str, name: str) -> Release:
        """Return one release.

        Raises
        ------
        ReleaseNotFoundError
            If the release does not exist.
        """

    @abstractmethod
    async def get_available_versions(self, namespace: str, name: str) -> List[ChartVersion]:
        """Return the chart versions published in the release's registry."""

    @abstractmethod
    async def get_history(self, namespace: str, name: str) -> List[ReleaseHistory]:
        """Return the release's revisions."""

    @abstractmethod
    async def upgrade_release(self, namespace: str, name: str, request: VersionUpgradeRequest) -> Release:
        """Deploy another chart version and return the upgraded release."""

    @abstractmethod
    async def rollback_release(self, namespace: str, name: str, revision: int) -> Release:
        """Roll back to ``revision`` and return the resulting release."""

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    @abstractmethod
    async def get_values(self, namespace: str, name: str) -> Dict[str, Any]:
        """Return the user-supplied values of the release."""

    @abstractmethod
    async def update_values(self, namespace: str, name: str, values: Dict[str, Any]) -> Release:
        """Redeploy the release with ``values`` and return it."""

    # ------------------------------------------------------------------
    # Registry mappings
    # ------------------------------------------------------------------

    @abstractmethod
    async def list_registry_mappings(self) -> List[RegistryMapping]:
        """Return every stored registry mapping."""

    @abstractmethod
    async def get_registry_mapping(self, namespace: str, name: str) -> Optional[RegistryMapping]:
        """Return the release's mapping, or None when there is none."""

    @abstractmethod
    async def set_registry_mapping(self, mapping: RegistryMapping) -> None:
        """Create or replace a mapping."""

    @abstractmethod
    async def delete_registry_mapping(self, namespace: str, name: str) -> None:
        """Remove a mapping; removing a missing mapping is not an error."""

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def list_repositories(self) -> List[Repository]:
        """Return configured chart repositories.

        The default implementation returns an empty list. Backends that manage
        repositories should override the repository methods.
        """
        return []

    async def add_repository(self, request: AddRepositoryRequest) -> None:
        """Add a chart repository."""
        raise ReleaseBackendError("repositories are not supported by this backend")

    async def remove_repository(self, name: str) -> None:
        """Remove a chart repository."""
        raise ReleaseBackendError("repositories are not supported by this backend")

    async def update_repository(self, name: str) -> None:
        """Refresh a chart repository's index."""
        raise ReleaseBackendError("repositories are not supported by this backend")
