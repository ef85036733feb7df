# -*- coding: utf-8 -*-
"""Location: ./helmvm/schemas.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Helm Version Manager Schema Definitions.
This module provides Pydantic models for the release, chart, registry and
repository resources exchanged with the backend. It implements schemas for:
- Releases, revision history and available chart versions
- Version upgrades, rollbacks and values updates
- Registry mappings between releases and OCI registries
- Chart repositories

Field names follow the backend's camelCase JSON; models accept either the
camelCase alias or the Python attribute name.

Examples:
    >>> r = Release.model_validate({
    ...     "name": "web", "namespace": "prod", "chart": "nginx", "chartVersion": "1.2.0",
    ...     "appVersion": "1.25", "status": "deployed", "updated": "2025-01-01T00:00:00Z", "revision": 3,
    ... })
    >>> r.key, r.has_registry
    ('prod/web', False)
    >>> r.model_dump(by_alias=True)["chartVersion"]
    '1.2.0'
"""

# Standard
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse

# Third-Party
from pydantic import BaseModel, ConfigDict, Field, field_validator


def release_key(namespace: str, name: str) -> str:
    """Return the ``namespace/name`` key identifying a release.

    Args:
        namespace: Release namespace.
        name: Release name.

    Returns:
        str: The release key.

    Examples:
        >>> release_key("prod", "web")
        'prod/web'
    """
    return f"{namespace}/{name}"


def _require_text(v: Optional[str], field: str) -> str:
    if not isinstance(v, str) or not v.strip():
        raise ValueError(f"{field} is required")
    return v.strip()


class BackendModel(BaseModel):
    """Base for resources exchanged with the backend."""

    model_config = ConfigDict(populate_by_name=True)


# --------------------------------------------------------------------------
# Releases
# --------------------------------------------------------------------------


class Release(BackendModel):
    """A deployed release.

    Attributes:
        name (str): Release name.
        namespace (str): Namespace the release is installed in.
        chart (str): Chart name.
        chart_version (str): Deployed chart version. Alias 'chartVersion'.
        app_version (str): Application version of the chart. Alias 'appVersion'.
        status (str): Helm release status (deployed, failed, ...).
        updated (datetime): Time of the last deployment.
        revision (int): Current revision number.
        has_registry (bool): Whether a registry mapping exists. Alias 'hasRegistry'.
    """

    name: str
    namespace: str
    chart: str
    chart_version: str = Field(..., alias="chartVersion")
    app_version: str = Field("", alias="appVersion")
    status: str = ""
    updated: Optional[datetime] = None
    revision: int = 0
    has_registry: bool = Field(False, alias="hasRegistry")

    @property
    def key(self) -> str:
        """The ``namespace/name`` key of this release."""
        return release_key(self.namespace, self.name)


class ReleaseFilter(BackendModel):
    """Filters for listing releases.

    Examples:
        >>> ReleaseFilter().namespace is None
        True
        >>> ReleaseFilter(hasRegistry=True).has_registry
        True
    """

    namespace: Optional[str] = None
    has_registry: Optional[bool] = Field(None, alias="hasRegistry")


class ChartVersion(BackendModel):
    """A chart version available in the release's registry."""

    version: str
    app_version: str = Field("", alias="appVersion")
    description: str = ""


class ReleaseHistory(BackendModel):
    """One revision of a release."""

    revision: int
    updated: Optional[datetime] = None
    status: str = ""
    chart: str = ""
    app_version: str = Field("", alias="appVersion")
    description: str = ""


class VersionUpgradeRequest(BackendModel):
    """Request to move a release to another chart version.

    Examples:
        >>> VersionUpgradeRequest(chartVersion=" 1.3.0 ").chart_version
        '1.3.0'
        >>> try:
        ...     VersionUpgradeRequest(chartVersion="")
        ... except ValueError:
        ...     print("error")
        error
    """

    chart_version: str = Field(..., alias="chartVersion")
    values: Optional[Dict[str, Any]] = None

    @field_validator("chart_version", mode="before")
    @classmethod
    def validate_chart_version(cls, v: Optional[str]) -> str:
        """Require a non-blank chart version.

        Args:
            v: Raw chart version.

        Returns:
            str: The trimmed chart version.
        """
        return _require_text(v, "chartVersion")


class ValuesUpdateRequest(BackendModel):
    """Request replacing a release's values.

    Examples:
        >>> ValuesUpdateRequest(values={"replicas": 2}).values
        {'replicas': 2}
        >>> try:
        ...     ValuesUpdateRequest(values=None)
        ... except ValueError:
        ...     print("error")
        error
    """

    values: Dict[str, Any]


class RollbackRequest(BackendModel):
    """Request rolling a release back to an earlier revision."""

    revision: int

    @field_validator("revision")
    @classmethod
    def validate_revision(cls, v: int) -> int:
        """Require a positive revision.

        Args:
            v: Revision number.

        Returns:
            int: The revision.

        Raises:
            ValueError: If the revision is zero or negative.
        """
        if v <= 0:
            raise ValueError("revision must be a positive integer")
        return v


# --------------------------------------------------------------------------
# Registry mappings
# --------------------------------------------------------------------------


class RegistryMapping(BackendModel):
    """Association of a release with the OCI registry its chart comes from.

    Examples:
        >>> m = RegistryMapping(namespace="prod", releaseName="web", chartName="nginx", registry="oci://r.example.com/charts")
        >>> m.key
        'prod/web'
    """

    namespace: str
    release_name: str = Field(..., alias="releaseName")
    chart_name: str = Field("", alias="chartName")
    registry: str

    @property
    def key(self) -> str:
        """The ``namespace/name`` key of the mapped release."""
        return release_key(self.namespace, self.release_name)


class SetRegistryRequest(BackendModel):
    """Request associating a release with a registry."""

    registry: str

    @field_validator("registry", mode="before")
    @classmethod
    def validate_registry(cls, v: Optional[str]) -> str:
        """Require a non-blank registry.

        Args:
            v: Raw registry reference.

        Returns:
            str: The trimmed registry reference.
        """
        return _require_text(v, "registry")


# --------------------------------------------------------------------------
# Repositories
# --------------------------------------------------------------------------


class Repository(BackendModel):
    """A configured chart repository."""

    name: str
    url: str


class AddRepositoryRequest(BackendModel):
    """Request adding a chart repository.

    Examples:
        >>> AddRepositoryRequest(name="bitnami", url="https://charts.bitnami.com/bitnami").name
        'bitnami'
        >>> try:
        ...     AddRepositoryRequest(name="bad", url="ftp://example.com")
        ... except ValueError:
        ...     print("error")
        error
    """

    name: str
    url: str

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        """Require a non-blank repository name.

        Args:
            v: Raw repository name.

        Returns:
            str: The trimmed name.
        """
        return _require_text(v, "name")

    @field_validator("url", mode="before")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> str:
        """Require an absolute http(s) URL.

        Args:
            v: Raw repository URL.

        Returns:
            str: The trimmed URL.

        Raises:
            ValueError: If the URL is missing or not http(s).
        """
        url = _require_text(v, "url")
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be a valid HTTP or HTTPS URL")
        return url
