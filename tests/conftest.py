# -*- coding: utf-8 -*-
"""Location: ./tests/conftest.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
"""

# Standard
import logging
from unittest.mock import AsyncMock

# Third-Party
import pytest

# First-Party
from helmvm.config import get_settings
from helmvm.schemas import RegistryMapping, Release
from helmvm.services.backend import ReleaseBackend

_SETTINGS_ENV = (
    "LOG_LEVEL",
    "REGISTRY_NAMESPACE",
    "NAMESPACE",
    "REGISTRY_CONFIGMAP_NAME",
    "REGISTRY_CONFIGMAP_KEY",
    "VALUES_MAX_BYTES",
    "VALUES_QUOTE_AMBIGUOUS",
    "WARN_ON_AMBIGUOUS_VALUES",
)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Give every test settings built from a clean environment."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    logging.getLogger("helmvm").setLevel(logging.NOTSET)


@pytest.fixture
def release():
    return Release(
        name="web",
        namespace="prod",
        chart="nginx",
        chartVersion="1.2.0",
        appVersion="1.25",
        status="deployed",
        revision=3,
        hasRegistry=True,
    )


@pytest.fixture
def mapping():
    return RegistryMapping(namespace="prod", releaseName="web", chartName="nginx", registry="oci://registry.example.com/charts")


@pytest.fixture
def backend(release, mapping):
    """A backend mock serving one release with a registry mapping."""
    mock = AsyncMock(spec=ReleaseBackend)
    mock.list_releases.return_value = [release]
    mock.get_release.return_value = release
    mock.list_registry_mappings.return_value = [mapping]
    mock.get_registry_mapping.return_value = mapping
    mock.get_values.return_value = {"replicas": 2, "image": {"repository": "nginx", "tag": "v1.25"}}
    # Redeployed releases come back without registry information
    mock.update_values.return_value = release.model_copy(update={"revision": 4, "has_registry": False})
    return mock
