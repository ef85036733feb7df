# -*- coding: utf-8 -*-
"""Release, registry and values services.

SPDX-License-Identifier: Apache-2.0
"""

from helmvm.services.backend import (
    BackendUnavailableError,
    RegistryMappingNotFoundError,
    ReleaseBackend,
    ReleaseBackendError,
    ReleaseNotFoundError,
)
from helmvm.services.registry_store import RegistryMappingTable, RegistryStoreError
from helmvm.services.release_service import filter_releases, mark_registry, ReleaseReferenceError, ReleaseService, require_reference
from helmvm.services.values_session import (
    EmptyValuesError,
    ParsedValues,
    RegistryNotConfiguredError,
    ValuesEditSession,
    ValuesSessionError,
    ValuesTooLargeError,
)

__all__ = [
    # Backend
    "ReleaseBackend",
    "ReleaseBackendError",
    "ReleaseNotFoundError",
    "RegistryMappingNotFoundError",
    "BackendUnavailableError",
    # Registry mappings
    "RegistryMappingTable",
    "RegistryStoreError",
    # Releases
    "ReleaseService",
    "mark_registry",
    "filter_releases",
    "require_reference",
    "ReleaseReferenceError",
    # Values editor
    "ValuesEditSession",
    "ParsedValues",
    "ValuesSessionError",
    "RegistryNotConfiguredError",
    "EmptyValuesError",
    "ValuesTooLargeError",
]
