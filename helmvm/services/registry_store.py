# -*- coding: utf-8 -*-
"""Location: ./helmvm/services/registry_store.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Registry Mapping Table.
Registry mappings are persisted as a single JSON object in one config map
data entry, keyed by ``namespace/release``::

    {"prod/web": {"namespace": "prod", "releaseName": "web",
                  "chartName": "nginx", "registry": "oci://registry.example.com/charts"}}

This module loads, edits and serializes that blob. Reading and writing the
config map itself belongs to the backend.

Examples:
    >>> table = RegistryMappingTable.from_json('{"prod/web": {"namespace": "prod", "releaseName": "web", "registry": "oci://r"}}')
    >>> "prod/web" in table
    True
    >>> table.get("prod", "web").registry
    'oci://r'
    >>> RegistryMappingTable.from_json("").list()
    []
"""

# Standard
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Union

# Third-Party
import orjson
from pydantic import ValidationError

# First-Party
from helmvm.config import settings
from helmvm.schemas import RegistryMapping, release_key

logger = logging.getLogger(__name__)


class RegistryStoreError(Exception):
    """Raised when the stored mappings blob cannot be read."""


class RegistryMappingTable:
    """In-memory view of the stored registry mappings.

    Iteration and :meth:`list` follow insertion order of the stored blob.
    """

    def __init__(self, mappings: Optional[Iterable[RegistryMapping]] = None) -> None:
        self._mappings: Dict[str, RegistryMapping] = {}
        for mapping in mappings or ():
            self._mappings[mapping.key] = mapping

    def __contains__(self, key: object) -> bool:
        return key in self._mappings

    def __len__(self) -> int:
        return len(self._mappings)

    @classmethod
    def from_json(cls, data: Union[str, bytes, None]) -> "RegistryMappingTable":
        """Load a table from the stored JSON blob.

        Args:
            data: The blob; missing or empty means no mappings.

        Returns:
            RegistryMappingTable: The loaded table.

        Raises:
            RegistryStoreError: If the blob is not a JSON object of mappings.
        """
        if not data:
            return cls()
        try:
            raw = orjson.loads(data)
        except orjson.JSONDecodeError as exc:
            raise RegistryStoreError(f"failed to unmarshal mappings: {exc}") from exc
        if not isinstance(raw, dict):
            raise RegistryStoreError("failed to unmarshal mappings: expected a JSON object")

        table = cls()
        for key, value in raw.items():
            try:
                mapping = RegistryMapping.model_validate(value)
            except ValidationError as exc:
                raise RegistryStoreError(f"failed to unmarshal mapping {key!r}: {exc}") from exc
            if mapping.key != key:
                logger.warning(f"Registry mapping stored under {key!r} belongs to {mapping.key!r}")
            table._mappings[key] = mapping
        return table

    @classmethod
    def from_configmap_data(cls, data: Optional[Mapping[str, str]]) -> "RegistryMappingTable":
        """Load a table from a config map's ``data`` section.

        Args:
            data: Config map data; the blob sits under ``settings.registry_configmap_key``.

        Returns:
            RegistryMappingTable: The loaded table.
        """
        return cls.from_json((data or {}).get(settings.registry_configmap_key))

    def to_json(self) -> str:
        """Serialize the table to the stored blob format.

        Examples:
            >>> m = RegistryMapping(namespace="a", releaseName="b", chartName="c", registry="oci://r")
            >>> RegistryMappingTable([m]).to_json()
            '{"a/b":{"namespace":"a","releaseName":"b","chartName":"c","registry":"oci://r"}}'
        """
        payload = {key: mapping.model_dump(by_alias=True) for key, mapping in self._mappings.items()}
        return orjson.dumps(payload).decode()

    def to_configmap_data(self) -> Dict[str, str]:
        """Return the config map ``data`` section holding this table."""
        return {settings.registry_configmap_key: self.to_json()}

    def get(self, namespace: str, name: str) -> Optional[RegistryMapping]:
        """Return the release's mapping, or None."""
        return self._mappings.get(release_key(namespace, name))

    def set(self, mapping: RegistryMapping) -> None:
        """Create or replace the mapping for ``mapping.key``."""
        self._mappings[mapping.key] = mapping

    def delete(self, namespace: str, name: str) -> None:
        """Remove a mapping; missing mappings are ignored."""
        self._mappings.pop(release_key(namespace, name), None)

    def list(self) -> List[RegistryMapping]:
        """Return all mappings."""
        return list(self._mappings.values())
