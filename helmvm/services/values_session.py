# -*- coding: utf-8 -*-
"""Location: ./helmvm/services/values_session.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Values Edit Session.
This module drives one editing pass over a release's values:

1. ``load()`` fetches the current values and encodes them as editable text.
2. ``edit()`` records the user's text; ``reset()`` goes back to the loaded text.
3. ``parse()`` decodes the text and reports strings that look like literals.
4. ``save()`` decodes the text and submits it as the release's new values.

Saving is refused when the release has no registry mapping, because the
backend redeploys the chart from that registry.

Examples:
    >>> from helmvm.schemas import Release
    >>> release = Release(name="web", namespace="prod", chart="nginx", chartVersion="1.0.0")
    >>> session = ValuesEditSession(backend=None, release=release)
    >>> session.edit("replicas: 3\\nimage:\\n  tag: \\"1.25\\"")
    >>> session.parse().values
    {'replicas': 3, 'image': {'tag': '1.25'}}
"""

# Standard
import asyncio
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional

# First-Party
from helmvm.codec import decode, encode, find_ambiguous_strings
from helmvm.config import settings
from helmvm.schemas import Release, ValuesUpdateRequest
from helmvm.services.backend import ReleaseBackend

logger = logging.getLogger(__name__)


class ValuesSessionError(Exception):
    """Base class for values session errors."""


class RegistryNotConfiguredError(ValuesSessionError):
    """The release has no registry mapping, so values cannot be redeployed."""

    def __init__(self, release: Release):
        self.release = release
        super().__init__(f"Registry is not configured for {release.key}. Set a registry before updating values.")


class EmptyValuesError(ValuesSessionError):
    """The edited text is blank."""


class ValuesTooLargeError(ValuesSessionError):
    """The edited text exceeds the configured size limit."""


@dataclass
class ParsedValues:
    """Result of decoding the edited text.

    Attributes:
        values: The decoded document.
        ambiguous: Paths of strings in ``values`` that would not survive
            another encode/decode cycle as strings.
    """

    values: Dict[str, Any]
    ambiguous: List[str] = field(default_factory=list)


class ValuesEditSession:
    """Editing state for one release's values.

    Examples:
        >>> from helmvm.schemas import Release
        >>> release = Release(name="web", namespace="prod", chart="nginx", chartVersion="1.0.0")
        >>> session = ValuesEditSession(backend=None, release=release)
        >>> session.text
        ''
        >>> session.can_save
        False
    """

    def __init__(self, backend: ReleaseBackend, release: Release) -> None:
        """Initialize the session.

        Args:
            backend: Backend serving values.
            release: Release whose values are edited.
        """
        self._backend = backend
        self.release = release
        self._initial_text = ""
        self._edited_text: Optional[str] = None
        self._save_lock = asyncio.Lock()

    @property
    def text(self) -> str:
        """The edited text, or the loaded text when nothing was edited."""
        return self._edited_text if self._edited_text is not None else self._initial_text

    @property
    def is_dirty(self) -> bool:
        """Whether the user edited the loaded text."""
        return self._edited_text is not None

    @property
    def can_save(self) -> bool:
        """Whether ``save()`` would be attempted."""
        return self.release.has_registry and bool(self.text.strip())

    async def load(self) -> str:
        """Fetch the release's values and encode them for editing.

        Returns:
            str: The editable text.

        Raises:
            ReleaseBackendError: If the backend fails.
        """
        values = await self._backend.get_values(self.release.namespace, self.release.name)
        if settings.warn_on_ambiguous_values and not settings.values_quote_ambiguous:
            ambiguous = find_ambiguous_strings(values)
            if ambiguous:
                logger.warning(f"Values of {self.release.key} hold strings that will be read back as literals: {', '.join(ambiguous)}")
        self._initial_text = encode(values, quote_ambiguous=settings.values_quote_ambiguous)
        self._edited_text = None
        return self._initial_text

    def edit(self, text: str) -> None:
        """Record the user's edited text."""
        self._edited_text = text

    def reset(self) -> None:
        """Discard the user's edit."""
        self._edited_text = None

    def parse(self) -> ParsedValues:
        """Decode the current text.

        Returns:
            ParsedValues: The document and its ambiguous string locations.

        Examples:
            >>> from helmvm.schemas import Release
            >>> release = Release(name="web", namespace="prod", chart="nginx", chartVersion="1.0.0")
            >>> session = ValuesEditSession(backend=None, release=release)
            >>> session.edit("tag: '1.0'")
            >>> session.parse().ambiguous
            ['tag']
        """
        values = decode(self.text)
        return ParsedValues(values=values, ambiguous=find_ambiguous_strings(values))

    async def save(self) -> Release:
        """Decode the current text and submit it as the release's values.

        Returns:
            Release: The redeployed release.

        Raises:
            RegistryNotConfiguredError: If the release has no registry mapping.
            EmptyValuesError: If the text is blank.
            ValuesTooLargeError: If the text exceeds ``settings.values_max_bytes``.
            ValuesSessionError: If the text cannot be encoded as UTF-8.
            ReleaseBackendError: If the backend rejects the update.
        """
        async with self._save_lock:
            if not self.release.has_registry:
                raise RegistryNotConfiguredError(self.release)
            text = self.text
            if not text.strip():
                raise EmptyValuesError(f"No values to save for {self.release.key}")
            try:
                size = len(text.encode("utf-8"))
            except UnicodeEncodeError as exc:
                raise ValuesSessionError(f"Values text for {self.release.key} is not valid UTF-8: {exc.reason}") from exc
            if size > settings.values_max_bytes:
                raise ValuesTooLargeError(f"Values text is {size} bytes, limit is {settings.values_max_bytes}")

            parsed = self.parse()
            if parsed.ambiguous and settings.warn_on_ambiguous_values:
                logger.warning(f"Saving {self.release.key} with strings read as literals: {', '.join(parsed.ambiguous)}")

            request = ValuesUpdateRequest(values=parsed.values)
            updated = await self._backend.update_values(self.release.namespace, self.release.name, request.values)
            # Backends report the redeployed release without its registry mapping
            release = updated.model_copy(update={"has_registry": self.release.has_registry})
            logger.info(f"Values of {self.release.key} saved, now at revision {release.revision}")

            self.release = release
            self._initial_text = encode(parsed.values, quote_ambiguous=settings.values_quote_ambiguous)
            self._edited_text = None
            return release
