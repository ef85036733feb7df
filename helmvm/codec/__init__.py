# -*- coding: utf-8 -*-
"""Values document codec.

Converts release values between nested Python mappings and the editable,
indentation-based text shown in the values editor.

SPDX-License-Identifier: Apache-2.0
"""

from helmvm.codec.document import (
    Document,
    DocumentKind,
    DocumentMapping,
    find_ambiguous_strings,
    infer_scalar,
    kind_of,
    literal_kind,
    validate_document,
)
from helmvm.codec.values import decode, encode

__all__ = [
    "encode",
    "decode",
    "Document",
    "DocumentKind",
    "DocumentMapping",
    "kind_of",
    "literal_kind",
    "infer_scalar",
    "validate_document",
    "find_ambiguous_strings",
]
