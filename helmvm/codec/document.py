# -*- coding: utf-8 -*-
"""Location: ./helmvm/codec/document.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Values document model.

A release's values are a nested tree of plain Python values. Every node is one
of a closed set of variants, exposed through :class:`DocumentKind`:

- ``None``                     -> ``DocumentKind.NULL``
- ``bool``                     -> ``DocumentKind.BOOL``
- ``int`` / ``float``          -> ``DocumentKind.NUMBER``
- ``str``                      -> ``DocumentKind.STRING``
- ``dict[str, Document]``      -> ``DocumentKind.MAPPING``
- ``list[Document]``           -> ``DocumentKind.LIST``

Callers that consume decoded values dispatch on :func:`kind_of` rather than on
ad-hoc ``isinstance`` chains.

Scalar inference is shared by the encoder and the decoder: a bare token is
``null``, ``true``/``false``, a decimal numeral, or text. A string value whose
text looks like one of those literals does not survive an encode/decode cycle
as a string; :func:`find_ambiguous_strings` reports such values so the editor
can warn about them.

Examples:
    >>> kind_of({"a": 1})
    <DocumentKind.MAPPING: 'mapping'>
    >>> infer_scalar("42"), infer_scalar("4.5"), infer_scalar("true"), infer_scalar("web")
    (42, 4.5, True, 'web')
    >>> find_ambiguous_strings({"image": {"tag": "1.20"}, "name": "web"})
    ['image.tag']
"""

# Standard
from enum import Enum
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Union

Scalar = Union[None, bool, int, float, str]
Document = Union[Scalar, Dict[str, "Document"], List["Document"]]
DocumentMapping = Dict[str, Document]

# Full decimal numeral: optional sign, digits with optional fraction, optional exponent
_NUMBER_RE = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?$")
_INTEGER_RE = re.compile(r"^[-+]?\d+$")

_LITERALS: Dict[str, Scalar] = {"null": None, "true": True, "false": False}


class DocumentKind(str, Enum):
    """Variant tag of a document node."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    MAPPING = "mapping"
    LIST = "list"


def kind_of(value: Any) -> DocumentKind:
    """Return the variant tag of a document node.

    Args:
        value: Node to classify.

    Returns:
        DocumentKind: The node's variant.

    Raises:
        TypeError: If the value is not a document node.

    Examples:
        >>> kind_of(None)
        <DocumentKind.NULL: 'null'>
        >>> kind_of(True)
        <DocumentKind.BOOL: 'bool'>
        >>> kind_of(3)
        <DocumentKind.NUMBER: 'number'>
        >>> kind_of(["a"])
        <DocumentKind.LIST: 'list'>
        >>> kind_of(object())
        Traceback (most recent call last):
        ...
        TypeError: Value of type object is not a values document node
    """
    if value is None:
        return DocumentKind.NULL
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return DocumentKind.BOOL
    if isinstance(value, (int, float)):
        return DocumentKind.NUMBER
    if isinstance(value, str):
        return DocumentKind.STRING
    if isinstance(value, Mapping):
        return DocumentKind.MAPPING
    if isinstance(value, (list, tuple)):
        return DocumentKind.LIST
    raise TypeError(f"Value of type {type(value).__name__} is not a values document node")


def validate_document(value: Any, path: str = "") -> None:
    """Check that a whole tree is made of document nodes with string keys.

    Args:
        value: Root of the tree.
        path: Location of ``value`` inside an enclosing document.

    Raises:
        TypeError: Naming the first offending location.

    Examples:
        >>> validate_document({"a": [1, {"b": None}]})
        >>> validate_document({"a": {1: "x"}})
        Traceback (most recent call last):
        ...
        TypeError: a: mapping key 1 is not a string
    """
    try:
        kind = kind_of(value)
    except TypeError as exc:
        raise TypeError(f"{path or '<root>'}: {exc}") from exc

    if kind is DocumentKind.MAPPING:
        for key, child in value.items():
            if not isinstance(key, str):
                raise TypeError(f"{path or '<root>'}: mapping key {key!r} is not a string")
            validate_document(child, _join(path, key))
    elif kind is DocumentKind.LIST:
        for index, child in enumerate(value):
            validate_document(child, f"{path}[{index}]")


def infer_scalar(token: str) -> Scalar:
    """Infer the type of a bare (unquoted) scalar token.

    ``null``, ``true`` and ``false`` are matched exactly. Decimal numerals
    become ``int`` when they have neither fraction nor exponent, ``float``
    otherwise. Numerals that do not fit a finite float, and everything else,
    stay text.

    Args:
        token: Trimmed scalar text.

    Returns:
        Scalar: The inferred value.

    Examples:
        >>> infer_scalar("null") is None
        True
        >>> infer_scalar("False")
        'False'
        >>> infer_scalar("-17"), infer_scalar("+2.50"), infer_scalar("1e3")
        (-17, 2.5, 1000.0)
        >>> infer_scalar("1e999")
        '1e999'
        >>> infer_scalar("0x10")
        '0x10'
    """
    if token in _LITERALS:
        return _LITERALS[token]
    if _NUMBER_RE.match(token):
        if _INTEGER_RE.match(token):
            try:
                return int(token)
            except ValueError:
                # int() refuses numerals beyond the interpreter's digit limit
                return token
        number = float(token)
        if math.isfinite(number):
            return number
    return token


def literal_kind(text: str) -> Optional[DocumentKind]:
    """Return the non-string kind a bare token would decode to, if any.

    Examples:
        >>> literal_kind("true")
        <DocumentKind.BOOL: 'bool'>
        >>> literal_kind("007")
        <DocumentKind.NUMBER: 'number'>
        >>> literal_kind("latest") is None
        True
    """
    value = infer_scalar(text)
    if isinstance(value, str):
        return None
    return kind_of(value)


def find_ambiguous_strings(doc: Mapping[str, Any]) -> List[str]:
    """List the locations of strings that would decode as another type.

    Only single-line strings are affected; multi-line strings are always
    emitted as literal blocks.

    Args:
        doc: Document to scan.

    Returns:
        List[str]: Dotted paths (``a.b[0].c``) in document order.

    Examples:
        >>> find_ambiguous_strings({"a": ["yes", "false"], "b": {"port": "8080"}, "c": 8080})
        ['a[1]', 'b.port']
    """
    found: List[str] = []
    _scan(doc, "", found)
    return found


def _scan(value: Any, path: str, found: List[str]) -> None:
    if isinstance(value, str):
        if "\n" not in value and literal_kind(value) is not None:
            found.append(path)
    elif isinstance(value, Mapping):
        for key, child in value.items():
            _scan(child, _join(path, str(key)), found)
    elif isinstance(value, (list, tuple)):
        for index, child in enumerate(value):
            _scan(child, f"{path}[{index}]", found)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key
