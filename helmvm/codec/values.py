# -*- coding: utf-8 -*-
"""Location: ./helmvm/codec/values.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Values text encoder/decoder.

Converts a release's values document to an indentation-based, YAML-like text
for editing, and converts the edited text back. Only the subset of syntax the
encoder produces plus straightforward hand edits is understood:

1. ``key: value`` scalars, with the type of bare values inferred
   (``null``, ``true``/``false``, decimal numbers, text)
2. ``key:`` followed by deeper-indented lines for nested mappings and lists
3. ``- item`` list elements, including ``- key: value`` mappings whose later
   keys align under the first
4. ``key: |`` literal blocks for multi-line strings
5. ``#`` comment lines and blank lines, which are ignored

Anchors, flow collections (other than ``[]``/``{}`` for empty ones),
multi-document streams and escape sequences are not supported.

Decoding never raises: lines that cannot be placed are dropped and values that
cannot be typed are kept as text.

A string whose text is ``null``, ``true``, ``false`` or a numeral decodes as
that literal, not as a string, unless the encoder is asked to quote it
(``quote_ambiguous=True``). See :func:`helmvm.codec.document.find_ambiguous_strings`.

Examples:
    >>> from helmvm.codec.values import encode, decode
    >>> data = {"name": "web", "replicas": 2, "image": {"tag": "v1"}}
    >>> text = encode(data)
    >>> text.splitlines()
    ['name: web', 'replicas: 2', 'image:', '  tag: v1']
    >>> decode(text) == data
    True

    >>> decode("ports:\\n  - 80\\n  - 443\\nnote: |\\n  one\\n  two\\n")
    {'ports': [80, 443], 'note': 'one\\ntwo'}
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .document import infer_scalar, literal_kind

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Indentation unit for each nesting level
_INDENT = "  "

# Value tokens with structural meaning when they appear unquoted
_STRUCTURAL_TOKENS = frozenset({"|", "[]", "{}"})

_QUOTES = ("\"", "'")


# =============================================================================
# Encoder
# =============================================================================


def encode(doc: Mapping[str, Any], *, quote_ambiguous: bool = False) -> str:
    """Encode a values mapping as editable text.

    Args:
        doc: Root mapping to encode.
        quote_ambiguous: Double-quote strings that would otherwise decode as
            ``null``, a boolean or a number.

    Returns:
        str: Newline-terminated lines; empty for an empty mapping.

    Raises:
        TypeError: If ``doc`` is not a mapping or holds a non-document value.

    Examples:
        >>> encode({})
        ''
        >>> encode({"a": None, "b": True, "c": 1.50, "d": "text"}).splitlines()
        ['a: null', 'b: true', 'c: 1.5', 'd: text']
        >>> encode({"note": "line1\\nline2"}).splitlines()
        ['note: |', '  line1', '  line2']
        >>> encode({"port": "8080"})
        'port: 8080\\n'
        >>> encode({"port": "8080"}, quote_ambiguous=True)
        'port: "8080"\\n'
    """
    if not isinstance(doc, Mapping):
        raise TypeError(f"Values document must be a mapping, not {type(doc).__name__}")

    lines: List[str] = []
    _encode_mapping(doc, 0, lines, quote_ambiguous)
    return "".join(f"{line}\n" for line in lines)


def _encode_mapping(obj: Mapping[str, Any], level: int, lines: List[str], quote_ambiguous: bool) -> None:
    """Append one entry per key of ``obj`` at the given nesting level."""
    pad = _INDENT * level
    for key, value in obj.items():
        _encode_entry(f"{pad}{key}:", value, level, lines, quote_ambiguous)


def _encode_entry(head: str, value: Any, level: int, lines: List[str], quote_ambiguous: bool, in_list: bool = False) -> None:
    """Append ``value`` after ``head`` (``key:`` or ``-``), recursing into containers.

    Children of ``head`` are placed one level deeper than ``level``.
    """
    if isinstance(value, Mapping):
        lines.append(head)
        _encode_mapping(value, level + 1, lines, quote_ambiguous)
    elif isinstance(value, (list, tuple)):
        if not value:
            lines.append(f"{head} []")
            return
        lines.append(head)
        for item in value:
            _encode_item(item, level + 1, lines, quote_ambiguous)
    elif isinstance(value, str) and "\n" in value:
        # Literal block, one line per line of text, no escaping
        lines.append(f"{head} |")
        pad = _INDENT * (level + 1)
        lines.extend(f"{pad}{part}" for part in value.split("\n"))
    else:
        lines.append(f"{head} {_encode_scalar(value, quote_ambiguous, in_list)}")


def _encode_item(item: Any, level: int, lines: List[str], quote_ambiguous: bool) -> None:
    """Append a list element whose ``-`` marker sits at ``level``.

    A non-empty mapping element puts its first pair on the marker line; the
    rest of its pairs align under the first.
    """
    pad = _INDENT * level
    if isinstance(item, Mapping) and item:
        start = len(lines)
        _encode_mapping(item, level + 1, lines, quote_ambiguous)
        lines[start] = f"{pad}- {lines[start][len(pad) + len(_INDENT):]}"
    elif isinstance(item, Mapping):
        lines.append(f"{pad}-")
    else:
        _encode_entry(f"{pad}-", item, level, lines, quote_ambiguous, in_list=True)


def _encode_scalar(value: Any, quote_ambiguous: bool, in_list: bool) -> str:
    """Render a single-line scalar.

    Examples:
        >>> _encode_scalar(None, False, False)
        'null'
        >>> _encode_scalar(False, False, False)
        'false'
        >>> _encode_scalar(-17, False, False)
        '-17'
        >>> _encode_scalar("", False, False)
        '""'
        >>> _encode_scalar("a: b", False, True)
        '"a: b"'
        >>> _encode_scalar("a: b", False, False)
        'a: b'
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _encode_float(value)
    if isinstance(value, str):
        if _needs_quotes(value, in_list) or (quote_ambiguous and literal_kind(value) is not None):
            return f'"{value}"'
        return value
    raise TypeError(f"Object of type {type(value).__name__} is not a values document node")


def _encode_float(value: float) -> str:
    """Encode a float in plain decimal notation.

    Whole floats drop the ``.0``, exponents are expanded and non-finite
    values become ``null``.

    Examples:
        >>> _encode_float(3.14)
        '3.14'
        >>> _encode_float(2.0)
        '2'
        >>> _encode_float(-0.0)
        '0'
        >>> _encode_float(1e-07)
        '0.0000001'
        >>> _encode_float(float("inf"))
        'null'
    """
    if not math.isfinite(value):
        return "null"
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def _needs_quotes(s: str, in_list: bool) -> bool:
    """Whether ``s`` must be quoted to decode back as the same string.

    Quoting here protects structure only (empty values, padding, block and
    list markers); it never depends on literal lookalikes.

    Examples:
        >>> _needs_quotes("", False)
        True
        >>> _needs_quotes(" padded", False)
        True
        >>> _needs_quotes("|", False)
        True
        >>> _needs_quotes("'already quoted'", False)
        True
        >>> _needs_quotes("- item", False), _needs_quotes("- item", True)
        (False, True)
        >>> _needs_quotes("http://example.com", True)
        False
    """
    if not s or s != s.strip():
        return True
    if s in _STRUCTURAL_TOKENS:
        return True
    if _is_quoted(s):
        return True
    if in_list and (s == "-" or s.startswith("- ") or _opens_mapping(s)):
        return True
    return False


# =============================================================================
# Decoder
# =============================================================================


Container = Union[Dict[str, Any], List[Any]]
# (container, slot, owner indent) of a literal block waiting for its lines
_PendingBlock = Tuple[Container, Union[str, int], int]


@dataclass
class _Frame:
    """An open container and the indent of the line that opened it.

    A container opened by an empty value starts as an empty mapping and turns
    into a list when its first child is a list item; ``parent``/``slot`` locate
    it so the replacement can be stored.
    """

    indent: int
    container: Container
    parent: Optional[Container] = None
    slot: Union[str, int, None] = None

    def mapping(self) -> Optional[Dict[str, Any]]:
        if isinstance(self.container, dict):
            return self.container
        return None

    def sequence(self) -> Optional[List[Any]]:
        if isinstance(self.container, list):
            return self.container
        if not self.container and self.parent is not None:
            self.container = []
            self.parent[self.slot] = self.container  # type: ignore[index]
            return self.container
        return None


def decode(text: str) -> Dict[str, Any]:
    """Decode edited values text back into a mapping.

    Args:
        text: Text in the format produced by :func:`encode`.

    Returns:
        Dict[str, Any]: The decoded root mapping.

    Examples:
        >>> decode("")
        {}
        >>> decode("flag: true\\nquoted: 'true'\\ncount: 42\\nratio: 0.5\\nnothing: null")
        {'flag': True, 'quoted': 'true', 'count': 42, 'ratio': 0.5, 'nothing': None}
        >>> decode("outer:\\n    inner: 5\\n# comment\\n\\nother: x")
        {'outer': {'inner': 5}, 'other': 'x'}
        >>> decode("a: 1\\na: 2")
        {'a': 2}
        >>> decode("items:\\n  - name: a\\n    port: 80\\n  - name: b")
        {'items': [{'name': 'a', 'port': 80}, {'name': 'b'}]}
    """
    root: Dict[str, Any] = {}
    stack: List[_Frame] = [_Frame(indent=-1, container=root)]
    lines = [line.rstrip("\r") for line in text.split("\n")]

    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        content = line.strip()
        if not content or content.startswith("#"):
            continue

        indent = _indent_of(line)
        is_item = _is_list_item(content)
        while len(stack) > 1 and stack[-1].indent >= indent:
            if is_item and _continues_compact_list(stack[-1], indent):
                break
            stack.pop()

        pending = _decode_line(stack, content, indent)
        if pending is not None:
            container, slot, owner_indent = pending
            container[slot], i = _collect_block(lines, i, owner_indent)  # type: ignore[index]

    return root


def _decode_line(stack: List[_Frame], content: str, indent: int) -> Optional[_PendingBlock]:
    """Place one logical line into the innermost open frame.

    Returns:
        The block target when the line opens a literal block, else None.
    """
    frame = stack[-1]

    if _is_list_item(content):
        items = frame.sequence()
        if items is None:
            logger.debug(f"Ignoring list item outside a list: {content[:50]!r}")
            return None
        rest = content[1:].lstrip()
        rest_indent = indent + len(content) - len(rest)

        if not rest or _is_list_item(rest) or (not _is_quoted(rest) and _opens_mapping(rest)):
            child: Dict[str, Any] = {}
            items.append(child)
            stack.append(_Frame(indent=indent, container=child, parent=items, slot=len(items) - 1))
            if rest:
                return _decode_line(stack, rest, rest_indent)
            return None
        if rest == "|":
            items.append("")
            return (items, len(items) - 1, indent)
        items.append(_decode_scalar(rest))
        return None

    if ":" not in content:
        logger.debug(f"Ignoring line without a key: {content[:50]!r}")
        return None

    mapping = frame.mapping()
    if mapping is None:
        logger.debug(f"Ignoring key inside a list: {content[:50]!r}")
        return None

    key, _, raw = content.partition(":")
    key = key.strip()
    raw = raw.strip()

    if not raw:
        child = {}
        mapping[key] = child
        stack.append(_Frame(indent=indent, container=child, parent=mapping, slot=key))
        return None
    if raw == "|":
        mapping[key] = ""
        return (mapping, key, indent)
    mapping[key] = _decode_scalar(raw)
    return None


def _decode_scalar(raw: str) -> Any:
    """Decode a trimmed, non-empty single-line value.

    Examples:
        >>> _decode_scalar('"42"'), _decode_scalar("42")
        ('42', 42)
        >>> _decode_scalar("[]"), _decode_scalar("{}")
        ([], {})
        >>> _decode_scalar('"it\\'s"')
        "it's"
    """
    if _is_quoted(raw):
        return raw[1:-1]
    if raw == "[]":
        return []
    if raw == "{}":
        return {}
    return infer_scalar(raw)


def _collect_block(lines: List[str], start: int, owner_indent: int) -> Tuple[str, int]:
    """Collect literal block lines indented deeper than their owner.

    The smallest indent among the non-blank lines is stripped. Trailing blank
    lines are kept only while they still carry that indent.

    Returns:
        Tuple of (block text, index of the first line after the block).

    Examples:
        >>> _collect_block(["    a", "      b", "", "c: 1"], 0, 0)
        ('a\\n  b', 3)
        >>> _collect_block(["  a", "  ", "b: 1"], 0, 0)
        ('a\\n', 2)
        >>> _collect_block(["b: 1"], 0, 0)
        ('', 0)
    """
    block: List[str] = []
    i = start
    while i < len(lines):
        line = lines[i]
        if line.strip() and _indent_of(line) <= owner_indent:
            break
        block.append(line)
        i += 1

    widths = [_indent_of(line) for line in block if line.strip()]
    if not widths:
        return "", i
    width = min(widths)
    while block and not block[-1].strip() and len(block[-1]) < width:
        block.pop()
    return "\n".join(line[width:] for line in block), i


# =============================================================================
# Helpers
# =============================================================================


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _is_list_item(content: str) -> bool:
    return content == "-" or content.startswith("- ")


def _is_quoted(s: str) -> bool:
    return len(s) >= 2 and s[0] in _QUOTES and s[0] == s[-1]


def _opens_mapping(s: str) -> bool:
    """Whether list item content reads as ``key: value`` or ``key:``."""
    return ": " in s or s.endswith(":")


def _continues_compact_list(frame: _Frame, indent: int) -> bool:
    """Whether a list item at ``indent`` belongs to a key on the same column.

    Supports the compact style where ``- item`` lines sit directly under
    their key instead of one level deeper.
    """
    return (
        frame.indent == indent
        and isinstance(frame.slot, str)
        and (isinstance(frame.container, list) or not frame.container)
    )
