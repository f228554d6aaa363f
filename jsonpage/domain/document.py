"""
Order-preserving document model.

A page document is a JSON object whose top-level keys are content blocks
(object values) plus the reserved ``flags`` entry. Both the top-level key
order and each block's own key order are significant, so decoding goes
through an ``object_pairs_hook`` that keeps the raw pair sequence next to
the mapping.

Duplicate keys:
- Top level: last value wins, position is that of the first occurrence
  (plain ``dict`` construction semantics).
- Inside a block: every pair is kept, in source order. Tags need not be
  unique.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

from jsonpage.errors import DocumentDecodeError


FLAGS_KEY = "flags"

_UTF8_BOM = b"\xef\xbb\xbf"


class JsonObject(dict):
    """A decoded JSON object that remembers its raw (key, value) pairs."""

    def __init__(self, pairs: List[Tuple[str, Any]]):
        super().__init__(pairs)
        self._pairs = pairs


@dataclass(frozen=True)
class ContentBlock:
    """One object-valued top-level entry, rendered as a group."""
    identifier: str
    items: Tuple[Tuple[str, Any], ...] = ()

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class OrderedDocument:
    """Decoded page document: content blocks in source order plus flags."""
    blocks: Tuple[ContentBlock, ...] = ()
    flags: Dict[str, Any] = field(default_factory=dict)

    @property
    def block_ids(self) -> List[str]:
        return [block.identifier for block in self.blocks]


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON and cannot be re-emitted as JSON.
    raise ValueError(f"Non-standard JSON constant {name}")


def _pairs_of(value: Any) -> List[Tuple[str, Any]]:
    if isinstance(value, JsonObject):
        return list(value._pairs)
    return list(value.items())


def decode_document(raw: bytes) -> OrderedDocument:
    """
    Decode raw document bytes into an OrderedDocument.

    Args:
        raw: Document bytes (UTF-8, optional BOM)

    Returns:
        The decoded document. Empty or whitespace-only input yields an
        empty document.

    Raises:
        DocumentDecodeError: If the bytes are not UTF-8, not valid JSON, or
            the top-level value is not an object.
    """
    if raw.startswith(_UTF8_BOM):
        raw = raw[len(_UTF8_BOM):]

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentDecodeError(f"Document is not valid UTF-8: {e}") from e

    if not text.strip():
        return OrderedDocument()

    try:
        root = json.loads(
            text,
            object_pairs_hook=JsonObject,
            parse_constant=_reject_constant,
        )
    except (ValueError, RecursionError) as e:
        raise DocumentDecodeError(f"Document is not valid JSON: {e}") from e

    if not isinstance(root, dict):
        raise DocumentDecodeError(
            f"Document root must be an object, got {type(root).__name__}"
        )

    flags: Dict[str, Any] = {}
    blocks: List[ContentBlock] = []

    # Iterating the dict (not the raw pairs) applies the top-level duplicate policy.
    for key, value in root.items():
        if key == FLAGS_KEY:
            if isinstance(value, dict):
                flags = dict(value)
            continue
        if not isinstance(value, dict):
            continue
        blocks.append(ContentBlock(identifier=key, items=tuple(_pairs_of(value))))

    return OrderedDocument(blocks=tuple(blocks), flags=flags)
