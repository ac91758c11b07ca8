"""
curator.infrastructure.manifest_codec - Manifest Wire Format
==============================================================

Converts between the in-memory manifest (list of ArtifactRecord) and the
transport form the store's contents API speaks: base64 over UTF-8 JSON.

    list[ArtifactRecord] ──serialize──▶ UTF-8 JSON bytes ──to_transport──▶ base64 text
           ▲                                                                   │
           └────────────── parse_entries ◀── from_transport ◀──────────────────┘
                                  (decode = from_transport + parse_entries)

Unicode Safety:
    The JSON is encoded to UTF-8 bytes before base64, and base64 output is
    decoded back to bytes before UTF-8 decoding. Multi-byte scripts and emoji
    therefore survive the round trip byte for byte.

Line Breaks:
    The store wraps base64 content at 60 columns when returning it. All
    whitespace is stripped before decoding.

Legacy Entries:
    Only the document layers (base64, UTF-8, JSON syntax, top-level array)
    can make a manifest unreadable. An entry that does not validate as an
    ArtifactRecord (a null description, a missing createdAt, written by an
    older tool) is kept as its raw JSON value and written back unchanged.
    parse_document() skips such entries for display.

Round-trip Law:
    decode(encode(records)) == records
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Sequence, Union

from pydantic import ValidationError

from curator.core.exceptions import CodecError
from curator.core.models import ArtifactRecord


# A validated record, or the raw JSON value of an entry that did not validate.
ManifestEntry = Union[ArtifactRecord, Any]


# =============================================================================
# Transport Helpers
# =============================================================================
def to_transport(raw: bytes) -> str:
    """Base64-encode raw bytes for the store's write API."""
    return base64.b64encode(raw).decode("ascii")


def from_transport(encoded: Union[str, bytes]) -> bytes:
    """Decode base64 transport content, ignoring incidental whitespace.

    Raises:
        CodecError: If the content is not valid base64.
    """
    if isinstance(encoded, bytes):
        try:
            encoded = encoded.decode("ascii")
        except UnicodeDecodeError as exc:
            raise CodecError(
                message="Transport content is not ASCII base64",
                details={"reason": str(exc)},
            ) from exc

    compact = "".join(encoded.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CodecError(
            message="Transport content is not valid base64",
            details={"reason": str(exc), "length": len(compact)},
        ) from exc


# =============================================================================
# Manifest Encoding
# =============================================================================
def serialize(entries: Sequence[ManifestEntry]) -> bytes:
    """Render entries as canonical UTF-8 JSON (wire field names, 2-space indent).

    ArtifactRecords are dumped by alias; raw entries are written as they are.
    """
    payload = [
        entry.model_dump(mode="json", by_alias=True) if isinstance(entry, ArtifactRecord) else entry
        for entry in entries
    ]
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def encode(entries: Sequence[ManifestEntry]) -> str:
    """Serialize entries and apply the base64 transport encoding."""
    return to_transport(serialize(entries))


def parse_entries(raw: bytes) -> list[Any]:
    """Parse raw manifest JSON into its entries, untouched.

    Only the document is checked; entries come back as plain JSON values.

    Raises:
        CodecError: On invalid UTF-8, invalid JSON or a non-list document.
    """
    try:
        data: Any = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise CodecError(
            message="Manifest is not valid UTF-8",
            details={"reason": str(exc)},
        ) from exc
    except json.JSONDecodeError as exc:
        raise CodecError(
            message="Manifest is not valid JSON",
            details={"reason": exc.msg, "line": exc.lineno, "column": exc.colno},
        ) from exc

    if not isinstance(data, list):
        raise CodecError(
            message="Manifest must be a JSON array",
            details={"found": type(data).__name__},
        )
    return data


def to_records(entries: Sequence[Any]) -> tuple[list[ArtifactRecord], list[int]]:
    """Validate entries as ArtifactRecords.

    Returns:
        (records in manifest order, indexes of entries that did not validate)
    """
    records: list[ArtifactRecord] = []
    skipped: list[int] = []
    for index, entry in enumerate(entries):
        if isinstance(entry, ArtifactRecord):
            records.append(entry)
            continue
        try:
            records.append(ArtifactRecord.model_validate(entry))
        except ValidationError:
            skipped.append(index)
    return records, skipped


def parse_document(raw: bytes) -> list[ArtifactRecord]:
    """Parse raw manifest JSON into displayable records.

    Args:
        raw: UTF-8 JSON bytes, as served by the public raw host.

    Returns:
        Records in manifest order. Entries that are not valid records are
        left out.

    Raises:
        CodecError: On invalid UTF-8, invalid JSON or a non-list document.
    """
    records, _ = to_records(parse_entries(raw))
    return records


def decode_entries(encoded: Union[str, bytes]) -> list[Any]:
    """from_transport() + parse_entries(): the manifest exactly as stored.

    Raises:
        CodecError: If any layer of the encoding is malformed. Callers treat
            this as "manifest unreadable", never as "manifest absent".
    """
    return parse_entries(from_transport(encoded))


def decode(encoded: Union[str, bytes]) -> list[ArtifactRecord]:
    """Inverse of encode(): strip whitespace, base64-decode, parse records.

    Raises:
        CodecError: If any layer of the encoding is malformed.
    """
    records, _ = to_records(decode_entries(encoded))
    return records
