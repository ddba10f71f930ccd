"""JSON encoding of cache documents."""

from typing import Any

import msgspec

from dotcache.exceptions import CodecError

_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder()


def encode(document: Any) -> str:
    """Serialize a document to a JSON string."""
    try:
        return _encoder.encode(document).decode("utf-8")
    except (TypeError, ValueError, OverflowError) as e:
        raise CodecError(f"Cannot encode document: {e}") from e


def decode(payload: str | bytes) -> dict[str, Any]:
    """Parse a JSON payload into a document.

    The payload must hold a JSON object; anything else is a CodecError.
    """
    try:
        document = _decoder.decode(payload)
    except msgspec.DecodeError as e:
        raise CodecError(f"Cannot decode document: {e}") from e

    if not isinstance(document, dict):
        raise CodecError(
            f"Expected a JSON object, got {type(document).__name__}"
        )
    return document
