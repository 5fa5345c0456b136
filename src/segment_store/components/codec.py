"""Value codecs.

Turn the raw value bytes of a record into the text handed back to callers.
Decoded text is returned verbatim; no escaping or normalization is applied.
"""

from __future__ import annotations

import gzip
import struct
import zlib

from ..core.errors import ValueDecodeError
from ..interfaces.codec import ValueCodec

# Nutch ParseText Writable versions
PARSE_TEXT_COMPRESSED = 1
PARSE_TEXT_VERSION = 2


def _signed_byte(b: int) -> int:
    return b - 256 if b > 127 else b


def read_vint(data: bytes, pos: int = 0) -> tuple[int, int]:
    """Decode a Hadoop variable-length int at ``pos``.

    Returns:
        (value, position after the encoded int)
    """
    if pos >= len(data):
        raise ValueDecodeError("Truncated VInt")
    first = _signed_byte(data[pos])
    if first >= -112:
        return first, pos + 1

    negative = first < -120
    size = (-119 - first) if negative else (-111 - first)
    end = pos + size
    if end > len(data):
        raise ValueDecodeError(f"Truncated VInt: need {size} bytes at offset {pos}")

    value = int.from_bytes(data[pos + 1:end], "big")
    return (~value if negative else value), end


class Utf8ValueCodec:
    """Values are stored as plain UTF-8 text."""

    name = "utf-8"

    def decode(self, raw: bytes) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueDecodeError(f"Value is not valid UTF-8: {e}") from e


class ParseTextCodec:
    """Values are serialized Nutch ``ParseText`` writables.

    Layout: ``[version (1B)]`` followed by, for version 2, a Hadoop ``Text``
    string (VInt length + UTF-8 bytes), or for version 1 a 4-byte big-endian
    length and a gzip-compressed UTF-8 payload (length -1 means no text).
    """

    name = "parse-text"

    def decode(self, raw: bytes) -> str:
        if not raw:
            raise ValueDecodeError("Empty ParseText record")

        version = raw[0]
        if version == PARSE_TEXT_VERSION:
            length, pos = read_vint(raw, 1)
            if length < 0 or pos + length > len(raw):
                raise ValueDecodeError(f"Bad ParseText length {length}")
            payload = raw[pos:pos + length]
        elif version == PARSE_TEXT_COMPRESSED:
            if len(raw) < 5:
                raise ValueDecodeError("Truncated compressed ParseText header")
            (length,) = struct.unpack(">i", raw[1:5])
            if length == -1:
                return ""
            if length < 0 or 5 + length > len(raw):
                raise ValueDecodeError(f"Bad compressed ParseText length {length}")
            try:
                payload = gzip.decompress(raw[5:5 + length])
            except (OSError, EOFError, zlib.error) as e:
                raise ValueDecodeError(f"Corrupt compressed ParseText: {e}") from e
        else:
            raise ValueDecodeError(f"Unsupported ParseText version: {version}")

        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueDecodeError(f"ParseText is not valid UTF-8: {e}") from e


CODECS: dict[str, type[ValueCodec]] = {
    Utf8ValueCodec.name: Utf8ValueCodec,
    ParseTextCodec.name: ParseTextCodec,
}


def get_codec(name: str) -> ValueCodec:
    """Return a codec instance by its configured name."""
    try:
        return CODECS[name]()
    except KeyError:
        raise ValueError(f"Unknown value codec: {name!r} (expected one of {sorted(CODECS)})") from None
