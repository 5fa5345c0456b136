"""Protocol definition for Value Codec."""

from __future__ import annotations

from typing import Protocol


class ValueCodec(Protocol):
    """Decodes raw stored value bytes to payload text."""

    name: str

    def decode(self, raw: bytes) -> str:
        """Return the verbatim text form of ``raw``.

        Raises:
            ValueDecodeError: If the bytes are not a valid encoding
        """
        ...
