"""
Base64 conversion used by every armored block.
"""
import base64
import binascii

from kdt.errors import MalformedEncoding


def encode(data: bytes) -> str:
    """Convert bytes to standard (padded) base64 text."""
    return base64.b64encode(data).decode('ascii')


def decode(text: str) -> bytes:
    """Convert base64 text back to bytes.

    Only the exact output of encode() is accepted, so padding bits that
    encode() would have zeroed are rejected as well.

    Raises:
        MalformedEncoding: If the text contains characters outside the base64
            alphabet, is incorrectly padded, or is not in canonical form.
    """
    try:
        data = base64.b64decode(text.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise MalformedEncoding(f"Invalid base64 data: {e}") from e
    if encode(data) != text:
        raise MalformedEncoding("Invalid base64 data: non-canonical encoding")
    return data
