"""
Text armor for KDT blocks.

Every block is a header line, a body wrapped at 64 columns and a footer line.
Key and message bodies are base64 fields joined with ``*``, which never occurs
in the base64 alphabet. Signed messages nest the plaintext verbatim followed by
a separate signature sub-block.
"""
from typing import List, Tuple

from kdt.errors import EnvelopeFormatError

LINE_WIDTH = 64
FIELD_DELIMITER = "*"

PUBKEY_TAG = "PUBKEY BLOCK"
PRIVKEY_TAG = "PRIVKEY BLOCK"
MESSAGE_TAG = "MESSAGE"
SIGNED_MESSAGE_TAG = "SIGNED MESSAGE"
SIGNATURE_TAG = "SIGNATURE"

# Number of delimited fields carried by each tag
FIELD_COUNTS = {
    PUBKEY_TAG: 3,
    PRIVKEY_TAG: 3,
    MESSAGE_TAG: 3,
}


def header(tag: str) -> str:
    return f"-----BEGIN KDT {tag}-----"


def footer(tag: str) -> str:
    return f"-----END KDT {tag}-----"


def wrap_lines(text: str, width: int = LINE_WIDTH) -> str:
    """Break text into lines of ``width`` characters, leaving the last line short."""
    return "\n".join(text[i:i + width] for i in range(0, len(text), width))


def _arity(tag: str) -> int:
    if tag not in FIELD_COUNTS:
        raise EnvelopeFormatError(
            f"Unsupported block type: {tag}. "
            f"Must be one of: {', '.join(sorted(FIELD_COUNTS))}"
        )
    return FIELD_COUNTS[tag]


def wrap(tag: str, fields: List[str]) -> str:
    """Armor a list of already-encoded fields under the given tag."""
    expected = _arity(tag)
    if len(fields) != expected:
        raise EnvelopeFormatError(f"{tag} takes {expected} fields, got {len(fields)}")
    for field in fields:
        if FIELD_DELIMITER in field:
            raise EnvelopeFormatError(f"Field contains the reserved delimiter {FIELD_DELIMITER!r}")

    body = wrap_lines(FIELD_DELIMITER.join(fields))
    return f"{header(tag)}\n{body}\n{footer(tag)}"


def _strip_markers(tag: str, text: str) -> str:
    begin, end = header(tag), footer(tag)
    text = text.strip()

    if len(text) < len(begin) + len(end):
        raise EnvelopeFormatError(f"Input is too short to be a KDT {tag}")
    if not text.startswith(begin):
        raise EnvelopeFormatError(f"Missing '{begin}' header")
    if not text.endswith(end):
        raise EnvelopeFormatError(f"Missing '{end}' footer")

    return text[len(begin):len(text) - len(end)]


def unwrap(tag: str, text: str) -> List[str]:
    """Recover the encoded fields from an armored block.

    Raises:
        EnvelopeFormatError: If the markers do not match ``tag``, the input is
            truncated, or the body does not split into the expected number of
            fields.
    """
    expected = _arity(tag)
    body = _strip_markers(tag, text)
    body = body.replace("\r", "").replace("\n", "")

    fields = body.split(FIELD_DELIMITER)
    if len(fields) != expected:
        raise EnvelopeFormatError(f"Expected {expected} fields in {tag}, found {len(fields)}")
    return fields


# Signed messages

_SIGNATURE_SEPARATOR = f"\n\n{header(SIGNATURE_TAG)}\n"


def wrap_signed(message: str, signature: str) -> str:
    """Armor a plaintext message together with its base64 signature."""
    return (
        f"{header(SIGNED_MESSAGE_TAG)}\n"
        f"{message}"
        f"{_SIGNATURE_SEPARATOR}"
        f"{wrap_lines(signature)}\n"
        f"{footer(SIGNATURE_TAG)}"
    )


def unwrap_signed(text: str) -> Tuple[str, str]:
    """Split a signed-message block into ``(message, signature)``.

    The message is returned exactly as it was signed. The signature is the
    base64 text with line breaks removed. CRLF line endings are read as LF.
    """
    begin = f"{header(SIGNED_MESSAGE_TAG)}\n"
    end = footer(SIGNATURE_TAG)
    text = text.replace("\r\n", "\n").strip()

    if len(text) < len(begin) + len(_SIGNATURE_SEPARATOR) + len(end):
        raise EnvelopeFormatError("Input is too short to be a KDT signed message")
    if not text.startswith(begin):
        raise EnvelopeFormatError(f"Missing '{header(SIGNED_MESSAGE_TAG)}' header")
    if not text.endswith(end):
        raise EnvelopeFormatError(f"Missing '{end}' footer")

    inner = text[len(begin):len(text) - len(end)]
    message, separator, signature = inner.rpartition(_SIGNATURE_SEPARATOR)
    if not separator:
        raise EnvelopeFormatError(f"Missing '{header(SIGNATURE_TAG)}' marker")

    signature = signature.replace("\r", "").replace("\n", "")
    if not signature:
        raise EnvelopeFormatError("Signature block is empty")
    return message, signature
