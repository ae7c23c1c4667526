"""
Digital signature module for Post-Quantum Cryptography.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from quantcrypt import errors as qc_errors
from quantcrypt.dss import MLDSA_44, MLDSA_65, MLDSA_87

from kdt import armor, config, encoding
from kdt.errors import MalformedEncoding, SigningError

logger = logging.getLogger(__name__)

SIG_ALGORITHMS = {
    "Dilithium2": MLDSA_44,
    "Dilithium3": MLDSA_65,
    "Dilithium5": MLDSA_87
}

SUPPORTED_SIG_ALGORITHMS = set(SIG_ALGORITHMS.keys())


def dss_class(algorithm: Optional[str] = None):
    """Look up the signature scheme class for ``algorithm`` (default: the configured one).

    Raises:
        ValueError: If the algorithm is not supported
    """
    algorithm = algorithm or config.SIG_ALGORITHM
    if algorithm not in SUPPORTED_SIG_ALGORITHMS:
        raise ValueError(
            f"Unsupported algorithm: {algorithm}. "
            f"Must be one of: {', '.join(sorted(SUPPORTED_SIG_ALGORITHMS))}"
        )
    return SIG_ALGORITHMS[algorithm]


@dataclass(frozen=True)
class SignedEnvelope:
    """A plaintext message and the signature over its UTF-8 bytes."""
    message: str
    signature: bytes

    def to_armor(self) -> str:
        return armor.wrap_signed(self.message, encoding.encode(self.signature))

    @classmethod
    def from_armor(cls, text: str) -> "SignedEnvelope":
        message, signature = armor.unwrap_signed(text)
        return cls(message=message, signature=encoding.decode(signature))


def sign_message(private_key: bytes, message: bytes, algorithm: Optional[str] = None) -> bytes:
    """Sign raw bytes with the given private key.

    Raises:
        SigningError: If the private key is rejected by the scheme
    """
    dss_cls = dss_class(algorithm)
    try:
        return dss_cls().sign(private_key, message)
    except (qc_errors.QuantCryptError, ValueError) as e:
        logger.warning(f"Signing failed: {e}")
        raise SigningError("Failed to sign with this private key") from e


def verify_signature(public_key: bytes, message: bytes, signature: bytes, algorithm: Optional[str] = None) -> bool:
    """Verify a signature over raw bytes.

    Returns:
        bool: True if the signature is valid, False otherwise. Malformed keys
        or signatures count as invalid.
    """
    dss_cls = dss_class(algorithm)
    try:
        return bool(dss_cls().verify(public_key, message, signature))
    except (qc_errors.QuantCryptError, ValueError) as e:
        logger.debug(f"Signature rejected: {e}")
        return False


def sign(message: str, signing_private_key: bytes, signing_public_key: bytes,
         algorithm: Optional[str] = None) -> SignedEnvelope:
    """Sign a text message.

    The signature is checked against ``signing_public_key`` before it is
    returned, so a private key paired with the wrong public key fails here
    rather than producing a block nobody can verify.

    Raises:
        SigningError: If signing fails or the keys do not belong together
    """
    data = message.encode("utf-8")
    signature = sign_message(signing_private_key, data, algorithm)
    if not verify_signature(signing_public_key, data, signature, algorithm):
        raise SigningError("The signing private key does not match the signing public key")
    return SignedEnvelope(message=message, signature=signature)


def verify(message: str, signature: bytes, signing_public_key: bytes,
           algorithm: Optional[str] = None) -> bool:
    """Check that ``signature`` covers ``message`` under ``signing_public_key``."""
    return verify_signature(signing_public_key, message.encode("utf-8"), signature, algorithm)


def verify_armored(signed_text: str, signing_public_key: bytes, algorithm: Optional[str] = None) -> bool:
    """Verify an armored signed message.

    A signature block that is not valid base64 counts as invalid; a block with
    missing markers raises EnvelopeFormatError.
    """
    message, signature_text = armor.unwrap_signed(signed_text)
    try:
        signature = encoding.decode(signature_text)
    except MalformedEncoding:
        return False
    return verify(message, signature, signing_public_key, algorithm)


__all__ = [
    'SignedEnvelope',
    'sign',
    'verify',
    'verify_armored',
    'sign_message',
    'verify_signature',
    'dss_class',
    'SUPPORTED_SIG_ALGORITHMS',
]
