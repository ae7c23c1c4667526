"""
Hybrid encryption: a KEM shared secret used directly as an AES-256-GCM key.
"""
import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from kdt import armor, encoding
from kdt.errors import AuthenticationError, EncryptionError
from kdt.kem import decapsulate_key, encapsulate_key

logger = logging.getLogger(__name__)

KEY_SIZE = 32
NONCE_SIZE = 12


@dataclass(frozen=True)
class EncryptedEnvelope:
    """Everything a recipient needs to decrypt one message."""
    encapsulated_secret: bytes
    ciphertext: bytes
    nonce: bytes

    def to_armor(self) -> str:
        return armor.wrap(armor.MESSAGE_TAG, [
            encoding.encode(self.encapsulated_secret),
            encoding.encode(self.ciphertext),
            encoding.encode(self.nonce),
        ])

    @classmethod
    def from_armor(cls, text: str) -> "EncryptedEnvelope":
        secret, ciphertext, nonce = armor.unwrap(armor.MESSAGE_TAG, text)
        return cls(
            encapsulated_secret=encoding.decode(secret),
            ciphertext=encoding.decode(ciphertext),
            nonce=encoding.decode(nonce),
        )


def seal(key: bytes, plaintext: bytes) -> Tuple[bytes, bytes]:
    """
    Encrypt using AES-GCM with a KEM-derived symmetric key.

    Args:
        key: 32-byte symmetric key (the KEM shared secret)
        plaintext: Message bytes to encrypt

    Returns:
        Tuple[bytes, bytes]: (nonce, ciphertext || tag)

    Raises:
        EncryptionError: If key length is not 32 bytes or sealing fails
    """
    if len(key) != KEY_SIZE:
        raise EncryptionError(f"Key must be {KEY_SIZE} bytes")

    # Fresh 96-bit nonce for every message
    nonce = secrets.token_bytes(NONCE_SIZE)

    try:
        ciphertext = AESGCM(key).encrypt(nonce, plaintext, None)
    except (ValueError, OverflowError) as e:
        raise EncryptionError("AES-GCM encryption failed") from e
    return nonce, ciphertext


def open_sealed(key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypt and authenticate AES-GCM output.

    Raises:
        AuthenticationError: If the key has the wrong length, the nonce is
            malformed, or the tag does not verify
    """
    if len(key) != KEY_SIZE:
        raise AuthenticationError(f"Key must be {KEY_SIZE} bytes")
    if len(nonce) != NONCE_SIZE:
        raise AuthenticationError(f"Nonce must be {NONCE_SIZE} bytes")

    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)  # No associated data (AAD)
    except InvalidTag as e:
        raise AuthenticationError("AES-GCM decryption failed: message was tampered with or the key is wrong") from e


def encrypt(plaintext: str, recipient_public_key: bytes, algorithm: Optional[str] = None) -> EncryptedEnvelope:
    """Encrypt text for the holder of the private half of ``recipient_public_key``.

    Raises:
        EncapsulationError: If the public key is malformed
        EncryptionError: If AES-GCM sealing fails
    """
    encapsulated_secret, shared_secret = encapsulate_key(recipient_public_key, algorithm)
    nonce, ciphertext = seal(shared_secret, plaintext.encode("utf-8"))
    logger.debug(f"Encrypted {len(ciphertext)} bytes of ciphertext")
    return EncryptedEnvelope(encapsulated_secret, ciphertext, nonce)


def decrypt(envelope: EncryptedEnvelope, recipient_private_key: bytes, algorithm: Optional[str] = None) -> str:
    """Decrypt an envelope with the recipient's KEM private key.

    Invalid UTF-8 in the recovered plaintext is replaced rather than rejected.

    Raises:
        DecapsulationError: If the KEM rejects the private key or encapsulated secret
        AuthenticationError: If the ciphertext does not authenticate
    """
    shared_secret = decapsulate_key(envelope.encapsulated_secret, recipient_private_key, algorithm)
    plaintext = open_sealed(shared_secret, envelope.nonce, envelope.ciphertext)
    return plaintext.decode("utf-8", errors="replace")
