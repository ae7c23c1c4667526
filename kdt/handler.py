"""
Session-level operations that resolve keys by id and speak armored text.
"""
import logging

from kdt import encryption
from kdt.sign import sign, verify_armored
from kdt.store import KeyStore

logger = logging.getLogger(__name__)


class KdtHandler:
    """Encrypt, decrypt, sign and verify against the keys in a KeyStore."""

    def __init__(self, store: KeyStore):
        self.store = store

    def encrypt(self, public_id: str, text: str) -> str:
        """Encrypt ``text`` for the imported public key ``public_id``."""
        recipient = self.store.lookup_public(public_id)
        envelope = encryption.encrypt(text, recipient.encryption_public_key)
        logger.info(f"Encrypted message for {public_id}")
        return envelope.to_armor()

    def decrypt(self, private_id: str, armored: str) -> str:
        """Decrypt an armored message with the owned key set ``private_id``."""
        keyset = self.store.lookup_owned(private_id)
        envelope = encryption.EncryptedEnvelope.from_armor(armored)
        return encryption.decrypt(envelope, keyset.private.encryption_private_key)

    def sign(self, private_id: str, text: str) -> str:
        keyset = self.store.lookup_owned(private_id)
        signed = sign(
            text,
            keyset.private.signing_private_key,
            keyset.public.signing_public_key,
        )
        logger.info(f"Signed message with {private_id}")
        return signed.to_armor()

    def verify(self, public_id: str, armored: str) -> bool:
        """Check an armored signed message against the imported public key ``public_id``."""
        signer = self.store.lookup_public(public_id)
        valid = verify_armored(armored, signer.signing_public_key)
        logger.info(f"Signature check against {public_id}: {'valid' if valid else 'invalid'}")
        return valid
