"""
Key records and their content-hash identifiers.

A record's id is the uppercase hex SHA-256 of its armored text. The armor
never contains the id, so the id is a pure function of the key bytes and the
owner name and is filled in as part of constructing the record.
"""
import hashlib
import logging
from dataclasses import dataclass, field

from kdt import armor, encoding
from kdt.keygen import generate_kem_keypair, generate_signing_keypair

logger = logging.getLogger(__name__)


def compute_id(canonical_text: str) -> str:
    """Hash the canonical armored form of a record into its id."""
    return hashlib.sha256(canonical_text.encode("utf-8")).hexdigest().upper()


def _encode_fields(encryption_key: bytes, signing_key: bytes, owner: str):
    return [
        encoding.encode(encryption_key),
        encoding.encode(signing_key),
        encoding.encode(owner.encode("utf-8")),
    ]


def _decode_fields(tag: str, text: str):
    encryption_key, signing_key, owner = armor.unwrap(tag, text)
    return (
        encoding.decode(encryption_key),
        encoding.decode(signing_key),
        encoding.decode(owner).decode("utf-8", errors="replace"),
    )


@dataclass(frozen=True)
class PublicKeyRecord:
    encryption_public_key: bytes
    signing_public_key: bytes
    owner: str
    id: str = field(init=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "id", compute_id(self.to_armor()))

    def to_armor(self) -> str:
        fields = _encode_fields(self.encryption_public_key, self.signing_public_key, self.owner)
        return armor.wrap(armor.PUBKEY_TAG, fields)

    @classmethod
    def from_armor(cls, text: str) -> "PublicKeyRecord":
        """Parse an armored public key block.

        Raises:
            EnvelopeFormatError: If the block is malformed
            MalformedEncoding: If a field is not valid base64
        """
        return cls(*_decode_fields(armor.PUBKEY_TAG, text))


@dataclass(frozen=True)
class PrivateKeyRecord:
    encryption_private_key: bytes = field(repr=False)
    signing_private_key: bytes = field(repr=False)
    owner: str
    id: str = field(init=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "id", compute_id(self.to_armor()))

    def to_armor(self) -> str:
        fields = _encode_fields(self.encryption_private_key, self.signing_private_key, self.owner)
        return armor.wrap(armor.PRIVKEY_TAG, fields)

    @classmethod
    def from_armor(cls, text: str) -> "PrivateKeyRecord":
        return cls(*_decode_fields(armor.PRIVKEY_TAG, text))


@dataclass(frozen=True)
class OwnedKeySet:
    """An encryption keypair and a signing keypair generated together."""
    public: PublicKeyRecord
    private: PrivateKeyRecord

    @property
    def id(self) -> str:
        # Owned keysets are addressed by their private key id
        return self.private.id

    @property
    def owner(self) -> str:
        return self.private.owner

    @classmethod
    def generate(cls, owner: str) -> "OwnedKeySet":
        """Generate fresh encryption and signing keypairs for ``owner``."""
        encryption_public, encryption_private = generate_kem_keypair()
        signing_public, signing_private = generate_signing_keypair()

        keyset = cls(
            public=PublicKeyRecord(encryption_public, signing_public, owner),
            private=PrivateKeyRecord(encryption_private, signing_private, owner),
        )
        logger.info(f"Generated owned key set {keyset.private.id} (public id {keyset.public.id})")
        return keyset

    @classmethod
    def from_armor(cls, public_text: str, private_text: str) -> "OwnedKeySet":
        return cls(
            public=PublicKeyRecord.from_armor(public_text),
            private=PrivateKeyRecord.from_armor(private_text),
        )
