"""
In-memory key store.

Holds the imported public keys and the owned key sets for one session. Ids are
unique within each collection. Loading and saving live in ``kdt.database``.
"""
import logging
from typing import Iterable, List, Optional

from kdt.errors import DuplicateKey, UnknownKeyId
from kdt.keys import OwnedKeySet, PublicKeyRecord

logger = logging.getLogger(__name__)


class KeyStore:
    def __init__(self, public_keys: Optional[Iterable[PublicKeyRecord]] = None,
                 owned_keysets: Optional[Iterable[OwnedKeySet]] = None):
        self.public_keys: List[PublicKeyRecord] = []
        self.owned_keysets: List[OwnedKeySet] = []
        for record in public_keys or ():
            self.insert_public(record)
        for keyset in owned_keysets or ():
            self.insert_owned(keyset)

    # Public keys

    def lookup_public(self, key_id: str) -> PublicKeyRecord:
        """Return the public key with this id.

        Raises:
            UnknownKeyId: Unless exactly one record has the id
        """
        matches = [k for k in self.public_keys if k.id == key_id]
        if len(matches) != 1:
            raise UnknownKeyId(key_id)
        return matches[0]

    def insert_public(self, record: PublicKeyRecord) -> str:
        if any(k.id == record.id for k in self.public_keys):
            raise DuplicateKey(record.id)
        self.public_keys.append(record)
        logger.debug(f"Added public key {record.id}")
        return record.id

    def import_public(self, armored: str) -> str:
        """Parse an armored public key block and add it to the store."""
        key_id = self.insert_public(PublicKeyRecord.from_armor(armored))
        logger.info(f"Imported public key {key_id}")
        return key_id

    def remove_public(self, key_id: str) -> None:
        self.public_keys = [k for k in self.public_keys if k.id != key_id]

    # Owned key sets

    def lookup_owned(self, key_id: str) -> OwnedKeySet:
        """Return the owned key set whose private key has this id.

        Raises:
            UnknownKeyId: Unless exactly one key set has the id
        """
        matches = [k for k in self.owned_keysets if k.private.id == key_id]
        if len(matches) != 1:
            raise UnknownKeyId(key_id)
        return matches[0]

    def insert_owned(self, keyset: OwnedKeySet) -> str:
        if any(k.private.id == keyset.private.id for k in self.owned_keysets):
            raise DuplicateKey(keyset.private.id)
        self.owned_keysets.append(keyset)
        return keyset.private.id

    def remove_owned(self, key_id: str) -> None:
        self.owned_keysets = [k for k in self.owned_keysets if k.private.id != key_id]

    def generate_owned(self, owner: str) -> str:
        """Generate a new key set for ``owner`` and return its private key id."""
        return self.insert_owned(OwnedKeySet.generate(owner))

    def export_public(self, key_id: str) -> str:
        """Armored public half of the owned key set with private id ``key_id``."""
        return self.lookup_owned(key_id).public.to_armor()

    @property
    def has_public_keys(self) -> bool:
        return bool(self.public_keys)

    @property
    def has_owned_keysets(self) -> bool:
        return bool(self.owned_keysets)
