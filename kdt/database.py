"""
SQLite persistence for the key store.

Records are stored in their armored form and rebuilt (and re-hashed) on load,
so the file never carries an id that disagrees with its key material.
"""
import logging
import os
import sqlite3
from typing import List, Optional

from kdt import config
from kdt.errors import KdtError, StoreUnavailable
from kdt.keys import OwnedKeySet, PublicKeyRecord
from kdt.store import KeyStore

logger = logging.getLogger(__name__)


def get_db_connection(db_file: Optional[str] = None):
    """Create a connection to the SQLite database"""
    db_file = db_file or config.DATABASE_PATH
    directory = os.path.dirname(db_file)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        conn = sqlite3.connect(db_file)
    except (OSError, sqlite3.Error) as e:
        raise StoreUnavailable(f"Failed to open key database {db_file}: {e}") from e
    conn.row_factory = sqlite3.Row  # This enables column access by name
    return conn


def init_db(db_file: Optional[str] = None):
    """Initialize the database with required tables if they don't exist"""
    conn = get_db_connection(db_file)
    try:
        with conn:
            conn.execute('''
            CREATE TABLE IF NOT EXISTS public_keys (
                position INTEGER NOT NULL,
                id TEXT PRIMARY KEY,
                armor TEXT NOT NULL
            )
            ''')
            # Owned key sets hold private key material; keep this file to yourself
            conn.execute('''
            CREATE TABLE IF NOT EXISTS owned_keysets (
                position INTEGER NOT NULL,
                private_id TEXT PRIMARY KEY,
                public_id TEXT NOT NULL,
                public_armor TEXT NOT NULL,
                private_armor TEXT NOT NULL
            )
            ''')
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Failed to initialize key database: {e}") from e
    finally:
        conn.close()


def load_public_keys(db_file: Optional[str] = None) -> List[PublicKeyRecord]:
    """
    Load every public key record, in insertion order.

    Raises:
        StoreUnavailable: If the database cannot be read or a row is corrupt
    """
    init_db(db_file)
    conn = get_db_connection(db_file)
    try:
        rows = conn.execute('SELECT id, armor FROM public_keys ORDER BY position ASC').fetchall()
        records = []
        for row in rows:
            record = PublicKeyRecord.from_armor(row['armor'])
            if record.id != row['id']:
                raise StoreUnavailable(f"Stored public key {row['id']} does not match its key material")
            records.append(record)
        return records
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Failed to open public keys database: {e}") from e
    except StoreUnavailable:
        raise
    except KdtError as e:
        raise StoreUnavailable(f"Public keys database is corrupt: {e}") from e
    finally:
        conn.close()


def load_owned_keys(db_file: Optional[str] = None) -> List[OwnedKeySet]:
    """
    Load every owned key set, in insertion order.

    Raises:
        StoreUnavailable: If the database cannot be read or a row is corrupt
    """
    init_db(db_file)
    conn = get_db_connection(db_file)
    try:
        rows = conn.execute('''
        SELECT private_id, public_id, public_armor, private_armor
        FROM owned_keysets ORDER BY position ASC
        ''').fetchall()
        keysets = []
        for row in rows:
            keyset = OwnedKeySet.from_armor(row['public_armor'], row['private_armor'])
            if keyset.private.id != row['private_id'] or keyset.public.id != row['public_id']:
                raise StoreUnavailable(f"Stored key set {row['private_id']} does not match its key material")
            keysets.append(keyset)
        return keysets
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Failed to open private keys database: {e}") from e
    except StoreUnavailable:
        raise
    except KdtError as e:
        raise StoreUnavailable(f"Private keys database is corrupt: {e}") from e
    finally:
        conn.close()


def _write_public_keys(conn, records: List[PublicKeyRecord]):
    conn.execute('DELETE FROM public_keys')
    conn.executemany(
        'INSERT INTO public_keys (position, id, armor) VALUES (?, ?, ?)',
        [(i, r.id, r.to_armor()) for i, r in enumerate(records)]
    )


def _write_owned_keys(conn, keysets: List[OwnedKeySet]):
    conn.execute('DELETE FROM owned_keysets')
    conn.executemany('''
    INSERT INTO owned_keysets (position, private_id, public_id, public_armor, private_armor)
    VALUES (?, ?, ?, ?, ?)
    ''', [
        (i, k.private.id, k.public.id, k.public.to_armor(), k.private.to_armor())
        for i, k in enumerate(keysets)
    ])


def _write(db_file: Optional[str], public_keys=None, owned_keysets=None):
    init_db(db_file)
    conn = get_db_connection(db_file)
    try:
        # One transaction: either everything is replaced or nothing is
        with conn:
            if public_keys is not None:
                _write_public_keys(conn, public_keys)
            if owned_keysets is not None:
                _write_owned_keys(conn, owned_keysets)
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Failed to dump to database: {e}") from e
    finally:
        conn.close()


def save_public_keys(records: List[PublicKeyRecord], db_file: Optional[str] = None):
    """Replace the stored public keys with ``records``."""
    _write(db_file, public_keys=records)
    logger.info(f"Saved {len(records)} public keys")


def save_owned_keys(keysets: List[OwnedKeySet], db_file: Optional[str] = None):
    """Replace the stored owned key sets with ``keysets``."""
    _write(db_file, owned_keysets=keysets)
    logger.info(f"Saved {len(keysets)} owned key sets")


def load_store(db_file: Optional[str] = None) -> KeyStore:
    """Build a KeyStore from the database, creating an empty one on first use."""
    store = KeyStore(load_public_keys(db_file), load_owned_keys(db_file))
    logger.debug(f"Loaded {len(store.public_keys)} public keys and {len(store.owned_keysets)} owned key sets")
    return store


def save_store(store: KeyStore, db_file: Optional[str] = None):
    """Write both collections back in a single transaction."""
    _write(db_file, public_keys=store.public_keys, owned_keysets=store.owned_keysets)
    logger.info(f"Saved {len(store.public_keys)} public keys and {len(store.owned_keysets)} owned key sets")
