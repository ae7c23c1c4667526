"""
KDT: hybrid post-quantum encryption and signing.
Implements ML-KEM + AES-256-GCM encryption and ML-DSA signatures using quantcrypt.
"""

from kdt.encryption import EncryptedEnvelope, encrypt, decrypt
from kdt.sign import SignedEnvelope, sign_message, verify_signature
from kdt.keys import PublicKeyRecord, PrivateKeyRecord, OwnedKeySet, compute_id
from kdt.store import KeyStore
from kdt.handler import KdtHandler

__version__ = "0.1.0"

__all__ = [
    'EncryptedEnvelope',
    'SignedEnvelope',
    'PublicKeyRecord',
    'PrivateKeyRecord',
    'OwnedKeySet',
    'KeyStore',
    'KdtHandler',
    'compute_id',
    'encrypt',
    'decrypt',
    'sign_message',
    'verify_signature'
]
