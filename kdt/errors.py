"""
Exception hierarchy for KDT.

Every failure the core can produce is one of these types; nothing in the core
terminates the process. The command-line front end decides what is fatal.
"""


class KdtError(Exception):
    """Base exception for all KDT errors."""


# User input

class UserInputError(KdtError):
    """Malformed input or a reference to something that does not exist."""


class MalformedEncoding(UserInputError):
    """Text is not valid base64 produced by the binary codec."""


class EnvelopeFormatError(UserInputError):
    """An armored block is truncated, mislabelled or has the wrong shape."""


class UnknownKeyId(UserInputError):
    def __init__(self, key_id: str):
        super().__init__(f"The key id you passed is invalid: {key_id}")
        self.key_id = key_id


# Cryptographic operations

class CryptoOperationError(KdtError):
    """A KEM, AEAD or signature operation failed."""


class EncapsulationError(CryptoOperationError):
    pass


class DecapsulationError(CryptoOperationError):
    pass


class EncryptionError(CryptoOperationError):
    pass


class AuthenticationError(CryptoOperationError):
    pass


class SigningError(CryptoOperationError):
    pass


class KeyGenerationError(CryptoOperationError):
    pass


# Key store state

class StateError(KdtError):
    """The key store cannot perform the operation in its current state."""


class DuplicateKey(StateError):
    def __init__(self, key_id: str):
        super().__init__(f"This key already exists in the database: {key_id}")
        self.key_id = key_id


class StoreUnavailable(StateError):
    """The persisted key database could not be read or written."""
