"""
Key generation module for Post-Quantum Cryptography.
"""
import logging
from typing import Optional, Tuple

from quantcrypt import errors as qc_errors

from kdt.errors import KeyGenerationError
from kdt.kem import kem_class
from kdt.sign import dss_class

logger = logging.getLogger(__name__)


def generate_kem_keypair(algorithm: Optional[str] = None) -> Tuple[bytes, bytes]:
    """Generate an encryption keypair.

    Returns:
        Tuple[bytes, bytes]: A tuple containing (public_key, private_key)

    Raises:
        KeyGenerationError: If the KEM backend fails
    """
    kem_cls = kem_class(algorithm)
    try:
        return kem_cls().keygen()
    except qc_errors.QuantCryptError as e:
        logger.warning(f"KEM key generation failed: {e}")
        raise KeyGenerationError("Failed to generate an encryption keypair") from e


def generate_signing_keypair(algorithm: Optional[str] = None) -> Tuple[bytes, bytes]:
    """Generate a signing keypair.

    Returns:
        Tuple[bytes, bytes]: A tuple containing (public_key, private_key)

    Raises:
        KeyGenerationError: If the signature backend fails
    """
    dss_cls = dss_class(algorithm)
    try:
        return dss_cls().keygen()
    except qc_errors.QuantCryptError as e:
        logger.warning(f"Signing key generation failed: {e}")
        raise KeyGenerationError("Failed to generate a signing keypair") from e
