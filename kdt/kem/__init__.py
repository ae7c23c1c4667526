"""
Key Encapsulation Mechanism (KEM) module for Post-Quantum Cryptography.
"""
import logging
from typing import Optional, Tuple

from quantcrypt import errors as qc_errors
from quantcrypt.kem import MLKEM_512, MLKEM_768, MLKEM_1024

from kdt import config
from kdt.errors import DecapsulationError, EncapsulationError

logger = logging.getLogger(__name__)

KEM_ALGORITHMS = {
    "Kyber512": MLKEM_512,
    "Kyber768": MLKEM_768,
    "Kyber1024": MLKEM_1024
}

SUPPORTED_KEM_ALGORITHMS = set(KEM_ALGORITHMS.keys())


def kem_class(algorithm: Optional[str] = None):
    """Look up the KEM class for ``algorithm`` (default: the configured one).

    Raises:
        ValueError: If the algorithm is not supported
    """
    algorithm = algorithm or config.KEM_ALGORITHM
    if algorithm not in SUPPORTED_KEM_ALGORITHMS:
        raise ValueError(
            f"Unsupported algorithm: {algorithm}. "
            f"Must be one of: {', '.join(sorted(SUPPORTED_KEM_ALGORITHMS))}"
        )
    return KEM_ALGORITHMS[algorithm]


def encapsulate_key(public_key: bytes, algorithm: Optional[str] = None) -> Tuple[bytes, bytes]:
    """Encapsulate a shared secret using the given public key.

    Args:
        public_key (bytes): The recipient's KEM public key.
        algorithm (str): Optional KEM algorithm name, one of
            Kyber512, Kyber768, Kyber1024.

    Returns:
        Tuple[bytes, bytes]: A tuple containing (encapsulated_secret, shared_secret)

    Raises:
        EncapsulationError: If the public key is rejected by the KEM
    """
    kem_cls = kem_class(algorithm)
    try:
        return kem_cls().encaps(public_key)
    except (qc_errors.QuantCryptError, ValueError) as e:
        logger.warning(f"KEM encapsulation failed: {e}")
        raise EncapsulationError("Failed to encapsulate against this public key") from e


def decapsulate_key(encapsulated_secret: bytes, private_key: bytes, algorithm: Optional[str] = None) -> bytes:
    """Recover a shared secret using the given private key.

    Args:
        encapsulated_secret (bytes): The KEM ciphertext produced by encapsulate_key().
        private_key (bytes): The recipient's KEM private key.
        algorithm (str): Optional KEM algorithm name.

    Returns:
        bytes: The shared secret.

    Raises:
        DecapsulationError: If the KEM rejects the key or the encapsulated secret
    """
    kem_cls = kem_class(algorithm)
    try:
        return kem_cls().decaps(private_key, encapsulated_secret)
    except (qc_errors.QuantCryptError, ValueError) as e:
        logger.warning(f"KEM decapsulation failed: {e}")
        raise DecapsulationError("You used the wrong private key!") from e
