"""Cryptographic operations for the vault."""

import base64
import binascii
import logging
import secrets
from typing import TYPE_CHECKING

from argon2.exceptions import HashingError
from argon2.low_level import hash_secret_raw, Type
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import AuthenticationFailure, DerivationFailure, InvalidParameters
from .memory import SecretBytes

if TYPE_CHECKING:
    from .models import KdfParams

logger = logging.getLogger("cyfer.crypto")


# Argon2id parameters
ARGON2_MEMORY_COST = 19456  # 19 MiB
ARGON2_TIME_COST = 2        # 2 iterations
ARGON2_PARALLELISM = 1      # 1 lane
KEY_LENGTH = 32             # 256-bit key

# Limits accepted by the Argon2 reference implementation
ARGON2_MAX_COST = 2**32 - 1
ARGON2_MAX_PARALLELISM = 2**24 - 1

SALT_LENGTH = 16            # 16 bytes
NONCE_LENGTH = 12           # 96-bit nonce for AES-GCM
TAG_LENGTH = 16             # 128-bit GCM tag

Key = SecretBytes | bytes | bytearray


def generate_salt() -> bytes:
    """Generate a cryptographically secure random 16-byte salt."""
    return secrets.token_bytes(SALT_LENGTH)


def validate_params(params: "KdfParams") -> None:
    """
    Check that Argon2id will accept the given cost parameters.

    Raises:
        InvalidParameters: If any cost is outside the accepted range
    """
    for name in ("memory_cost", "time_cost", "parallelism"):
        value = getattr(params, name)
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidParameters(f"Argon2 {name} must be an integer, got {value!r}")

    if not 1 <= params.parallelism <= ARGON2_MAX_PARALLELISM:
        raise InvalidParameters(
            f"Argon2 parallelism must be between 1 and {ARGON2_MAX_PARALLELISM}"
        )
    if not 1 <= params.time_cost <= ARGON2_MAX_COST:
        raise InvalidParameters(f"Argon2 time cost must be between 1 and {ARGON2_MAX_COST}")
    if not 8 * params.parallelism <= params.memory_cost <= ARGON2_MAX_COST:
        raise InvalidParameters(
            "Argon2 memory cost must be at least 8 KiB per lane "
            f"({8 * params.parallelism} KiB) and at most {ARGON2_MAX_COST} KiB"
        )


def derive_key(password: str, salt: bytes, params: "KdfParams") -> SecretBytes:
    """
    Derive a 256-bit encryption key from password using Argon2id.

    The derivation is deliberately expensive and is repeated for every
    vault operation; no key is cached between calls.

    Args:
        password: The master password
        salt: The vault salt (SALT_LENGTH bytes)
        params: Argon2id cost parameters stored in the vault

    Returns:
        32-byte key in a buffer the caller must wipe

    Raises:
        InvalidParameters: If salt size or cost parameters are invalid
        DerivationFailure: If Argon2 reports an error
    """
    if len(salt) != SALT_LENGTH:
        raise InvalidParameters(f"Salt must be exactly {SALT_LENGTH} bytes")
    validate_params(params)

    logger.debug(
        "Deriving key (m=%d KiB, t=%d, p=%d)",
        params.memory_cost, params.time_cost, params.parallelism,
    )
    try:
        raw = hash_secret_raw(
            secret=password.encode('utf-8'),
            salt=salt,
            time_cost=params.time_cost,
            memory_cost=params.memory_cost,
            parallelism=params.parallelism,
            hash_len=KEY_LENGTH,
            type=Type.ID  # Argon2id
        )
    except HashingError as e:
        raise DerivationFailure(f"Argon2 failed: {e}") from e
    except MemoryError as e:
        raise DerivationFailure("Argon2 failed: out of memory") from e

    return SecretBytes(raw)


def _key_bytes(key: Key) -> bytearray | bytes:
    material = key.buffer if isinstance(key, SecretBytes) else key
    if len(material) != KEY_LENGTH:
        raise ValueError(f"Key must be exactly {KEY_LENGTH} bytes")
    return material


def encrypt(key: Key, plaintext: bytes | bytearray) -> tuple[bytes, bytes]:
    """
    Encrypt plaintext using AES-256-GCM.

    A fresh random nonce is generated for every call.

    Args:
        key: 32-byte encryption key
        plaintext: The bytes to encrypt

    Returns:
        Tuple of (nonce, ciphertext); the ciphertext includes the GCM tag
    """
    nonce = secrets.token_bytes(NONCE_LENGTH)
    aesgcm = AESGCM(_key_bytes(key))
    ciphertext = aesgcm.encrypt(nonce, plaintext, None)
    return nonce, ciphertext


def decrypt(key: Key, nonce: bytes, ciphertext: bytes) -> SecretBytes:
    """
    Decrypt ciphertext using AES-256-GCM.

    Args:
        key: 32-byte encryption key
        nonce: The 12-byte nonce used during encryption
        ciphertext: The encrypted data (includes GCM tag)

    Returns:
        Plaintext in a buffer the caller must wipe

    Raises:
        AuthenticationFailure: Wrong key, wrong nonce or tampered data
    """
    aesgcm = AESGCM(_key_bytes(key))
    if len(nonce) != NONCE_LENGTH or len(ciphertext) < TAG_LENGTH:
        raise AuthenticationFailure("Decryption failed (wrong password or corrupted vault)")
    try:
        return SecretBytes(aesgcm.decrypt(nonce, ciphertext, None))
    except InvalidTag as e:
        raise AuthenticationFailure(
            "Decryption failed (wrong password or corrupted vault)"
        ) from e


def b64encode(data: bytes) -> str:
    """Encode bytes as standard base64 text."""
    return base64.b64encode(data).decode('ascii')


def b64decode(text: str) -> bytes:
    """
    Decode standard base64 text.

    Raises:
        ValueError: If the text is not valid base64
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected base64 text, got {type(text).__name__}")
    try:
        return base64.b64decode(text.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid base64: {e}") from e
