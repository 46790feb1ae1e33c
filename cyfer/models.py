"""
Data model of a vault file.

The persisted JSON document looks like::

    {
      "salt_b64": "...",
      "kdf": {"m_cost_kib": 19456, "t_cost": 2, "p_cost": 1},
      "secrets": {"github": {"nonce_b64": "...", "ct_b64": "..."}},
      "verifier": {"nonce_b64": "...", "ct_b64": "..."},
      "revision": 3
    }

Binary values are held decoded in memory and base64-encoded on disk.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from . import crypto
from .exceptions import CorruptVault


@dataclass(frozen=True)
class KdfParams:
    """Argon2id cost parameters, fixed when the vault is created."""

    memory_cost: int  # KiB
    time_cost: int
    parallelism: int

    def to_dict(self) -> dict:
        return {
            "m_cost_kib": self.memory_cost,
            "t_cost": self.time_cost,
            "p_cost": self.parallelism,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "KdfParams":
        _require_mapping(data, "kdf")
        values = {}
        for key, attr in (("m_cost_kib", "memory_cost"),
                          ("t_cost", "time_cost"),
                          ("p_cost", "parallelism")):
            value = data.get(key)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise CorruptVault(f"kdf.{key} must be a non-negative integer")
            values[attr] = value
        return cls(**values)


DEFAULT_KDF_PARAMS = KdfParams(
    memory_cost=crypto.ARGON2_MEMORY_COST,
    time_cost=crypto.ARGON2_TIME_COST,
    parallelism=crypto.ARGON2_PARALLELISM,
)


@dataclass(frozen=True)
class EncRecord:
    """One AES-GCM sealed payload and the nonce it was sealed with."""

    nonce: bytes
    ciphertext: bytes

    def to_dict(self) -> dict:
        return {
            "nonce_b64": crypto.b64encode(self.nonce),
            "ct_b64": crypto.b64encode(self.ciphertext),
        }

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "EncRecord":
        _require_mapping(data, where)
        try:
            nonce = crypto.b64decode(data.get("nonce_b64"))
            ciphertext = crypto.b64decode(data.get("ct_b64"))
        except ValueError as e:
            raise CorruptVault(f"{where}: {e}") from e
        if len(nonce) != crypto.NONCE_LENGTH:
            raise CorruptVault(f"{where}: nonce must be {crypto.NONCE_LENGTH} bytes")
        if len(ciphertext) < crypto.TAG_LENGTH:
            raise CorruptVault(f"{where}: ciphertext is shorter than its tag")
        return cls(nonce=nonce, ciphertext=ciphertext)


@dataclass
class SecretBundle:
    """The plaintext credential stored for one service."""

    username: str
    secret: str
    notes: Optional[str] = None

    def to_json(self) -> bytes:
        return json.dumps(
            {"username": self.username, "secret": self.secret, "notes": self.notes},
            separators=(",", ":"),
            ensure_ascii=False,
        ).encode('utf-8')

    @classmethod
    def from_json(cls, data: bytes | bytearray) -> "SecretBundle":
        try:
            parsed = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptVault("Stored secret is not a valid bundle") from e
        if not isinstance(parsed, dict):
            raise CorruptVault("Stored secret is not a valid bundle")
        username = parsed.get("username")
        secret = parsed.get("secret")
        notes = parsed.get("notes")
        if not isinstance(username, str) or not isinstance(secret, str):
            raise CorruptVault("Stored secret is missing username or secret")
        if notes is not None and not isinstance(notes, str):
            raise CorruptVault("Stored secret has non-text notes")
        return cls(username=username, secret=secret, notes=notes)

    def __repr__(self) -> str:
        return f"SecretBundle(username={self.username!r}, secret=<hidden>)"


@dataclass
class Vault:
    """
    The complete persisted state of one vault file.

    ``revision`` counts successful writes; it lets a writer detect that the
    file changed after it was read.
    """

    salt: bytes
    kdf: KdfParams
    verifier: EncRecord
    secrets: dict[str, EncRecord] = field(default_factory=dict)
    revision: int = 0

    def to_dict(self) -> dict:
        return {
            "salt_b64": crypto.b64encode(self.salt),
            "kdf": self.kdf.to_dict(),
            "secrets": {
                service: record.to_dict()
                for service, record in self.secrets.items()
            },
            "verifier": self.verifier.to_dict(),
            "revision": self.revision,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Vault":
        """
        Build a Vault from a parsed JSON document.

        Raises:
            CorruptVault: If any field is missing, ill-typed or mis-sized
        """
        _require_mapping(data, "vault")

        try:
            salt = crypto.b64decode(data.get("salt_b64"))
        except ValueError as e:
            raise CorruptVault(f"salt_b64: {e}") from e
        if len(salt) != crypto.SALT_LENGTH:
            raise CorruptVault(f"salt must be {crypto.SALT_LENGTH} bytes")

        kdf = KdfParams.from_dict(data.get("kdf"))
        verifier = EncRecord.from_dict(data.get("verifier"), "verifier")

        raw_secrets = data.get("secrets")
        _require_mapping(raw_secrets, "secrets")
        secrets = {
            service: EncRecord.from_dict(record, f"secrets[{service!r}]")
            for service, record in raw_secrets.items()
        }

        revision = data.get("revision", 0)
        if not isinstance(revision, int) or isinstance(revision, bool) or revision < 0:
            raise CorruptVault("revision must be a non-negative integer")

        return cls(salt=salt, kdf=kdf, verifier=verifier,
                   secrets=secrets, revision=revision)


def _require_mapping(value: Any, where: str) -> None:
    if not isinstance(value, dict):
        raise CorruptVault(f"{where} must be a JSON object")
