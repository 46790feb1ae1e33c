"""
Zero-on-exit containers for key material and decrypted plaintext.

Python may keep copies of immutable ``bytes`` it has seen, so wiping is
best-effort. What can be guaranteed is that every buffer we own is zeroed
on every exit path, which is what ``SecretBytes`` is for:

    with crypto.derive_key(password, salt, params) as key:
        nonce, ciphertext = crypto.encrypt(key, plaintext)
    # key.buffer is now all zeros
"""

from __future__ import annotations

import ctypes
from typing import Optional


def secure_zero(data: bytearray) -> None:
    """Overwrite a mutable byte buffer with zeros in place."""
    if len(data) == 0:
        return

    try:
        addr = ctypes.addressof((ctypes.c_char * len(data)).from_buffer(data))
        ctypes.memset(addr, 0, len(data))
    except (TypeError, ValueError, BufferError):
        # ctypes cannot map this buffer writably; zero it byte by byte
        for i in range(len(data)):
            data[i] = 0


class SecretBytes:
    """
    Mutable byte buffer that is zeroed when its scope ends.

    Use as a context manager, or call ``wipe()`` in a ``finally`` block.
    The buffer is also wiped when the object is garbage collected.
    """

    __slots__ = ("_buffer", "_wiped")

    def __init__(self, data: Optional[bytes | bytearray] = None):
        self._buffer = bytearray(data or b"")
        self._wiped = False

    @property
    def buffer(self) -> bytearray:
        """The live buffer. Do not keep references past the owning scope."""
        if self._wiped:
            raise ValueError("Secret has been wiped")
        return self._buffer

    @property
    def is_wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        """Zero the buffer. Safe to call more than once."""
        if self._wiped:
            return
        secure_zero(self._buffer)
        self._wiped = True

    def __enter__(self) -> "SecretBytes":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()

    def __del__(self) -> None:
        try:
            self.wipe()
        except Exception:
            pass

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        if self._wiped:
            return "SecretBytes(WIPED)"
        return f"SecretBytes(len={len(self._buffer)})"
