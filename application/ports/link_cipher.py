"""
Link cipher port: reversible encryption of stored download locations.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LinkCipher(Protocol):
    def encrypt(self, plaintext: str) -> str: ...

    def decrypt(self, envelope: str) -> str: ...
