"""
deflation.access
================

Single-owner gate for administrative ledger operations.

The owner is plain state: one address fixed when the token is constructed.
Every administrative operation calls :meth:`AccessControl.require_owner` as its
very first statement, before any other validation, so a non-owner learns
nothing about the validity of the rest of the request.

There is no ownership transfer or renounce; the identity never changes.
"""

from __future__ import annotations

from .errors import NotOwner
from .types.address import Address, AddressLike, to_address


class AccessControl:
    __slots__ = ("_owner",)

    def __init__(self, owner: AddressLike) -> None:
        addr = to_address(owner)
        if addr.is_zero():
            raise ValueError("owner must not be the zero address")
        self._owner = addr

    @property
    def owner(self) -> Address:
        return self._owner

    def is_owner(self, caller: Address) -> bool:
        return caller == self._owner

    def require_owner(self, caller: Address) -> None:
        """Raise NotOwner unless `caller` equals the owner."""
        if not self.is_owner(caller):
            raise NotOwner("Ownable: caller is not the owner", caller=caller.hex())


__all__ = ["AccessControl"]
