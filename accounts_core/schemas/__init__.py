"""Pydantic models shared by the store and the services."""

from .account import Account, AuthProvider

__all__ = [
    "Account",
    "AuthProvider",
]
