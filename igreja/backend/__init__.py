"""
Adapter to the hosted backend: tables, auth, storage and realtime
"""

from igreja.backend.service import BackendClient, HostedBackend
from igreja.backend.auth import AuthChangeEvent, AuthSession, AuthUser

__all__ = [
    "AuthChangeEvent",
    "AuthSession",
    "AuthUser",
    "BackendClient",
    "HostedBackend",
]
