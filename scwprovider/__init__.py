"""
scwprovider - Scaleway resources for Pulumi.

Pulumi dynamic providers for Scaleway serverless containers (containers,
triggers, custom domains), DocumentDB private network endpoints, managed
inference deployments and endpoints, and Apple silicon servers.

Each resource is reconciled against the Scaleway API: only changed fields
are sent on update, and operations block until the remote resource reaches
a terminal status.
"""

from .errors import (
    NotFoundError,
    ProviderError,
    ResponseError,
    ScalewayError,
    ValidationError,
    WaitTimeoutError,
)
from .settings import ProviderSettings, get_settings, reload_settings

__version__ = "0.1.0"
__all__ = [
    "NotFoundError",
    "ProviderError",
    "ProviderSettings",
    "ResponseError",
    "ScalewayError",
    "ValidationError",
    "WaitTimeoutError",
    "get_settings",
    "reload_settings",
]
