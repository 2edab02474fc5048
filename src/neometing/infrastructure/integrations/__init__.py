"""Upstream integrations."""

from neometing.infrastructure.integrations.netease_client import (
    NeteaseClient,
    RequestError,
    RequestErrorKind,
)
from neometing.infrastructure.integrations.weapi import (
    EncodeStage,
    SignedEnvelope,
    WeapiEncodeError,
    WeapiEncoder,
)

__all__ = [
    "EncodeStage",
    "NeteaseClient",
    "RequestError",
    "RequestErrorKind",
    "SignedEnvelope",
    "WeapiEncodeError",
    "WeapiEncoder",
]
