"""Lock service API integration."""

from .client import LockBatchError, LockServiceClient, LockServiceError
from .endpoint import EndpointError, endpoint_for_remote, lfs_url_from_remote

__all__ = [
    "EndpointError",
    "LockBatchError",
    "LockServiceClient",
    "LockServiceError",
    "endpoint_for_remote",
    "lfs_url_from_remote",
]
