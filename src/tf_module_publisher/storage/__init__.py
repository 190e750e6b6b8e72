"""
Object storage backends.

Provides the bucket-scoped ObjectStore interface and its Google Cloud
Storage implementation.
"""

from .base import PUBLIC_HOST, ObjectStore
from .gcs import GCSObjectStore

__all__ = [
    "GCSObjectStore",
    "ObjectStore",
    "PUBLIC_HOST",
]
