"""
Module publishing.

Upload coordination and the end-to-end publish pipeline.
"""

from .pipeline import publish_module
from .upload import (
    CACHE_CONTROL,
    CONTENT_TYPE,
    UPLOADED_BY,
    UploadCoordinator,
    build_upload_metadata,
)

__all__ = [
    "CACHE_CONTROL",
    "CONTENT_TYPE",
    "UPLOADED_BY",
    "UploadCoordinator",
    "build_upload_metadata",
    "publish_module",
]
