"""Files SDK
=====================
"""

from .client import FilesClient
from .models import FileModel, hydrate
from .resource import FileDownload, FileResource, filename_from_content_disposition

__all__ = [
    "FileDownload",
    "FileModel",
    "FileResource",
    "FilesClient",
    "filename_from_content_disposition",
    "hydrate",
]
