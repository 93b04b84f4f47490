"""
Error types shared by the stores, the post source and the extractor.
"""


class QuotaExceeded(Exception):
    """Provider quota is exhausted. Stops the whole run, keeps progress."""


class ExtractionFailed(Exception):
    """Extraction of a single post failed. The run moves on to the next post."""


class PostFetchError(Exception):
    """Pagination against the post source failed for a non-quota reason."""


class StorageError(Exception):
    """Base class for store adapter failures."""


class RemoteStoreError(StorageError):
    """The remote document store rejected or failed a request."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class MissingCredentials(RemoteStoreError):
    """Remote store id or access token is not configured."""


class LocalStoreError(StorageError):
    """The local file store could not complete an operation."""


class DirectoryMissing(LocalStoreError):
    """The output directory of the local store does not exist."""
