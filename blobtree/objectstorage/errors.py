class TreeBuildError(Exception):
    """Building a container tree failed. No partial tree is returned."""


class StoreRequestError(TreeBuildError):
    """A request to the object store failed. The original error is kept as cause."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class MalformedPrefixError(TreeBuildError):
    pass


class PaginationError(TreeBuildError):
    """The store returned continuation tokens that would not end the listing"""


class TreeDepthExceeded(TreeBuildError):
    def __init__(self, prefix: str, max_depth: int):
        super().__init__(f"Directory {prefix!r} is nested deeper than the maximum of {max_depth} levels")
        self.prefix = prefix
        self.max_depth = max_depth


class ReindexError(Exception):
    """Triggering the downstream reindex failed"""


class UnknownStorageIndex(ValueError):
    pass


class InvalidPreviewPath(ValueError):
    """The preview path is not a file name followed by a mime type"""
