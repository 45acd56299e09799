"""Exception types raised by ragstore."""


class RagStoreError(Exception):
    """Base class for all ragstore errors."""


class EmbeddingError(RagStoreError):
    """The embedding provider failed or returned unusable vectors."""


class StoreClosedError(RagStoreError):
    """An operation was attempted on a store that has been closed."""


class DimensionMismatchError(RagStoreError, ValueError):
    """Two vectors compared for similarity have different lengths.

    This means the index was built with a different embedding model than the
    one used for the query.
    """
