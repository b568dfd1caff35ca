class FeedFetchError(Exception):
    """Raised when the aggregator feed cannot be fetched or parsed."""


class UnknownCategoryError(ValueError):
    """Raised when a category name has no entry in the catalogue."""
