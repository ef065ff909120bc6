"""Error types raised by the query core and the corpus provider."""

QUERY_HINT = (
    "Try queries like 'palindromes', 'single word palindromes', "
    "'length > 10', 'contains character a', etc."
)


class UnparseableQuery(ValueError):
    """No natural-language rule matched the query."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"could not parse query: '{query}'. {QUERY_HINT}")


class StorageError(Exception):
    """The backing store failed while serving a corpus request."""


class CorpusUnavailable(Exception):
    """The corpus could not be fetched for a filter execution."""


class QueryCancelled(Exception):
    """The caller cancelled the execution before the scan started."""
