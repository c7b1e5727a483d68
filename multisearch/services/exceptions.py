"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class SearchFailed(ServiceError):
    """Raised when a provider call cannot produce results."""

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"{source} search failed: {detail}")
        self.source = source
        self.detail = detail


class UnsupportedSource(SearchFailed):
    def __init__(self, source: object) -> None:
        super().__init__(str(source), "unsupported search source")
