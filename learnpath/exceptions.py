"""Custom exceptions for the learning path service."""


class LearnPathError(Exception):
    """Base exception for the learning path service."""

    pass


class ConfigurationError(LearnPathError):
    """Exception raised for configuration errors."""

    pass


class UpstreamSearchError(LearnPathError):
    """Exception raised when a search engine query cannot be completed."""

    def __init__(self, query: str, message: str, status_code: int | None = None):
        self.query = query
        self.message = message
        self.status_code = status_code
        super().__init__(f"Search failed for {query!r}: {message}")


class ModelUnavailableError(LearnPathError):
    """Exception raised when Ollama is unreachable or the model is not installed."""

    def __init__(self, message: str, model: str = "", host: str = ""):
        self.message = message
        self.model = model
        self.host = host
        super().__init__(f"Ollama service unavailable: {message}")


class ModelOutputError(LearnPathError):
    """Exception raised when a model completion cannot be turned into a learning path."""

    def __init__(self, message: str, raw_response: str = ""):
        self.message = message
        self.raw_response = raw_response
        super().__init__(message)
