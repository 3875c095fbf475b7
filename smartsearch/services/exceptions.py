"""Domain-specific exceptions."""


class SearchError(RuntimeError):
    pass


class SearchConfigurationError(SearchError):
    """Raised before any network activity when the provider is not configured."""


class SearchProviderError(SearchError):
    """Raised when the Gemini call fails or returns nothing usable."""
