class NeriError(Exception):
    """Base class for all errors raised by neri."""


class ProviderError(NeriError):
    """Raised when a provider request cannot be built, sent or decoded."""


class UnsupportedProviderError(ProviderError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class TransportError(ProviderError):
    """The provider could not be reached (connection, DNS, timeout)."""


class HTTPStatusError(ProviderError):
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP error {status_code}: {body}")


class MalformedResponseError(ProviderError):
    """The response body did not match the provider's schema."""


class TranslationError(NeriError):
    """
    Raised by the translator. Carries whatever raw text the provider
    returned so the caller can still display it.
    """

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


class ConnectionFailedError(TranslationError):
    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(
            f"Could not reach the AI provider (check your connection or API key): {cause}"
        )


class NoCommandExtractedError(TranslationError):
    def __init__(self, raw: str = ""):
        super().__init__("The AI did not produce a usable command", raw=raw)
