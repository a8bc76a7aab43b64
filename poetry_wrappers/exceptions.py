class PoetryError(Exception):
    """Base exception for the poem reader."""


class FetchError(PoetryError):
    """Raised when the poem service cannot be reached or answers with a failure status."""


class FormatError(PoetryError):
    """Raised when a response cannot be parsed into the expected shape."""


class CredentialError(PoetryError):
    """Raised when an AI feature is used without an API key."""


class ProviderError(PoetryError):
    """Raised when a call to the generative AI service fails."""


class NoImageError(PoetryError):
    """Raised when the image model answers without any image data."""
