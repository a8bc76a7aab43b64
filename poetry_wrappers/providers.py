from abc import ABC, abstractmethod

from poetry_wrappers.schema_models import GeneratedImage, Poem, PoemAnalysis


class PoemSource(ABC):
    @abstractmethod
    async def fetch_random_poem(self) -> Poem:
        """Fetch one random poem. Raises FetchError or FormatError."""


class AnalysisProvider(ABC):
    @abstractmethod
    async def analyze(self, poem: Poem) -> PoemAnalysis:
        """Return mood, summary and themes. Raises CredentialError, ProviderError or FormatError."""


class ImageProvider(ABC):
    @abstractmethod
    async def generate_image(self, poem: Poem) -> GeneratedImage:
        """Return an illustration. Raises the AnalysisProvider errors or NoImageError."""
