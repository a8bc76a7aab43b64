import logging
from typing import Optional

from google import genai
from google.genai import types
from langchain_core.tools import BaseTool

from poetry_wrappers.config import IMAGE_MODEL
from poetry_wrappers.exceptions import CredentialError, NoImageError, ProviderError
from poetry_wrappers.schema_models import GeneratedImage

logger = logging.getLogger(__name__)


def extract_image(response) -> GeneratedImage:
    """Returns the first inline image part of a generate_content response."""
    for candidate in response.candidates or []:
        if candidate.content is None:
            continue
        for part in candidate.content.parts or []:
            if part.inline_data and part.inline_data.data:
                data = part.inline_data.data
                if isinstance(data, str):
                    # already base64 text
                    return GeneratedImage(data=data)
                return GeneratedImage.from_bytes(data)
    raise NoImageError("No image generated")


class GeminiImageGenerationTool(BaseTool):
    name: str = "GeminiImageGenerationTool"
    description: str = (
        "Generates an image using Gemini's image model. "
        "Accepts a prompt and returns the image as a base64 PNG payload."
    )
    api_key: Optional[str] = None
    model_name: str = IMAGE_MODEL

    def _get_client(self) -> genai.Client:
        if not self.api_key:
            raise CredentialError("GOOGLE_API_KEY is not set; AI features are disabled.")
        return genai.Client(api_key=self.api_key)

    def _config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"])

    def _run(self, prompt: str) -> GeneratedImage:
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=self._config(),
            )
        except Exception as e:
            raise ProviderError(f"{self.model_name} request failed: {e}") from e
        return extract_image(response)

    async def _arun(self, prompt: str) -> GeneratedImage:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=self._config(),
            )
        except Exception as e:
            raise ProviderError(f"{self.model_name} request failed: {e}") from e
        image = extract_image(response)
        logger.info("%s returned a %s image", self.model_name, image.mime_type)
        return image
