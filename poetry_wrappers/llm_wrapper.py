import logging
from typing import Optional

from langchain_google_genai import ChatGoogleGenerativeAI

from poetry_wrappers.config import ANALYSIS_MODEL
from poetry_wrappers.exceptions import CredentialError, ProviderError

logger = logging.getLogger(__name__)


def _content_text(content) -> str:
    """Flattens a chat message's content, which may be a string or a list of content blocks."""
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type", "text") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class GeminiLLM:
    """
    A wrapper for Google's Gemini LLM using ChatGoogleGenerativeAI.

    The underlying chat model is only built on first use, so a missing API key
    surfaces as a CredentialError at call time rather than at construction.
    """

    def __init__(
        self,
        system_instruction: str,
        api_key: Optional[str] = None,
        model_name: str = ANALYSIS_MODEL,
        temperature: float = 0.0,
        response_mime_type: Optional[str] = None,
    ):
        """
        Initializes the GeminiLLM wrapper.

        Parameters:
          system_instruction (str): Instructions for the model.
          api_key (str): Google API key; calls fail with CredentialError when empty.
          model_name (str): The Google model name (e.g., "gemini-2.5-flash").
          temperature (float): Temperature setting for generation.
          response_mime_type (str): Optional output constraint, e.g. "application/json".
        """
        self.system_instruction = system_instruction
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.response_mime_type = response_mime_type
        self._llm = None

    @property
    def llm(self) -> ChatGoogleGenerativeAI:
        if not self.api_key:
            raise CredentialError("GOOGLE_API_KEY is not set; AI features are disabled.")
        if self._llm is None:
            kwargs = {}
            if self.response_mime_type:
                kwargs["response_mime_type"] = self.response_mime_type
            self._llm = ChatGoogleGenerativeAI(
                model=self.model_name,
                temperature=self.temperature,
                google_api_key=self.api_key,
                **kwargs,
            )
        return self._llm

    def _messages(self, prompt: str):
        return [
            {"role": "system", "content": self.system_instruction},
            {"role": "human", "content": prompt},
        ]

    def generate_content(self, prompt: str) -> str:
        """
        Generates content by combining the system instruction with the prompt.

        Parameters:
          prompt (str): The user-provided prompt or input.

        Returns:
          str: The generated response text.
        """
        llm = self.llm
        try:
            response = llm.invoke(self._messages(prompt))
        except Exception as e:
            raise ProviderError(f"{self.model_name} request failed: {e}") from e
        return _content_text(response.content)

    async def agenerate_content(self, prompt: str) -> str:
        """Asynchronous version of generate_content."""
        llm = self.llm
        try:
            response = await llm.ainvoke(self._messages(prompt))
        except Exception as e:
            raise ProviderError(f"{self.model_name} request failed: {e}") from e
        text = _content_text(response.content)
        logger.debug("%s answered with %d characters", self.model_name, len(text))
        return text
