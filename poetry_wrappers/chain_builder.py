import asyncio
import logging
from typing import Optional

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import PydanticOutputParser

from poetry_wrappers.config import PoetryConfig
from poetry_wrappers.exceptions import FormatError
from poetry_wrappers.image_generation import GeminiImageGenerationTool
from poetry_wrappers.llm_wrapper import GeminiLLM
from poetry_wrappers.poetry_tool import PoetryDBTool
from poetry_wrappers.prompts import ANALYST_INSTRUCTION, build_analysis_prompt, build_image_prompt
from poetry_wrappers.providers import AnalysisProvider, ImageProvider, PoemSource
from poetry_wrappers.schema_models import GeneratedImage, Poem, PoemAnalysis

logger = logging.getLogger(__name__)


# === Utility Functions ===
def clean_json(response_text: str) -> str:
    """Strips markdown code fences the model sometimes wraps around JSON."""
    cleaned_text = response_text.strip()
    if cleaned_text.startswith("```"):
        cleaned_text = cleaned_text.removeprefix("```json").removeprefix("```")
        cleaned_text = cleaned_text.removesuffix("```").strip()
    return cleaned_text


# === SOURCE: Random Poem ===
class RandomPoemSource(PoemSource):
    """Runs the blocking PoetryDB tool off the event loop."""

    def __init__(self, tool: Optional[PoetryDBTool] = None):
        self.tool = tool or PoetryDBTool()

    async def fetch_random_poem(self) -> Poem:
        return await asyncio.to_thread(self.tool.run, {})


# === CHAIN 1: Poem Analysis ===
class PoemAnalysisChain(AnalysisProvider):
    """
    1. Builds a prompt from the poem's title, author and full text.
    2. Calls the Gemini LLM in JSON mode with the PoemAnalysis format instructions.
    3. Parses the output into a PoemAnalysis.
    """

    def __init__(self, llm: GeminiLLM, output_parser: Optional[PydanticOutputParser] = None):
        self.llm = llm
        self.output_parser = output_parser or PydanticOutputParser(pydantic_object=PoemAnalysis)

    def _prompt(self, poem: Poem) -> str:
        return build_analysis_prompt(
            poem.title,
            poem.author,
            poem.lines,
            format_instructions=self.output_parser.get_format_instructions(),
        )

    def _parse(self, response_text: str) -> PoemAnalysis:
        cleaned_text = clean_json(response_text or "")
        if not cleaned_text:
            raise FormatError("No analysis generated")
        try:
            return self.output_parser.parse(cleaned_text)
        except OutputParserException as e:
            raise FormatError(f"Failed to parse LLM output: {e}") from e

    def invoke(self, poem: Poem) -> PoemAnalysis:
        return self._parse(self.llm.generate_content(self._prompt(poem)))

    async def analyze(self, poem: Poem) -> PoemAnalysis:
        response_text = await self.llm.agenerate_content(self._prompt(poem))
        analysis = self._parse(response_text)
        logger.info("Analysis of %r: mood=%r, %d themes", poem.title, analysis.mood, len(analysis.themes))
        return analysis


# === CHAIN 2: Poem Illustration ===
class PoemImageChain(ImageProvider):
    """
    1. Builds a visual prompt from the title, author and opening lines.
    2. Calls the Gemini image tool and returns the first inline image.
    """

    def __init__(self, image_tool: GeminiImageGenerationTool, max_lines: int = 5):
        self.image_tool = image_tool
        self.max_lines = max_lines

    def _prompt(self, poem: Poem) -> str:
        return build_image_prompt(poem.title, poem.author, poem.lines, max_lines=self.max_lines)

    def invoke(self, poem: Poem) -> GeneratedImage:
        return self.image_tool.run(self._prompt(poem))

    async def generate_image(self, poem: Poem) -> GeneratedImage:
        return await self.image_tool.arun(self._prompt(poem))


def build_providers(config: PoetryConfig):
    """Wires the three providers from a PoetryConfig."""
    poem_source = RandomPoemSource(PoetryDBTool(base_url=config.poetry_base_url))
    analysis_chain = PoemAnalysisChain(
        llm=GeminiLLM(
            system_instruction=ANALYST_INSTRUCTION,
            api_key=config.google_api_key,
            model_name=config.analysis_model,
            temperature=config.temperature,
            response_mime_type="application/json",
        )
    )
    image_chain = PoemImageChain(
        image_tool=GeminiImageGenerationTool(api_key=config.google_api_key, model_name=config.image_model),
        max_lines=config.image_prompt_lines,
    )
    if not config.ai_enabled:
        logger.warning("API Key not found. AI features will be disabled.")
    return poem_source, analysis_chain, image_chain
