import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

POETRYDB_URL = "https://poetrydb.org"
ANALYSIS_MODEL = "gemini-2.5-flash"
IMAGE_MODEL = "gemini-2.5-flash-image"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass
class PoetryConfig:
    # PoetryDB
    poetry_base_url: str = POETRYDB_URL

    # Gemini
    google_api_key: Optional[str] = None
    analysis_model: str = ANALYSIS_MODEL
    image_model: str = IMAGE_MODEL
    temperature: float = 0.0

    # Number of opening lines used to describe the poem's mood to the image model
    image_prompt_lines: int = 5

    @property
    def ai_enabled(self) -> bool:
        return bool(self.google_api_key)


def load_config() -> PoetryConfig:
    """
    Builds the configuration from the environment.

    A .env file in the working directory is loaded first, so GOOGLE_API_KEY
    may live there instead of the shell environment.
    """
    load_dotenv()
    return PoetryConfig(google_api_key=os.getenv("GOOGLE_API_KEY") or None)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
