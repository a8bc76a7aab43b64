import logging

import requests
from langchain_core.tools import BaseTool
from pydantic import ValidationError

from poetry_wrappers.config import POETRYDB_URL
from poetry_wrappers.exceptions import FetchError, FormatError
from poetry_wrappers.schema_models import Poem

logger = logging.getLogger(__name__)


class PoetryDBTool(BaseTool):
    name: str = "PoetryDBTool"
    description: str = "Fetches one random poem from PoetryDB and returns its title, author and lines."
    base_url: str = POETRYDB_URL

    def _run(self) -> Poem:
        url = f"{self.base_url.rstrip('/')}/random"
        try:
            response = requests.get(url)
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch poem: {e}") from e

        if not response.ok:
            raise FetchError(f"Failed to fetch poem: {response.status_code} {response.reason}")

        try:
            data = response.json()
        except ValueError as e:
            raise FormatError("PoetryDB returned a body that is not JSON") from e

        # PoetryDB returns an array, even for a single random item
        if not isinstance(data, list) or not data:
            raise FormatError("Invalid response format from PoetryDB")

        try:
            poem = Poem.model_validate(data[0])
        except ValidationError as e:
            raise FormatError(f"Invalid poem record from PoetryDB: {e}") from e

        logger.info("Fetched %r by %s (%s lines)", poem.title, poem.author, poem.linecount)
        return poem
