import pytest
from unittest.mock import AsyncMock, Mock

from poetry_wrappers.schema_models import GeneratedImage, Poem, PoemAnalysis

FOG_RECORD = {
    "title": "Fog",
    "author": "Carl Sandburg",
    "lines": ["The fog comes", "on little cat feet."],
    "linecount": "2",
}


@pytest.fixture
def fog_poem():
    return Poem.model_validate(FOG_RECORD)


@pytest.fixture
def fog_analysis():
    return PoemAnalysis(
        mood="quiet",
        summary="A brief, imagistic poem about fog arriving silently.",
        themes=["nature", "silence", "transience"],
    )


@pytest.fixture
def png_image():
    return GeneratedImage.from_bytes(b"\x89PNG\r\n\x1a\nfake")


@pytest.fixture
def poem_source(fog_poem):
    source = Mock()
    source.fetch_random_poem = AsyncMock(return_value=fog_poem)
    return source


@pytest.fixture
def analysis_provider(fog_analysis):
    provider = Mock()
    provider.analyze = AsyncMock(return_value=fog_analysis)
    return provider


@pytest.fixture
def image_provider(png_image):
    provider = Mock()
    provider.generate_image = AsyncMock(return_value=png_image)
    return provider
