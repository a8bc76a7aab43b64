import base64
import io
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Poem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="The title of the poem")
    author: str = Field(..., description="The poet's name")
    lines: List[str] = Field(..., description="The lines of the poem; empty strings mark stanza breaks")
    linecount: str = Field(..., description="The number of lines, encoded as a string")

    @field_validator("linecount", mode="before")
    @classmethod
    def _coerce_linecount(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def line_count(self) -> int:
        try:
            return int(self.linecount)
        except ValueError:
            return len(self.lines)

    def stanzas(self) -> List[List[str]]:
        """Groups the lines into stanzas, splitting on blank lines."""
        stanzas, current = [], []
        for line in self.lines:
            if line.strip():
                current.append(line)
            elif current:
                stanzas.append(current)
                current = []
        if current:
            stanzas.append(current)
        return stanzas


class PoemAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    mood: str = Field(..., description="A few words describing the mood of the poem")
    summary: str = Field(..., description="A two-sentence summary of the poem")
    themes: List[str] = Field(..., description="Three or four key themes of the poem")


class GeneratedImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: str = Field(..., description="Base64-encoded image payload")
    mime_type: str = Field(default="image/png", description="Declared media type of the payload")

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str = "image/png") -> "GeneratedImage":
        return cls(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def to_pil(self) -> Image.Image:
        return Image.open(io.BytesIO(self.to_bytes()))


class AppState(str, Enum):
    IDLE = "IDLE"
    LOADING_POEM = "LOADING_POEM"
    ANALYZING = "ANALYZING"
    GENERATING_IMAGE = "GENERATING_IMAGE"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ViewState:
    """What the page needs to render, captured at a single point in time."""

    state: AppState
    poem: Optional[Poem] = None
    analysis: Optional[PoemAnalysis] = None
    generated_image: Optional[GeneratedImage] = None
    error: Optional[str] = None
    notice: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.state not in (AppState.IDLE, AppState.ERROR)
