"""Renderer-agnostic slide deck models.

Slides are laid out on a fixed 960x540 logical canvas. Elements form a closed
tagged union: each kind carries only the fields valid for it, and colours are
palette keys resolved by the renderers.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CANVAS_WIDTH = 960
CANVAS_HEIGHT = 540


class SlideKind(str, Enum):
    COVER = "cover"
    DIVIDER = "divider"
    CONTENT = "content"


class ChartType(str, Enum):
    """Chart kinds both renderers understand."""

    COLUMN = "column"
    BAR = "bar"
    PIE = "pie"
    DONUT = "donut"
    WORD_CLOUD = "word_cloud"


class LegendPosition(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    RIGHT = "right"
    NONE = "none"


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = Field(ge=0, le=CANVAS_WIDTH)
    y: float = Field(ge=0, le=CANVAS_HEIGHT)


class Size(BaseModel):
    model_config = ConfigDict(frozen=True)

    w: float = Field(gt=0, le=CANVAS_WIDTH)
    h: float = Field(gt=0, le=CANVAS_HEIGHT)


class _Element(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: Position
    size: Size


class TitleElement(_Element):
    type: Literal["title"] = "title"
    text: str
    font_size: int = 22
    color: str = "inverse"
    align: Literal["left", "center", "right"] = "left"


class TextElement(_Element):
    type: Literal["text"] = "text"
    lines: List[str]
    font_size: int = 11
    color: str = "ink"
    bold: bool = False
    align: Literal["left", "center", "right"] = "left"
    bullet: Optional[str] = None
    # Alternate line colour (key takeouts alternate ink/accent)
    alternate_color: Optional[str] = None


class ChartElement(_Element):
    type: Literal["chart"] = "chart"
    chart_type: ChartType
    dataset_key: str
    title: Optional[str] = None
    legend: LegendPosition = LegendPosition.BOTTOM
    show_values: bool = True
    show_percent: bool = False
    font_size: int = 9


class TableElement(_Element):
    type: Literal["table"] = "table"
    headers: List[str]
    rows: List[List[str]]
    font_size: int = 9


class KpiElement(_Element):
    """A headline figure read from one point of a dataset, drawn inside a ring."""

    type: Literal["kpi"] = "kpi"
    dataset_key: str
    index: int = Field(ge=0)
    label: str
    caption: str = ""
    color: str = "accent"


class ImageElement(_Element):
    type: Literal["image"] = "image"
    path: str
    alt: str = ""


SlideElement = Annotated[
    Union[TitleElement, TextElement, ChartElement, TableElement, KpiElement, ImageElement],
    Field(discriminator="type"),
]


class Slide(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: SlideKind
    background: str = "paper"
    elements: List[SlideElement] = Field(default_factory=list)

    def dataset_keys(self) -> List[str]:
        """Dataset keys referenced by this slide's chart and KPI elements."""
        return [
            e.dataset_key
            for e in self.elements
            if isinstance(e, (ChartElement, KpiElement))
        ]


class SlideDeck(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str
    title: str
    slides: List[Slide]
