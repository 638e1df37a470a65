"""Immutable colour palette shared by the PPTX and PDF renderers.

Slides refer to colours by name; each dataset key maps to one fixed colour
sequence, so a dataset renders with the same colours in both outputs.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Tuple

from src.models.schemas import DatasetKey

RGB = Tuple[int, int, int]


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


# Brand colours (RGB)
BRAND_COLORS: Mapping[str, RGB] = _frozen({
    "brand": (212, 148, 26),      # Gold
    "ink": (51, 51, 51),          # Dark text
    "muted": (102, 102, 102),     # Gray text
    "subtle": (153, 153, 153),    # Light gray
    "paper": (255, 255, 255),
    "inverse": (255, 255, 255),
    "black": (0, 0, 0),
    "accent": (249, 115, 22),     # Orange
    "positive": (16, 185, 129),   # Green
    "negative": (239, 68, 68),    # Red
    "neutral": (234, 179, 8),     # Yellow
    "blue": (59, 130, 246),
    "purple": (192, 132, 252),
    "track": (229, 231, 233),     # Empty ring background
})

DATASET_COLORS: Mapping[str, Tuple[str, ...]] = _frozen({
    DatasetKey.SCOPE_OF_COVERAGE.value: ("brand", "muted", "brand", "muted"),
    DatasetKey.MEDIA_SOURCES.value: ("accent", "black", "purple", "muted"),
    DatasetKey.MONTHLY_TREND.value: ("black", "accent", "purple", "muted"),
    DatasetKey.THEMATIC_AREAS.value: ("accent", "ink", "muted"),
    DatasetKey.JOURNALISTS.value: ("black",),
    DatasetKey.ORG_VISIBILITY.value: ("black", "accent", "negative", "blue", "muted"),
    DatasetKey.CLIENT_SOURCES.value: ("accent",),
    DatasetKey.CLIENT_MONTHLY_TREND.value: ("negative",),
    DatasetKey.COMPETITOR_PRESENCE.value: ("muted", "blue", "accent", "black", "purple"),
    DatasetKey.SENTIMENT_INDUSTRY.value: ("positive", "negative", "neutral"),
    DatasetKey.SENTIMENT_CLIENT.value: ("positive", "negative", "neutral"),
})


@dataclass(frozen=True)
class Palette:
    """Named colours plus per-dataset colour sequences."""

    colors: Mapping[str, RGB] = field(default_factory=lambda: BRAND_COLORS)
    dataset_colors: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: DATASET_COLORS)
    fallback: Tuple[str, ...] = ("accent", "ink", "purple", "muted", "blue")

    def rgb(self, name: str) -> RGB:
        """Resolve a colour name; unknown names fall back to ink."""
        return self.colors.get(name, self.colors["ink"])

    def colors_for(self, dataset_key: str) -> List[RGB]:
        """Colour sequence for a dataset."""
        names = self.dataset_colors.get(dataset_key, self.fallback)
        return [self.rgb(n) for n in names]


DEFAULT_PALETTE = Palette()
