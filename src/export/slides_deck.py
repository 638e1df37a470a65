"""Slide Deck Compiler - Turns a ReportModel into a renderer-agnostic SlideDeck.

The slide order is fixed and versioned. Slides only carry layout, text and
references to named datasets; the numbers behind charts and KPIs are looked up
from the report model by each renderer.
"""

import logging
from typing import List

from src.errors import IncompleteReportModel
from src.export.utils import truncate
from src.models.schemas import MEDIA_LABELS, DatasetKey, MajorStory, MediaType, ReportModel
from src.models.slides import (
    CANVAS_WIDTH,
    ChartElement,
    ChartType,
    ImageElement,
    KpiElement,
    LegendPosition,
    Position,
    Size,
    Slide,
    SlideDeck,
    SlideKind,
    TextElement,
    TitleElement,
)

logger = logging.getLogger(__name__)

DECK_VERSION = "1.0"
HEADER_HEIGHT = 52
TAKEOUTS_PER_PAGE = 4
STORIES_PER_COLUMN = 3
MAX_COMPETITOR_SLIDES = 5
STORY_SUMMARY_CHARS = 200
TAKEOUT_BULLET = "➤"


def _box(x: float, y: float, w: float, h: float) -> dict:
    return {"position": Position(x=x, y=y), "size": Size(w=w, h=h)}


class SlideDeckCompiler:
    """
    Compile a ReportModel into the PR presence slide deck.

    Order: cover, brief, industry divider, scope of coverage, media sources,
    monthly trend, thematic areas, key journalists, client divider, client
    visibility, client major stories, competitor divider, competitor
    presence, per-competitor major stories, sentiment, key takeouts.
    """

    def __init__(self, brand_name: str = "Ovaview"):
        self.brand_name = brand_name

    def compile(self, model: ReportModel) -> SlideDeck:
        """
        Build the slide deck for a report model.

        Args:
            model: The assembled report model.

        Returns:
            SlideDeck whose chart and KPI elements reference model datasets.

        Raises:
            IncompleteReportModel: If a slide references a dataset the model
                does not produce.
        """
        slides: List[Slide] = [
            self._cover_slide(model),
            self._brief_slide(model),
            self._divider_slide("divider-industry", "MEDIA PRESENCE ANALYSIS\nIndustry", model),
            self._scope_slide(model),
            self._media_sources_slide(model),
            self._monthly_trend_slide(model),
            self._thematic_slide(model),
            self._journalists_slide(model),
            self._divider_slide("divider-client", f"Visibility of {model.client_name}", model),
            self._client_visibility_slide(model),
            self._stories_slide("client-stories", model.client_name, model.client_visibility.major_stories, model),
            self._divider_slide("divider-competitors", "MEDIA PRESENCE ANALYSIS\nCompetitors", model),
            self._competitor_slide(model),
        ]

        for competitor in model.competitor_analysis[:MAX_COMPETITOR_SLIDES]:
            if competitor.major_stories:
                slides.append(
                    self._stories_slide(
                        f"competitor-stories-{competitor.id}",
                        competitor.name,
                        competitor.major_stories,
                        model,
                    )
                )

        slides.append(self._sentiment_slide(model))
        slides.extend(self._takeout_slides(model))

        deck = SlideDeck(
            version=DECK_VERSION,
            title=f"{model.client_name} PR Presence Analysis",
            slides=slides,
        )
        self.validate(deck, model)
        logger.info(f"Compiled deck v{DECK_VERSION} with {len(slides)} slides for {model.client_id}")
        return deck

    def validate(self, deck: SlideDeck, model: ReportModel) -> None:
        """Every referenced dataset key must exist in the model."""
        available = set(model.datasets())
        missing = {key for slide in deck.slides for key in slide.dataset_keys()} - available
        if missing:
            raise IncompleteReportModel(missing)

    # ------------------------------------------------------------------
    # Shared chrome
    # ------------------------------------------------------------------

    def _header(self, title: str, model: ReportModel) -> list:
        return [
            TitleElement(text=title, font_size=22, **_box(38, 8, 660, 40)),
            TitleElement(text=model.client_name, font_size=10, align="right", **_box(710, 8, 220, 40)),
        ]

    def _footer(self) -> TextElement:
        return TextElement(lines=[self.brand_name], font_size=8, color="accent", bold=True, **_box(29, 492, 144, 28))

    def _content_slide(self, slide_id: str, title: str, model: ReportModel, elements: list) -> Slide:
        return Slide(
            id=slide_id,
            kind=SlideKind.CONTENT,
            elements=[*self._header(title, model), *elements, self._footer()],
        )

    # ------------------------------------------------------------------
    # Slides
    # ------------------------------------------------------------------

    def _cover_slide(self, model: ReportModel) -> Slide:
        elements = [
            TitleElement(
                text="MEDIA PRESENCE\nANALYSIS REPORT",
                font_size=40,
                align="center",
                **_box(48, 150, 864, 150),
            ),
            TextElement(
                lines=[model.date_range_label],
                font_size=16,
                color="inverse",
                align="center",
                **_box(48, 320, 864, 40),
            ),
            TitleElement(text=model.client_name, font_size=12, align="right", **_box(672, 19, 269, 48)),
        ]
        if model.logo_path:
            elements.append(ImageElement(path=model.logo_path, alt=model.client_name, **_box(29, 19, 144, 72)))
        return Slide(id="cover", kind=SlideKind.COVER, background="brand", elements=elements)

    def _brief_slide(self, model: ReportModel) -> Slide:
        return self._content_slide("brief", "Brief", model, [
            TextElement(
                lines=["This report is an analysis of the PR presence for"],
                font_size=20,
                color="muted",
                **_box(96, 144, 720, 40),
            ),
            TextElement(lines=[model.client_name], font_size=20, bold=True, **_box(96, 190, 720, 40)),
            TextElement(
                lines=[f"The data was captured from {model.date_range_label}."],
                font_size=20,
                color="muted",
                **_box(96, 236, 720, 40),
            ),
        ])

    def _divider_slide(self, slide_id: str, title: str, model: ReportModel) -> Slide:
        return Slide(
            id=slide_id,
            kind=SlideKind.DIVIDER,
            background="brand",
            elements=[
                TitleElement(text=title, font_size=36, align="center", **_box(48, 173, 864, 140)),
                TitleElement(text=model.client_name, font_size=10, align="right", **_box(720, 19, 221, 38)),
            ],
        )

    def _scope_slide(self, model: ReportModel) -> Slide:
        elements = []
        for i, entry in enumerate(model.scope_of_coverage.entries):
            x = 38 + i * 228
            elements.append(
                KpiElement(
                    dataset_key=DatasetKey.SCOPE_OF_COVERAGE.value,
                    index=i,
                    label=entry.label,
                    caption=entry.description,
                    color="brand",
                    **_box(x, 96, 192, 300),
                )
            )
        return self._content_slide("scope-of-coverage", "Scope of Coverage - Overall", model, elements)

    def _media_sources_slide(self, model: ReportModel) -> Slide:
        distribution = model.media_distribution
        order = [MediaType.WEB, MediaType.PRINT, MediaType.RADIO, MediaType.TV]
        lines = [
            f"Total Coverage - {model.total_stories:,} news stories from four media sources "
            f"(print media, news website, radio and television).",
            "",
        ]
        lines.extend(f"{MEDIA_LABELS[m]} - {distribution.get(m).percentage:g}%" for m in order)
        return self._content_slide("media-sources", "Media Sources - Industry", model, [
            ChartElement(
                chart_type=ChartType.PIE,
                dataset_key=DatasetKey.MEDIA_SOURCES.value,
                legend=LegendPosition.BOTTOM,
                show_percent=True,
                font_size=10,
                **_box(29, 72, 432, 400),
            ),
            TextElement(lines=lines, font_size=11, **_box(499, 96, 432, 288)),
        ])

    def _monthly_trend_slide(self, model: ReportModel) -> Slide:
        trend = model.monthly_trend
        lines = ["Period Under Review", ""]
        if trend:
            highest = max(trend, key=lambda m: m.total)
            lowest = min(trend, key=lambda m: m.total)
            lines.append(f"{highest.month} - {highest.total:,} articles (Highest)")
            lines.append(f"{lowest.month} - {lowest.total:,} articles (Least)")
        return self._content_slide("monthly-trend", "Media Sources - Monthly Trend (Industry)", model, [
            ChartElement(
                chart_type=ChartType.COLUMN,
                dataset_key=DatasetKey.MONTHLY_TREND.value,
                legend=LegendPosition.TOP,
                font_size=7,
                **_box(29, 72, 490, 400),
            ),
            TextElement(lines=lines, font_size=11, **_box(538, 96, 400, 288)),
        ])

    def _thematic_slide(self, model: ReportModel) -> Slide:
        return self._content_slide("thematic-areas", "Thematic Areas of Coverage - Industry", model, [
            ChartElement(
                chart_type=ChartType.WORD_CLOUD,
                dataset_key=DatasetKey.THEMATIC_AREAS.value,
                legend=LegendPosition.NONE,
                show_values=False,
                **_box(48, 72, 864, 410),
            ),
        ])

    def _journalists_slide(self, model: ReportModel) -> Slide:
        return self._content_slide("journalists", "Key Journalists - Top 5", model, [
            ChartElement(
                chart_type=ChartType.BAR,
                dataset_key=DatasetKey.JOURNALISTS.value,
                legend=LegendPosition.NONE,
                font_size=10,
                **_box(48, 86, 864, 380),
            ),
        ])

    def _client_visibility_slide(self, model: ReportModel) -> Slide:
        name = model.client_name
        return self._content_slide("client-visibility", f"Visibility - {name}", model, [
            ChartElement(
                chart_type=ChartType.DONUT,
                dataset_key=DatasetKey.ORG_VISIBILITY.value,
                title="Organization Visibility",
                legend=LegendPosition.BOTTOM,
                show_percent=True,
                **_box(19, 72, 442, 400),
            ),
            TextElement(lines=[f"Sources of Mentions - {name}"], font_size=10, bold=True, **_box(480, 64, 461, 24)),
            ChartElement(
                chart_type=ChartType.COLUMN,
                dataset_key=DatasetKey.CLIENT_SOURCES.value,
                legend=LegendPosition.NONE,
                **_box(480, 90, 461, 190),
            ),
            TextElement(lines=[f"Trend of Mentions - {name}"], font_size=10, bold=True, **_box(480, 284, 461, 24)),
            ChartElement(
                chart_type=ChartType.COLUMN,
                dataset_key=DatasetKey.CLIENT_MONTHLY_TREND.value,
                legend=LegendPosition.NONE,
                font_size=8,
                **_box(480, 310, 461, 180),
            ),
        ])

    def _stories_slide(self, slide_id: str, name: str, stories: List[MajorStory], model: ReportModel) -> Slide:
        elements = []
        if not stories:
            elements.append(
                TextElement(
                    lines=[f"No major stories were found for {name} in this period."],
                    font_size=14,
                    color="subtle",
                    align="center",
                    **_box(96, 220, 768, 60),
                )
            )
        for i, story in enumerate(stories):
            column, row = divmod(i, STORIES_PER_COLUMN)
            x = 38 + column * 461
            y = 77 + row * 125
            elements.extend([
                TextElement(lines=[story.date_label], font_size=9, bold=True, **_box(x, y, 432, 22)),
                TextElement(lines=[story.title], font_size=10, bold=True, **_box(x, y + 22, 432, 30)),
                TextElement(
                    lines=[truncate(story.summary, STORY_SUMMARY_CHARS)],
                    font_size=8,
                    color="muted",
                    **_box(x, y + 54, 432, 64),
                ),
            ])
        return self._content_slide(slide_id, f"Major Stories - {name}", model, elements)

    def _competitor_slide(self, model: ReportModel) -> Slide:
        competitors = model.competitor_analysis
        total_mentions = sum(c.mentions for c in competitors)
        if total_mentions > 0:
            top = competitors[0]
            lines = [
                "Overall, the presence of companies in the media remained competitive. "
                f"A total of {total_mentions:,} mentions.",
                "",
                f"{top.name} ({top.mentions}) had the highest mentions.",
            ]
        else:
            lines = [
                "No competitor data available. Add competitors to the client profile to populate this slide."
            ]
        return self._content_slide("competitor-presence", "Competitor Presence - Top 5 Sector Players", model, [
            ChartElement(
                chart_type=ChartType.PIE,
                dataset_key=DatasetKey.COMPETITOR_PRESENCE.value,
                legend=LegendPosition.BOTTOM,
                show_percent=True,
                font_size=10,
                **_box(19, 72, 480, 400),
            ),
            TextElement(lines=lines, font_size=11, **_box(528, 115, 403, 288)),
        ])

    def _sentiment_slide(self, model: ReportModel) -> Slide:
        sentiment = model.sentiment
        scored = sentiment.scored_total
        if scored:
            bullets = [
                f"Overall, out of {scored:,} news stories, {sentiment.positive.percentage:g}% were of positive sentiments.",
                f"Another {sentiment.negative.percentage:g}% were negative.",
                f"{sentiment.neutral.percentage:g}% were neutral.",
            ]
        else:
            bullets = ["No sentiment-scored stories were recorded during the review period."]
        return self._content_slide("sentiment", "Story Orientation - Sentiments", model, [
            ChartElement(
                chart_type=ChartType.PIE,
                dataset_key=DatasetKey.SENTIMENT_INDUSTRY.value,
                title="Industry",
                legend=LegendPosition.BOTTOM,
                show_percent=True,
                **_box(29, 64, 413, 300),
            ),
            ChartElement(
                chart_type=ChartType.COLUMN,
                dataset_key=DatasetKey.SENTIMENT_CLIENT.value,
                title=model.client_name,
                legend=LegendPosition.NONE,
                font_size=10,
                **_box(461, 77, 480, 240),
            ),
            TextElement(lines=bullets, font_size=10, bullet="•", **_box(48, 384, 864, 100)),
        ])

    def _takeout_slides(self, model: ReportModel) -> List[Slide]:
        takeouts = model.key_takeouts
        pages = [takeouts[i:i + TAKEOUTS_PER_PAGE] for i in range(0, len(takeouts), TAKEOUTS_PER_PAGE)] or [[]]
        slides = []
        for n, page in enumerate(pages, start=1):
            slides.append(
                self._content_slide(f"key-takeouts-{n}", "Key Takeouts - Conclusions", model, [
                    TextElement(
                        lines=page,
                        font_size=13,
                        bullet=TAKEOUT_BULLET,
                        alternate_color="accent",
                        **_box(77, 96, CANVAS_WIDTH - 154, 390),
                    ),
                ])
            )
        return slides
