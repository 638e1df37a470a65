"""Pydantic models for stories, entities and the PR Presence report model."""

from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def to_naive_utc(value: datetime) -> datetime:
    """Normalize aware datetimes to naive UTC so all comparisons share one clock."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class MediaType(str, Enum):
    """Monitored media types."""

    WEB = "web"
    PRINT = "print"
    RADIO = "radio"
    TV = "tv"


# Fixed medium order for stable chart legends
MEDIA_ORDER: List[MediaType] = [MediaType.WEB, MediaType.PRINT, MediaType.RADIO, MediaType.TV]

MEDIA_LABELS: Dict[MediaType, str] = {
    MediaType.WEB: "News Website",
    MediaType.PRINT: "Print Media",
    MediaType.RADIO: "Radio",
    MediaType.TV: "TV",
}


class Sentiment(str, Enum):
    """Overall sentiment of a story."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# ============================================================================
# Corpus and catalog models
# ============================================================================


class Outlet(BaseModel):
    """A publication (web/print) or station (radio/TV), resolved at fetch time."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class Story(BaseModel):
    """A single piece of monitored coverage."""

    model_config = ConfigDict(frozen=True)

    id: str
    media_type: MediaType
    title: str
    content: Optional[str] = None
    summary: Optional[str] = None
    keywords: Optional[str] = Field(default=None, description="Comma-separated keywords")
    date: datetime
    created_at: Optional[datetime] = None
    overall_sentiment: Optional[Sentiment] = None
    industry_id: Optional[str] = None
    author: Optional[str] = None
    presenters: List[str] = Field(default_factory=list)
    outlet: Optional[Outlet] = None

    @field_validator("date", "created_at")
    @classmethod
    def _normalize_datetime(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value is not None else None

    @property
    def search_text(self) -> str:
        """Lower-cased title, content, keywords and summary used for keyword matching."""
        parts = [self.title, self.content or "", self.keywords or "", self.summary or ""]
        return " ".join(parts).lower()

    @property
    def bylines(self) -> List[str]:
        """Author for web/print stories, presenters for radio/TV stories."""
        if self.author:
            return [self.author]
        return list(self.presenters)


class Entity(BaseModel):
    """A client or competitor tracked through its keyword set."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    explicit_keywords: List[str] = Field(default_factory=list)
    industry_ids: List[str] = Field(default_factory=list)


class Industry(BaseModel):
    """An industry a client belongs to."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class ClientProfile(BaseModel):
    """Catalog view of a client: its keywords, competitors and industries."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    keywords: List[str] = Field(default_factory=list)
    competitors: List[Entity] = Field(default_factory=list)
    industries: List[Industry] = Field(default_factory=list)
    logo_path: Optional[str] = None

    @property
    def entity(self) -> Entity:
        """The client as a plain Entity."""
        return Entity(
            id=self.id,
            name=self.name,
            explicit_keywords=self.keywords,
            industry_ids=[i.id for i in self.industries],
        )

    @property
    def primary_industry(self) -> Optional[Industry]:
        return self.industries[0] if self.industries else None


# ============================================================================
# Request models
# ============================================================================


class DateWindow(BaseModel):
    """Inclusive date window of a report."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _normalize_bounds(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def _check_order(self) -> "DateWindow":
        if self.end < self.start:
            raise ValueError("DateWindow end must not precede start")
        return self

    def contains(self, moment: datetime) -> bool:
        """Check whether a moment falls inside the window (inclusive)."""
        return self.start <= to_naive_utc(moment) <= self.end

    @property
    def label(self) -> str:
        """Human label such as 'January 2026 – March 2026'."""
        return f"{self.start.strftime('%B %Y')} – {self.end.strftime('%B %Y')}"


class CustomDateRange(BaseModel):
    """Explicit start/end dates (inclusive, whole days)."""

    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _check_order(self) -> "CustomDateRange":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not precede startDate")
        return self

    def to_window(self) -> DateWindow:
        return DateWindow(
            start=datetime.combine(self.start_date, time.min),
            end=datetime.combine(self.end_date, time.max),
        )


DateRangePreset = Literal["7d", "30d", "90d", "12m"]


class ReportRequest(BaseModel):
    """Report request consumed from the UI layer."""

    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(alias="clientId")
    date_range: Union[DateRangePreset, CustomDateRange] = Field(default="90d", alias="dateRange")


# ============================================================================
# Report model
# ============================================================================


class DatasetKey(str, Enum):
    """Named datasets a slide may reference."""

    SCOPE_OF_COVERAGE = "scope_of_coverage"
    MEDIA_SOURCES = "media_sources"
    MONTHLY_TREND = "monthly_trend"
    THEMATIC_AREAS = "thematic_areas"
    JOURNALISTS = "journalists"
    ORG_VISIBILITY = "org_visibility"
    CLIENT_SOURCES = "client_sources"
    CLIENT_MONTHLY_TREND = "client_monthly_trend"
    COMPETITOR_PRESENCE = "competitor_presence"
    SENTIMENT_INDUSTRY = "sentiment_industry"
    SENTIMENT_CLIENT = "sentiment_client"


class Series(BaseModel):
    """One named series of values aligned with a dataset's labels."""

    model_config = ConfigDict(frozen=True)

    name: str
    values: List[float]


class Dataset(BaseModel):
    """Chart-ready labels and series derived from the report model."""

    model_config = ConfigDict(frozen=True)

    key: str
    title: str
    labels: List[str]
    series: List[Series]

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to draw: no labels or every value is zero."""
        if not self.labels or not self.series:
            return True
        return all(v == 0 for s in self.series for v in s.values)

    def points(self, series_index: int = 0) -> List["DataPoint"]:
        """Label/value pairs for one series."""
        values = self.series[series_index].values if self.series else []
        return [DataPoint(label=label, value=value) for label, value in zip(self.labels, values)]


class DataPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: float


class ScopeEntry(BaseModel):
    """Distinct outlets/stations touched by one medium."""

    model_config = ConfigDict(frozen=True)

    medium: MediaType
    label: str
    count: int
    names: List[str]
    description: str


class ScopeOfCoverage(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: List[ScopeEntry]

    def get(self, medium: MediaType) -> ScopeEntry:
        return next(e for e in self.entries if e.medium == medium)


class MediaShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    medium: MediaType
    label: str
    count: int
    percentage: float = Field(ge=0, le=100)


class MediaDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    shares: List[MediaShare]
    total: int

    def get(self, medium: MediaType) -> MediaShare:
        return next(s for s in self.shares if s.medium == medium)


class MonthlyTrendEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: str
    year: int
    print: int = 0
    web: int = 0
    tv: int = 0
    radio: int = 0
    total: int = 0


class MonthCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: str
    count: int


class ThematicArea(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: str
    count: int
    weight: int = Field(ge=0, le=100)


class JournalistRank(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    outlet: str
    count: int


class OrgVisibility(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    mentions: int


class MajorStory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    media_type: MediaType
    date: datetime
    title: str
    summary: str

    @property
    def date_label(self) -> str:
        return f"{self.date.strftime('%B')} {self.date.day}, {self.date.year}"


class CompetitorAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    mentions: int
    percentage: float = Field(ge=0, le=100)
    major_stories: List[MajorStory] = Field(default_factory=list, max_length=6)


class SentimentBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int = 0
    percentage: float = Field(default=0.0, ge=0, le=100)


class SentimentRollup(BaseModel):
    """Sentiment over scored stories only; unscored stories are not neutral."""

    model_config = ConfigDict(frozen=True)

    positive: SentimentBucket
    neutral: SentimentBucket
    negative: SentimentBucket

    @property
    def scored_total(self) -> int:
        return self.positive.count + self.neutral.count + self.negative.count


class ClientSentiment(BaseModel):
    model_config = ConfigDict(frozen=True)

    positive: int = 0
    neutral: int = 0
    negative: int = 0


class ClientVisibility(BaseModel):
    """Mentions of the client itself across the corpus."""

    model_config = ConfigDict(frozen=True)

    total_mentions: int
    sources: Dict[MediaType, int]
    monthly_trend: List[MonthCount]
    major_stories: List[MajorStory] = Field(default_factory=list, max_length=6)
    sentiment: ClientSentiment


class ReportModel(BaseModel):
    """Immutable, renderer-agnostic result of one report run."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_name: str
    industry_name: str
    date_range_label: str
    start_date: datetime
    end_date: datetime
    logo_path: Optional[str] = None
    total_stories: int
    scope_of_coverage: ScopeOfCoverage
    media_distribution: MediaDistribution
    monthly_trend: List[MonthlyTrendEntry]
    thematic_areas: List[ThematicArea]
    journalists: List[JournalistRank]
    org_visibility: List[OrgVisibility]
    client_visibility: ClientVisibility
    competitor_analysis: List[CompetitorAnalysis]
    sentiment: SentimentRollup
    key_takeouts: List[str]

    def datasets(self) -> Dict[str, Dataset]:
        """Build every named chart dataset from the report fields."""
        def single(key: DatasetKey, title: str, labels: List[str], name: str, values) -> Dataset:
            return Dataset(
                key=key.value,
                title=title,
                labels=labels,
                series=[Series(name=name, values=[float(v) for v in values])],
            )

        trend_labels = [m.month for m in self.monthly_trend]
        top_competitors = self.competitor_analysis[:5]
        visibility = self.client_visibility
        client_order = [MediaType.PRINT, MediaType.WEB, MediaType.TV, MediaType.RADIO]
        sentiment_labels = ["Positive", "Negative", "Neutral"]

        datasets = [
            single(
                DatasetKey.SCOPE_OF_COVERAGE,
                "Scope of Coverage",
                [e.label for e in self.scope_of_coverage.entries],
                "Outlets",
                [e.count for e in self.scope_of_coverage.entries],
            ),
            single(
                DatasetKey.MEDIA_SOURCES,
                "Media Sources",
                [s.label for s in self.media_distribution.shares],
                "Stories",
                [s.count for s in self.media_distribution.shares],
            ),
            Dataset(
                key=DatasetKey.MONTHLY_TREND.value,
                title="Monthly Trend",
                labels=trend_labels,
                series=[
                    Series(name="Print Media", values=[float(m.print) for m in self.monthly_trend]),
                    Series(name="News Website", values=[float(m.web) for m in self.monthly_trend]),
                    Series(name="TV", values=[float(m.tv) for m in self.monthly_trend]),
                    Series(name="Radio", values=[float(m.radio) for m in self.monthly_trend]),
                ],
            ),
            Dataset(
                key=DatasetKey.THEMATIC_AREAS.value,
                title="Thematic Areas",
                labels=[t.keyword for t in self.thematic_areas],
                series=[
                    Series(name="Weight", values=[float(t.weight) for t in self.thematic_areas]),
                    Series(name="Count", values=[float(t.count) for t in self.thematic_areas]),
                ],
            ),
            single(
                DatasetKey.JOURNALISTS,
                "Key Journalists",
                [f"{j.name}\n{j.outlet}" if j.outlet else j.name for j in self.journalists],
                "Articles",
                [j.count for j in self.journalists],
            ),
            single(
                DatasetKey.ORG_VISIBILITY,
                "Organization Visibility",
                [o.name for o in self.org_visibility],
                "Mentions",
                [o.mentions for o in self.org_visibility],
            ),
            single(
                DatasetKey.CLIENT_SOURCES,
                "Sources of Mentions",
                [MEDIA_LABELS[m] for m in client_order],
                "Mentions",
                [visibility.sources.get(m, 0) for m in client_order],
            ),
            single(
                DatasetKey.CLIENT_MONTHLY_TREND,
                "Trend of Mentions",
                [m.month for m in visibility.monthly_trend],
                "Mentions",
                [m.count for m in visibility.monthly_trend],
            ),
            single(
                DatasetKey.COMPETITOR_PRESENCE,
                "Competitor Presence",
                [c.name for c in top_competitors],
                "Mentions",
                [c.mentions for c in top_competitors],
            ),
            single(
                DatasetKey.SENTIMENT_INDUSTRY,
                "Sentiment",
                sentiment_labels,
                "Stories",
                [self.sentiment.positive.count, self.sentiment.negative.count, self.sentiment.neutral.count],
            ),
            single(
                DatasetKey.SENTIMENT_CLIENT,
                "Client Sentiment",
                sentiment_labels,
                "Stories",
                [visibility.sentiment.positive, visibility.sentiment.negative, visibility.sentiment.neutral],
            ),
        ]
        return {d.key: d for d in datasets}


class ExportPayload(BaseModel):
    """Transportable export: base64 document plus derived filename."""

    data: str
    filename: str
