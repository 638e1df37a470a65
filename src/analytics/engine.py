"""Aggregation engine for the PR Presence report.

Steps run in a fixed order over one fetched corpus: scope of coverage, media
distribution, monthly trend, thematic areas, entity matching, journalist
ranking, competitor analysis, sentiment rollup and key takeouts.

Rankings break count ties alphabetically (case-insensitive), then by id, so
the same corpus always produces the same report.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from src.analytics.corpus import StoryCorpus
from src.analytics.dates import month_buckets, month_key, month_labels
from src.analytics.keywords import KeywordSet, build_keyword_set, matches_any
from src.analytics.takeouts import build_key_takeouts
from src.models.schemas import (
    MEDIA_LABELS,
    MEDIA_ORDER,
    ClientProfile,
    ClientSentiment,
    ClientVisibility,
    CompetitorAnalysis,
    DateWindow,
    Entity,
    JournalistRank,
    MajorStory,
    MediaDistribution,
    MediaShare,
    MediaType,
    MonthCount,
    MonthlyTrendEntry,
    OrgVisibility,
    ScopeEntry,
    ScopeOfCoverage,
    Sentiment,
    SentimentBucket,
    SentimentRollup,
    Story,
    ThematicArea,
)

logger = logging.getLogger(__name__)

MAX_SCOPE_NAMES = 6
MAX_THEMATIC_AREAS = 25
MIN_KEYWORD_LENGTH = 3
MAX_JOURNALISTS = 5
MIN_JOURNALIST_KEY_LENGTH = 4
MAX_ORGANIZATIONS = 5
MAX_MAJOR_STORIES = 6
SYNOPSIS_CHARS = 300
TIED_WEIGHT = 50


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero (0.05 -> 0.1), unlike Python's banker's round."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percentage(part: int, whole: int) -> float:
    """Share of ``whole`` as a percentage with one decimal; 0 when whole is 0."""
    if whole <= 0:
        return 0.0
    return min(100.0, round_half_up(part / whole * 100, 1))


def _rank_key(count: int, name: str, ident: str = ""):
    return (-count, name.lower(), ident)


# ============================================================================
# Steps
# ============================================================================


def scope_of_coverage(corpus: StoryCorpus) -> ScopeOfCoverage:
    """Distinct outlets per medium plus up to six sampled names."""
    entries = []
    for medium in MEDIA_ORDER:
        outlet_ids = set()
        names: List[str] = []
        for story in corpus.stories(medium):
            if story.outlet is None:
                continue
            outlet_ids.add(story.outlet.id)
            if story.outlet.name and story.outlet.name not in names:
                names.append(story.outlet.name)
        sample = names[:MAX_SCOPE_NAMES]
        entries.append(
            ScopeEntry(
                medium=medium,
                label=MEDIA_LABELS[medium] if medium != MediaType.TV else "Television",
                count=len(outlet_ids),
                names=sample,
                description=_scope_description(medium, len(outlet_ids), sample),
            )
        )
    return ScopeOfCoverage(entries=entries)


def _scope_description(medium: MediaType, count: int, names: List[str]) -> str:
    if medium == MediaType.WEB:
        return f"Monitoring covered over {count} major news websites locally and internationally"
    if medium == MediaType.PRINT:
        if not names:
            return "Covered all newspapers in the monitored market"
        return f"Covered all newspapers including major papers such as {', '.join(names[:3])}"
    kind = "Radio stations" if medium == MediaType.RADIO else "TV stations"
    if not names:
        return f"{kind} covered include all monitored stations"
    return f"{kind} covered include {', '.join(names[:4])}"


def media_distribution(corpus: StoryCorpus) -> MediaDistribution:
    """Story count and share per medium, all over the same corpus total."""
    total = len(corpus)
    shares = [
        MediaShare(
            medium=medium,
            label=MEDIA_LABELS[medium],
            count=len(corpus.stories(medium)),
            percentage=percentage(len(corpus.stories(medium)), total),
        )
        for medium in MEDIA_ORDER
    ]
    return MediaDistribution(shares=shares, total=total)


def monthly_trend(corpus: StoryCorpus, window: DateWindow) -> List[MonthlyTrendEntry]:
    """One bucket per calendar month of the window, including empty months."""
    keys = month_buckets(window)
    counts: Dict[tuple, Counter] = {k: Counter() for k in keys}
    for story in corpus.all_stories:
        bucket = counts.get(month_key(story.date))
        if bucket is not None:
            bucket[story.media_type] += 1

    entries = []
    for key, label in zip(keys, month_labels(keys)):
        c = counts[key]
        entries.append(
            MonthlyTrendEntry(
                month=label,
                year=key[0],
                print=c[MediaType.PRINT],
                web=c[MediaType.WEB],
                tv=c[MediaType.TV],
                radio=c[MediaType.RADIO],
                total=sum(c.values()),
            )
        )
    return entries


def thematic_areas(stories: Iterable[Story]) -> List[ThematicArea]:
    """Top keywords from story metadata with min-max normalized weights."""
    tally: Counter = Counter()
    for story in stories:
        if not story.keywords:
            continue
        for token in story.keywords.split(","):
            keyword = token.strip()
            if len(keyword) >= MIN_KEYWORD_LENGTH:
                tally[keyword] += 1

    ranked = sorted(tally.items(), key=lambda kv: _rank_key(kv[1], kv[0], kv[0]))
    top = ranked[:MAX_THEMATIC_AREAS]
    if not top:
        return []

    max_count = top[0][1]
    min_count = top[-1][1]
    areas = []
    for keyword, count in top:
        if max_count == min_count:
            weight = TIED_WEIGHT
        else:
            weight = int(round_half_up((count - min_count) / (max_count - min_count) * 100))
        areas.append(ThematicArea(keyword=keyword, count=count, weight=weight))
    return areas


def match_stories(stories: Iterable[Story], keywords: KeywordSet) -> List[Story]:
    """Stories whose text contains any of the entity's keywords."""
    if not keywords:
        return []
    return [s for s in stories if matches_any(s, keywords)]


def journalist_ranking(stories: Iterable[Story]) -> List[JournalistRank]:
    """Top bylines by article count; initials-only names are ignored."""
    found: Dict[str, dict] = {}
    for story in stories:
        for byline in story.bylines:
            key = byline.strip().lower()
            if len(key) < MIN_JOURNALIST_KEY_LENGTH:
                continue
            entry = found.get(key)
            if entry is None:
                found[key] = {
                    "name": byline.strip(),
                    "outlet": story.outlet.name if story.outlet else "",
                    "count": 1,
                }
            else:
                entry["count"] += 1

    ranked = sorted(found.items(), key=lambda kv: _rank_key(kv[1]["count"], kv[1]["name"], kv[0]))
    return [JournalistRank(**entry) for _, entry in ranked[:MAX_JOURNALISTS]]


def org_visibility(stories: Sequence[Story], organizations: Iterable[Entity]) -> List[OrgVisibility]:
    """Mention ranking of peer organizations in the client's industry."""
    visible = []
    for org in organizations:
        mentions = len(match_stories(stories, build_keyword_set(org)))
        if mentions > 0:
            visible.append(OrgVisibility(id=org.id, name=org.name, mentions=mentions))
    visible.sort(key=lambda o: _rank_key(o.mentions, o.name, o.id))
    return visible[:MAX_ORGANIZATIONS]


def synopsis(story: Story) -> str:
    """Summary when present, else the first few hundred characters of content."""
    if story.summary:
        return story.summary
    content = story.content or ""
    if len(content) > SYNOPSIS_CHARS:
        return content[:SYNOPSIS_CHARS] + "..."
    return content


def major_stories(stories: Iterable[Story]) -> List[MajorStory]:
    """Oldest-first sample of up to six stories."""
    ordered = sorted(stories, key=lambda s: (s.date, s.id))
    return [
        MajorStory(
            id=s.id,
            media_type=s.media_type,
            date=s.date,
            title=s.title,
            summary=synopsis(s),
        )
        for s in ordered[:MAX_MAJOR_STORIES]
    ]


def competitor_analysis(stories: Sequence[Story], competitors: Iterable[Entity]) -> List[CompetitorAnalysis]:
    """Mentions per competitor and their share of all competitor mentions."""
    matched = [
        (competitor, match_stories(stories, build_keyword_set(competitor)))
        for competitor in competitors
    ]
    total = sum(len(m) for _, m in matched)
    analysis = [
        CompetitorAnalysis(
            id=competitor.id,
            name=competitor.name,
            mentions=len(mentions),
            percentage=percentage(len(mentions), total),
            major_stories=major_stories(mentions),
        )
        for competitor, mentions in matched
    ]
    analysis.sort(key=lambda c: _rank_key(c.mentions, c.name, c.id))
    return analysis


def sentiment_rollup(stories: Iterable[Story]) -> SentimentRollup:
    """Sentiment counts and shares over stories that carry a sentiment."""
    counts = Counter(s.overall_sentiment for s in stories if s.overall_sentiment is not None)
    scored = sum(counts.values())

    def bucket(sentiment: Sentiment) -> SentimentBucket:
        return SentimentBucket(count=counts[sentiment], percentage=percentage(counts[sentiment], scored))

    return SentimentRollup(
        positive=bucket(Sentiment.POSITIVE),
        neutral=bucket(Sentiment.NEUTRAL),
        negative=bucket(Sentiment.NEGATIVE),
    )


def client_visibility(
    client_stories: Sequence[Story],
    window: DateWindow,
) -> ClientVisibility:
    """Client mention totals, per-medium sources, monthly trend and samples."""
    keys = month_buckets(window)
    per_month = Counter(month_key(s.date) for s in client_stories)
    sentiments = Counter(s.overall_sentiment for s in client_stories)
    return ClientVisibility(
        total_mentions=len(client_stories),
        sources={m: sum(1 for s in client_stories if s.media_type == m) for m in MEDIA_ORDER},
        monthly_trend=[
            MonthCount(month=label, count=per_month[key])
            for key, label in zip(keys, month_labels(keys))
        ],
        major_stories=major_stories(client_stories),
        sentiment=ClientSentiment(
            positive=sentiments[Sentiment.POSITIVE],
            neutral=sentiments[Sentiment.NEUTRAL],
            negative=sentiments[Sentiment.NEGATIVE],
        ),
    )


# ============================================================================
# Engine
# ============================================================================


@dataclass(frozen=True)
class Aggregates:
    """Every derived figure of one report run, before model assembly."""

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
    industry_name: str


class AggregationEngine:
    """Computes all report analytics from a fetched corpus."""

    def run(
        self,
        corpus: StoryCorpus,
        client: ClientProfile,
        organizations: Optional[Iterable[Entity]] = None,
    ) -> Aggregates:
        """
        Aggregate the corpus for a client.

        Args:
            corpus: Stories selected for the report window.
            client: Client profile with its competitors and industries.
            organizations: Peer organizations of the client's industry.

        Returns:
            Aggregates ready for ReportModelBuilder.
        """
        window = corpus.window
        stories = corpus.all_stories
        industry = client.primary_industry
        industry_name = industry.name if industry else "the industry"

        scope = scope_of_coverage(corpus)
        distribution = media_distribution(corpus)
        trend = monthly_trend(corpus, window)
        themes = thematic_areas(stories)

        client_stories = match_stories(stories, build_keyword_set(client.entity))
        visibility = client_visibility(client_stories, window)
        peers = org_visibility(stories, organizations or [])

        journalists = journalist_ranking(stories)
        competitors = competitor_analysis(stories, client.competitors)
        sentiment = sentiment_rollup(stories)

        takeouts = build_key_takeouts(
            client_name=client.name,
            industry_name=industry_name,
            distribution=distribution,
            visibility=visibility,
            sentiment=sentiment,
            competitors=competitors,
            trend=trend,
        )

        logger.info(
            f"Aggregated {len(stories)} stories for {client.name}: "
            f"{visibility.total_mentions} client mentions, {len(competitors)} competitors"
        )

        return Aggregates(
            scope_of_coverage=scope,
            media_distribution=distribution,
            monthly_trend=trend,
            thematic_areas=themes,
            journalists=journalists,
            org_visibility=peers,
            client_visibility=visibility,
            competitor_analysis=competitors,
            sentiment=sentiment,
            key_takeouts=takeouts,
            industry_name=industry_name,
        )
