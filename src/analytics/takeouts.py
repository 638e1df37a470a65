"""Key takeout sentences for the conclusions slides.

Templates are emitted in a constant order:

1. total industry coverage and print share
2. client mentions
3. industry positive share
4. client positive stories
5. leading competitor
6. peak month
"""

from typing import List

from src.models.schemas import (
    ClientVisibility,
    CompetitorAnalysis,
    MediaDistribution,
    MediaType,
    MonthlyTrendEntry,
    SentimentRollup,
)


def _fmt_pct(value: float) -> str:
    """Render 50.0 as '50' and 12.5 as '12.5'."""
    return f"{value:g}"


def build_key_takeouts(
    client_name: str,
    industry_name: str,
    distribution: MediaDistribution,
    visibility: ClientVisibility,
    sentiment: SentimentRollup,
    competitors: List[CompetitorAnalysis],
    trend: List[MonthlyTrendEntry],
) -> List[str]:
    """Interpolate report figures into the fixed takeout templates."""
    print_pct = distribution.get(MediaType.PRINT).percentage
    takeouts = [
        f"In the review period, {distribution.total:,} news stories about {industry_name} "
        f"were reported, with {_fmt_pct(print_pct)}% coming from print media.",
        f"{client_name} featured in {visibility.total_mentions:,} news stories during the "
        f"review period of the total {industry_name} coverage.",
        f"Overall, {_fmt_pct(sentiment.positive.percentage)}% of the {industry_name} "
        f"sector's publicity remains positive.",
        f"{visibility.sentiment.positive:,} positive stories were reported on {client_name} "
        f"during the review period.",
    ]

    leader = competitors[0] if competitors else None
    if leader is not None and leader.mentions > 0:
        takeouts.append(
            f"{leader.name} led competitor coverage with {leader.mentions:,} mentions "
            f"({_fmt_pct(leader.percentage)}% of competitor mentions)."
        )
    else:
        takeouts.append("No competitor coverage was recorded during the review period.")

    if trend:
        # First month wins ties so the sentence is stable
        peak = max(trend, key=lambda m: m.total)
        takeouts.append(f"Coverage peaked in {peak.month} with {peak.total:,} stories.")

    return takeouts
