"""Shared fixtures: a small banking corpus with hand-checked expectations.

In the 90d window ending at NOW the corpus holds five stories:

    web    2026-01-10  Acme profit         Jane Doe       positive
    print  2026-01-15  Zenith expands      John Smith     positive
    radio  2026-02-03  Acme and Zenith     Ama Mensah     negative
    tv     2026-03-05  Orbit app launch    Kofi Boateng   neutral
    web    2026-03-20  Sector outlook      Jane Doe       (unscored)

Plus one out-of-window Acme story and one unrelated telecom story.
"""

from datetime import datetime

import pytest

from src.config import Settings
from src.models.schemas import (
    ClientProfile,
    Entity,
    Industry,
    MediaType,
    Outlet,
    Sentiment,
    Story,
)
from src.providers.memory import InMemoryCatalog, InMemoryStoryStore

NOW = datetime(2026, 3, 31, 12, 0)

BANKING = Industry(id="banking", name="Banking")

DAILY_WEB = Outlet(id="o-web", name="Daily Web")
THE_TIMES = Outlet(id="o-print", name="The Times")
RADIO_ONE = Outlet(id="o-radio", name="Radio One")
TV3 = Outlet(id="o-tv", name="TV3")


def make_story(
    story_id: str,
    media_type: MediaType = MediaType.WEB,
    date: datetime = datetime(2026, 2, 1),
    title: str = "Untitled",
    **kwargs,
) -> Story:
    """Build a Story with sensible defaults."""
    return Story(id=story_id, media_type=media_type, date=date, title=title, **kwargs)


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, storage_timeout=2.0)


@pytest.fixture
def competitors():
    return [
        Entity(id="zenith", name="Zenith Bank", explicit_keywords=["zenith"], industry_ids=["banking"]),
        Entity(id="orbit", name="Orbit Finance", industry_ids=["banking"]),
    ]


@pytest.fixture
def client_profile(competitors):
    return ClientProfile(
        id="acme",
        name="Acme Bank",
        keywords=["acme"],
        competitors=competitors,
        industries=[BANKING],
    )


@pytest.fixture
def peer_profile():
    return ClientProfile(
        id="zenith",
        name="Zenith Bank",
        keywords=["zenith"],
        industries=[BANKING],
    )


@pytest.fixture
def banking_stories():
    return [
        make_story(
            "s1", MediaType.WEB, datetime(2026, 1, 10), "Acme Bank posts record profit",
            content="Acme Bank reported its best year.",
            summary="Record profit for Acme.",
            keywords="banking, profit, acme",
            overall_sentiment=Sentiment.POSITIVE,
            industry_id="banking",
            author="Jane Doe",
            outlet=DAILY_WEB,
        ),
        make_story(
            "s2", MediaType.PRINT, datetime(2026, 1, 15), "Zenith Bank expands north",
            content="Zenith opens ten branches.",
            keywords="banking, expansion",
            overall_sentiment=Sentiment.POSITIVE,
            industry_id="banking",
            author="John Smith",
            outlet=THE_TIMES,
        ),
        make_story(
            "s3", MediaType.RADIO, datetime(2026, 2, 3), "Morning business: Acme and Zenith",
            content="Both lenders raised fees.",
            keywords="banking",
            overall_sentiment=Sentiment.NEGATIVE,
            industry_id="banking",
            presenters=["Ama Mensah"],
            outlet=RADIO_ONE,
        ),
        make_story(
            "s4", MediaType.TV, datetime(2026, 3, 5), "Orbit Finance launches app",
            keywords="fintech, apps",
            overall_sentiment=Sentiment.NEUTRAL,
            industry_id="banking",
            presenters=["Kofi Boateng", "Jo"],
            outlet=TV3,
        ),
        make_story(
            "s5", MediaType.WEB, datetime(2026, 3, 20), "Banking sector outlook",
            content="x" * 400,
            keywords="banking, outlook",
            industry_id="banking",
            author="Jane Doe",
            outlet=DAILY_WEB,
        ),
        # Outside the window
        make_story(
            "s6", MediaType.WEB, datetime(2025, 6, 1), "Acme Bank opens office",
            industry_id="banking",
            author="Jane Doe",
            outlet=DAILY_WEB,
        ),
        # Neither the industry nor a client keyword
        make_story(
            "s7", MediaType.WEB, datetime(2026, 2, 10), "Telecom tariffs rise",
            industry_id="telecom",
            author="Someone Else",
        ),
    ]


@pytest.fixture
def catalog(client_profile, peer_profile):
    return InMemoryCatalog([client_profile, peer_profile])


@pytest.fixture
def store(banking_stories):
    return InMemoryStoryStore(banking_stories)


@pytest.fixture
def report_model(banking_stories, client_profile, peer_profile, now):
    """Report model for the banking corpus over the 90d window."""
    from src.analytics.builder import ReportModelBuilder
    from src.analytics.corpus import StoryCorpus
    from src.analytics.dates import resolve_date_window
    from src.analytics.engine import AggregationEngine
    from src.models.schemas import MEDIA_ORDER

    window = resolve_date_window("90d", now)
    kept = [s for s in banking_stories if s.industry_id == "banking" and window.contains(s.date)]
    corpus = StoryCorpus(window=window, by_medium={m: [s for s in kept if s.media_type == m] for m in MEDIA_ORDER})
    aggregates = AggregationEngine().run(corpus, client_profile, [client_profile.entity, peer_profile.entity])
    return ReportModelBuilder().build(client_profile, window, aggregates)


@pytest.fixture
def empty_report_model(client_profile, now):
    """Report model for a client with no coverage at all."""
    from src.analytics.builder import ReportModelBuilder
    from src.analytics.corpus import StoryCorpus
    from src.analytics.dates import resolve_date_window
    from src.analytics.engine import AggregationEngine

    window = resolve_date_window("90d", now)
    aggregates = AggregationEngine().run(StoryCorpus(window=window), client_profile)
    return ReportModelBuilder().build(client_profile, window, aggregates)
