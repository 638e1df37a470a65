"""Tests for report model assembly and its named datasets."""

import pytest

from src.analytics.builder import REQUIRED_DATASETS, ReportModelBuilder
from src.analytics.corpus import StoryCorpus
from src.analytics.dates import resolve_date_window
from src.analytics.engine import AggregationEngine
from src.errors import IncompleteReportModel
from src.models.schemas import MEDIA_ORDER, DatasetKey


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def window(now):
    return resolve_date_window("90d", now)


@pytest.fixture
def corpus(banking_stories, window):
    kept = [s for s in banking_stories if s.industry_id == "banking" and window.contains(s.date)]
    return StoryCorpus(window=window, by_medium={m: [s for s in kept if s.media_type == m] for m in MEDIA_ORDER})


@pytest.fixture
def model(corpus, client_profile, window):
    aggregates = AggregationEngine().run(corpus, client_profile)
    return ReportModelBuilder().build(client_profile, window, aggregates)


@pytest.fixture
def empty_model(client_profile, window):
    aggregates = AggregationEngine().run(StoryCorpus(window=window), client_profile)
    return ReportModelBuilder().build(client_profile, window, aggregates)


# ============================================================================
# Tests
# ============================================================================


class TestReportModelBuilder:
    """Tests for ReportModelBuilder.build."""

    def test_header_fields(self, model):
        assert model.client_id == "acme"
        assert model.client_name == "Acme Bank"
        assert model.industry_name == "Banking"
        assert model.total_stories == 5
        assert model.date_range_label == "December 2025 – March 2026"

    def test_every_required_dataset_is_produced(self, model):
        assert REQUIRED_DATASETS <= set(model.datasets())

    def test_missing_dataset_fails_fast(self, corpus, client_profile, window):
        aggregates = AggregationEngine().run(corpus, client_profile)
        builder = ReportModelBuilder(required_datasets=[*REQUIRED_DATASETS, "share_of_voice"])
        with pytest.raises(IncompleteReportModel) as exc_info:
            builder.build(client_profile, window, aggregates)
        assert exc_info.value.missing == ["share_of_voice"]
        assert exc_info.value.kind == "incomplete_report_model"

    def test_model_is_frozen(self, model):
        with pytest.raises(Exception):
            model.client_name = "Other"

    def test_json_is_idempotent(self, corpus, client_profile, window, model):
        again = ReportModelBuilder().build(client_profile, window, AggregationEngine().run(corpus, client_profile))
        assert again.model_dump_json() == model.model_dump_json()


class TestDatasets:
    """Tests for ReportModel.datasets."""

    def test_media_sources(self, model):
        dataset = model.datasets()[DatasetKey.MEDIA_SOURCES.value]
        assert dataset.labels == ["News Website", "Print Media", "Radio", "TV"]
        assert dataset.series[0].values == [2.0, 1.0, 1.0, 1.0]

    def test_monthly_trend_has_four_series(self, model):
        dataset = model.datasets()[DatasetKey.MONTHLY_TREND.value]
        assert [s.name for s in dataset.series] == ["Print Media", "News Website", "TV", "Radio"]
        assert dataset.labels == ["December", "January", "February", "March"]

    def test_journalist_labels_carry_outlet(self, model):
        dataset = model.datasets()[DatasetKey.JOURNALISTS.value]
        assert dataset.labels[0] == "Jane Doe\nDaily Web"

    def test_client_sources_order(self, model):
        dataset = model.datasets()[DatasetKey.CLIENT_SOURCES.value]
        assert dataset.labels == ["Print Media", "News Website", "TV", "Radio"]
        assert dataset.series[0].values == [0.0, 1.0, 0.0, 1.0]

    def test_sentiment_order(self, model):
        dataset = model.datasets()[DatasetKey.SENTIMENT_INDUSTRY.value]
        assert dataset.labels == ["Positive", "Negative", "Neutral"]
        assert dataset.series[0].values == [2.0, 1.0, 1.0]

    def test_points(self, model):
        points = model.datasets()[DatasetKey.COMPETITOR_PRESENCE.value].points()
        assert [(p.label, p.value) for p in points] == [("Zenith Bank", 2.0), ("Orbit Finance", 1.0)]

    def test_empty_model_datasets_are_empty(self, empty_model):
        datasets = empty_model.datasets()
        for key in (
            DatasetKey.MEDIA_SOURCES,
            DatasetKey.MONTHLY_TREND,
            DatasetKey.THEMATIC_AREAS,
            DatasetKey.JOURNALISTS,
            DatasetKey.ORG_VISIBILITY,
            DatasetKey.COMPETITOR_PRESENCE,
            DatasetKey.SENTIMENT_CLIENT,
        ):
            assert datasets[key.value].is_empty, key
