"""Analytics: keyword index, corpus selection, aggregation and model assembly."""

from src.analytics.builder import REQUIRED_DATASETS, ReportModelBuilder
from src.analytics.corpus import CorpusSelector, StoryCorpus
from src.analytics.engine import AggregationEngine, Aggregates
from src.analytics.keywords import KeywordIndex, build_keyword_set

__all__ = [
    "AggregationEngine",
    "Aggregates",
    "CorpusSelector",
    "KeywordIndex",
    "REQUIRED_DATASETS",
    "ReportModelBuilder",
    "StoryCorpus",
    "build_keyword_set",
]
