"""Story corpus selection.

The corpus for a report is fetched once: the four media collections are read
concurrently and joined before any aggregation starts. Per-entity matching
later re-filters this corpus with entity-specific keywords.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Dict, Iterable, List, Optional, TypeVar

from src.errors import AggregationFailed
from src.models.schemas import MEDIA_ORDER, DateWindow, MediaType, Story
from src.providers.base import StoryCorpusProvider, story_matches

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StoryCorpus:
    """Stories of one report run, grouped by medium."""

    window: DateWindow
    by_medium: Dict[MediaType, List[Story]] = field(default_factory=dict)

    def stories(self, medium: MediaType) -> List[Story]:
        return self.by_medium.get(medium, [])

    @property
    def all_stories(self) -> List[Story]:
        """Every story, in fixed medium order (web, print, radio, TV)."""
        return [s for m in MEDIA_ORDER for s in self.stories(m)]

    def __len__(self) -> int:
        return sum(len(self.stories(m)) for m in MEDIA_ORDER)


async def bounded_fetch(coro: Awaitable[T], timeout: float, source: str) -> T:
    """
    Await one storage read with a timeout, mapping failures to AggregationFailed.

    Args:
        coro: The provider call.
        timeout: Seconds allowed.
        source: Name used in logs and the raised error.
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(f"Storage read timed out after {timeout}s: {source}")
        raise AggregationFailed("Storage read timed out", source=source) from e
    except AggregationFailed:
        raise
    except Exception as e:
        logger.error(f"Storage read failed for {source}: {e}")
        raise AggregationFailed(f"Storage read failed: {e}", source=source) from e


class CorpusSelector:
    """Selects the high-recall story corpus for a report window."""

    def __init__(self, provider: StoryCorpusProvider, timeout: float = 30.0):
        self.provider = provider
        self.timeout = timeout

    async def select(
        self,
        window: DateWindow,
        industry_id: Optional[str] = None,
        keywords: Optional[Iterable[str]] = None,
    ) -> StoryCorpus:
        """
        Fetch every story in the window that matches the industry or any keyword.

        Args:
            window: Inclusive report window.
            industry_id: Client's primary industry, if any.
            keywords: Client keyword set.

        Returns:
            StoryCorpus grouped by medium.

        Raises:
            AggregationFailed: If any media fetch fails or times out.
        """
        keyword_list = sorted(set(keywords or []))
        fetches = [
            bounded_fetch(
                self.provider.fetch_stories(
                    medium,
                    window,
                    industry_id=industry_id,
                    keyword_substrings=keyword_list,
                ),
                self.timeout,
                f"{medium.value}_stories",
            )
            for medium in MEDIA_ORDER
        ]
        # All four must complete; no partial corpus is ever aggregated
        results = await asyncio.gather(*fetches)

        # Providers may filter loosely; re-apply the corpus filter
        by_medium = {}
        for medium, stories in zip(MEDIA_ORDER, results):
            kept = [
                s for s in stories
                if s.media_type == medium and story_matches(s, window, industry_id, keyword_list)
            ]
            if len(kept) != len(stories):
                logger.warning(
                    f"Dropped {len(stories) - len(kept)} {medium.value} stories outside the corpus filter"
                )
            by_medium[medium] = kept

        corpus = StoryCorpus(window=window, by_medium=by_medium)
        logger.info(
            f"Selected {len(corpus)} stories for {window.label} "
            f"(industry={industry_id}, keywords={len(keyword_list)})"
        )
        return corpus
