"""Contracts for the external story corpus and entity catalog providers."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from src.models.schemas import ClientProfile, DateWindow, Entity, MediaType, Story


class StoryCorpusProvider(ABC):
    """Read-only access to monitored stories."""

    @abstractmethod
    async def fetch_stories(
        self,
        media_type: MediaType,
        window: DateWindow,
        industry_id: Optional[str] = None,
        keyword_substrings: Optional[Iterable[str]] = None,
    ) -> List[Story]:
        """
        Fetch stories of one media type inside a date window.

        Args:
            media_type: Which media collection to read.
            window: Inclusive date window.
            industry_id: Keep stories belonging to this industry.
            keyword_substrings: Keep stories whose text contains any of these.

        Returns:
            Stories in the window matching the industry OR any keyword. With
            neither filter given, every story in the window.
        """
        pass


class EntityCatalogProvider(ABC):
    """Read-only access to clients, competitors and industry peers."""

    @abstractmethod
    async def get_client(self, client_id: str) -> Optional[ClientProfile]:
        """Return the client profile, or None when the id is unknown."""
        pass

    @abstractmethod
    async def get_entity(self, entity_id: str) -> Optional[Entity]:
        """Return any client or competitor entity, or None when unknown."""
        pass

    @abstractmethod
    async def list_industry_organizations(self, industry_id: Optional[str]) -> List[Entity]:
        """
        List active organizations in an industry.

        Args:
            industry_id: Industry to list. None lists every active organization.
        """
        pass


def story_matches(
    story: Story,
    window: DateWindow,
    industry_id: Optional[str] = None,
    keyword_substrings: Optional[Iterable[str]] = None,
) -> bool:
    """
    Apply the corpus filter to one story.

    A story passes when its date is in the window AND (its industry
    matches OR any keyword is a case-insensitive substring of the story text).
    """
    if not window.contains(story.date):
        return False

    keywords = [k.lower() for k in (keyword_substrings or []) if k]
    if not industry_id and not keywords:
        return True

    if industry_id and story.industry_id == industry_id:
        return True

    text = story.search_text
    return any(kw in text for kw in keywords)
