"""In-memory providers backed by plain lists or a JSON snapshot file."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from src.models.schemas import ClientProfile, DateWindow, Entity, MediaType, Story
from src.providers.base import EntityCatalogProvider, StoryCorpusProvider, story_matches

logger = logging.getLogger(__name__)


class InMemoryStoryStore(StoryCorpusProvider):
    """Story provider holding an immutable snapshot of stories."""

    def __init__(self, stories: Optional[Iterable[Story]] = None):
        self._stories: Tuple[Story, ...] = tuple(stories or ())

    def __len__(self) -> int:
        return len(self._stories)

    async def fetch_stories(
        self,
        media_type: MediaType,
        window: DateWindow,
        industry_id: Optional[str] = None,
        keyword_substrings: Optional[Iterable[str]] = None,
    ) -> List[Story]:
        keywords = list(keyword_substrings or [])
        return [
            s for s in self._stories
            if s.media_type == media_type and story_matches(s, window, industry_id, keywords)
        ]


class InMemoryCatalog(EntityCatalogProvider):
    """Entity catalog holding clients and stand-alone competitor entities."""

    def __init__(
        self,
        clients: Optional[Iterable[ClientProfile]] = None,
        entities: Optional[Iterable[Entity]] = None,
    ):
        self._clients: Dict[str, ClientProfile] = {c.id: c for c in (clients or [])}
        self._entities: Dict[str, Entity] = {c.id: c.entity for c in self._clients.values()}
        for client in self._clients.values():
            for competitor in client.competitors:
                self._entities.setdefault(competitor.id, competitor)
        for entity in entities or []:
            self._entities[entity.id] = entity

    async def get_client(self, client_id: str) -> Optional[ClientProfile]:
        return self._clients.get(client_id)

    async def get_entity(self, entity_id: str) -> Optional[Entity]:
        return self._entities.get(entity_id)

    async def list_industry_organizations(self, industry_id: Optional[str]) -> List[Entity]:
        # Peers are catalog clients, matching the client list used for visibility
        clients = [c.entity for c in self._clients.values()]
        if industry_id is None:
            return clients
        return [c for c in clients if industry_id in c.industry_ids]


def load_snapshot(
    path: Union[str, Path],
) -> Tuple[InMemoryCatalog, InMemoryStoryStore]:
    """
    Load providers from a JSON snapshot.

    Expected shape::

        {"clients": [ClientProfile...], "entities": [Entity...], "stories": [Story...]}

    Args:
        path: Path to the snapshot file.

    Returns:
        Tuple of (catalog, story store).
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    clients = [ClientProfile.model_validate(c) for c in raw.get("clients", [])]
    entities = [Entity.model_validate(e) for e in raw.get("entities", [])]
    stories = [Story.model_validate(s) for s in raw.get("stories", [])]
    logger.info(
        f"Loaded snapshot {path}: {len(clients)} clients, {len(stories)} stories"
    )
    return InMemoryCatalog(clients, entities), InMemoryStoryStore(stories)
