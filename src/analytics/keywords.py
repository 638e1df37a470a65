"""Entity keyword index.

An entity's keyword set is its lower-cased name plus its explicit keywords,
deduplicated. Story text matches an entity when any keyword occurs in it as an
unanchored, case-insensitive substring.
"""

import logging
from typing import FrozenSet, Iterable

from src.errors import NotFound
from src.models.schemas import Entity, Story
from src.providers.base import EntityCatalogProvider

logger = logging.getLogger(__name__)

KeywordSet = FrozenSet[str]


def build_keyword_set(entity: Entity) -> KeywordSet:
    """Build the searchable keyword set for an entity."""
    keywords = [entity.name, *entity.explicit_keywords]
    return frozenset(k.strip().lower() for k in keywords if k and k.strip())


def matches_any(story: Story, keywords: Iterable[str]) -> bool:
    """Check whether a story's text contains any keyword."""
    text = story.search_text
    return any(kw in text for kw in keywords)


class KeywordIndex:
    """Resolves entity ids to keyword sets through the entity catalog."""

    def __init__(self, catalog: EntityCatalogProvider):
        self.catalog = catalog

    async def for_entity(self, entity_id: str) -> KeywordSet:
        """
        Keyword set for any client or competitor.

        Raises:
            NotFound: If the catalog does not know the id.
        """
        entity = await self.catalog.get_entity(entity_id)
        if entity is None:
            raise NotFound("entity", entity_id)
        return build_keyword_set(entity)

    async def for_client(self, client_id: str) -> KeywordSet:
        """
        Keyword set for a client.

        Raises:
            NotFound: If the catalog does not know the client.
        """
        client = await self.catalog.get_client(client_id)
        if client is None:
            raise NotFound("client", client_id)
        keywords = build_keyword_set(client.entity)
        logger.debug(f"Client {client_id} keyword set: {sorted(keywords)}")
        return keywords
