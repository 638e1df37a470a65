"""Story corpus and entity catalog providers."""

from src.providers.base import EntityCatalogProvider, StoryCorpusProvider, story_matches
from src.providers.memory import InMemoryCatalog, InMemoryStoryStore, load_snapshot

__all__ = [
    "EntityCatalogProvider",
    "InMemoryCatalog",
    "InMemoryStoryStore",
    "StoryCorpusProvider",
    "load_snapshot",
    "story_matches",
]
