"""Tests for entity keyword sets and the catalog-backed keyword index."""

import pytest

from src.analytics.keywords import KeywordIndex, build_keyword_set, matches_any
from src.errors import NotFound
from src.models.schemas import Entity

from tests.conftest import make_story


class TestBuildKeywordSet:
    """Tests for build_keyword_set."""

    def test_includes_lowercased_name_and_keywords(self):
        """Name and explicit keywords are lower-cased into one set."""
        entity = Entity(id="e1", name="Zenith Bank", explicit_keywords=["ZENITH", "ZB Group"])
        assert build_keyword_set(entity) == frozenset({"zenith bank", "zenith", "zb group"})

    def test_deduplicates_and_drops_blanks(self):
        entity = Entity(id="e1", name="Acme", explicit_keywords=["acme", "  ", "Acme "])
        assert build_keyword_set(entity) == frozenset({"acme"})


class TestMatchesAny:
    """Tests for unanchored, case-insensitive matching."""

    def test_matches_substring_in_title(self):
        story = make_story("s", title="ACME BANK raises rates")
        assert matches_any(story, {"acme"})

    def test_matches_summary_and_keywords(self):
        story = make_story("s", title="Rates", summary="Zenith responds", keywords="lending")
        assert matches_any(story, {"zenith"})
        assert matches_any(story, {"lending"})

    def test_unanchored_substring(self):
        """'bank' matches inside 'banking'."""
        story = make_story("s", title="Banking weekly")
        assert matches_any(story, {"bank"})

    def test_no_match(self):
        story = make_story("s", title="Telecom tariffs")
        assert not matches_any(story, {"acme", "zenith"})


class TestKeywordIndex:
    """Tests for KeywordIndex lookups."""

    @pytest.mark.asyncio
    async def test_for_client(self, catalog):
        index = KeywordIndex(catalog)
        assert await index.for_client("acme") == frozenset({"acme bank", "acme"})

    @pytest.mark.asyncio
    async def test_for_entity_resolves_competitor(self, catalog):
        index = KeywordIndex(catalog)
        assert await index.for_entity("orbit") == frozenset({"orbit finance"})

    @pytest.mark.asyncio
    async def test_unknown_client_raises_not_found(self, catalog):
        index = KeywordIndex(catalog)
        with pytest.raises(NotFound) as exc_info:
            await index.for_client("missing")
        assert exc_info.value.kind == "not_found"
        assert exc_info.value.entity_id == "missing"

    @pytest.mark.asyncio
    async def test_unknown_entity_raises_not_found(self, catalog):
        with pytest.raises(NotFound):
            await KeywordIndex(catalog).for_entity("nobody")
