"""Unit tests for PronounResolver against SQLite."""

from unittest.mock import AsyncMock, create_autospec, patch

import pytest
from sqlalchemy import insert, select

from users.domain.value_objects import Pronouns
from users.infrastructure.models import PronounModel
from users.infrastructure.observability import PronounProbe
from users.infrastructure.pronoun_cache import PronounCache
from users.infrastructure.pronoun_resolver import PronounResolver
from users.ports.exceptions import DanglingPronounReferenceError

SHE = Pronouns(subjective="she", objective="her")
THEY = Pronouns(subjective="they", objective="them")


@pytest.fixture
def probe():
    """Create mock pronoun probe."""
    return create_autospec(PronounProbe, instance=True)


@pytest.fixture
def resolver(pronoun_cache: PronounCache, probe) -> PronounResolver:
    return PronounResolver(pronoun_cache, probe=probe)


async def _insert_pair(session, pronouns: Pronouns) -> int:
    stmt = (
        insert(PronounModel)
        .values(subjective=pronouns.subjective, objective=pronouns.objective)
        .returning(PronounModel.id)
    )
    return (await session.execute(stmt)).scalar_one()


class TestResolveOrCreate:
    """Tests for get-or-create of pronoun pairs."""

    @pytest.mark.asyncio
    async def test_inserts_new_pair_and_stages_it(
        self, session, resolver, pronoun_cache, probe
    ):
        async with session.begin():
            pronoun_id = await resolver.resolve_or_create(session, SHE)
            # Not visible to other requests until the transaction commits
            assert pronoun_cache.get_by_pronouns(SHE) is None

        rows = (await session.execute(select(PronounModel))).scalars().all()
        assert [(row.id, row.subjective, row.objective) for row in rows] == [
            (pronoun_id, "she", "her")
        ]
        probe.pronoun_created.assert_called_once_with(pronoun_id, "she/her")

    @pytest.mark.asyncio
    async def test_publish_pending_moves_staged_pairs_into_cache(
        self, session, resolver, pronoun_cache
    ):
        async with session.begin():
            pronoun_id = await resolver.resolve_or_create(session, SHE)
        resolver.publish_pending(session)

        assert pronoun_cache.get_by_pronouns(SHE) == pronoun_id
        assert pronoun_cache.get_by_id(pronoun_id) == SHE

    @pytest.mark.asyncio
    async def test_discard_pending_never_reaches_cache(
        self, session, resolver, pronoun_cache
    ):
        async with session.begin():
            await resolver.resolve_or_create(session, SHE)
        resolver.discard_pending(session)
        resolver.publish_pending(session)

        assert len(pronoun_cache) == 0

    @pytest.mark.asyncio
    async def test_same_pair_twice_in_one_transaction_inserts_once(
        self, session, resolver
    ):
        async with session.begin():
            first = await resolver.resolve_or_create(session, SHE)
            second = await resolver.resolve_or_create(session, SHE)

        assert first == second
        count = len((await session.execute(select(PronounModel.id))).all())
        assert count == 1

    @pytest.mark.asyncio
    async def test_cached_pair_skips_the_store(self, session, resolver, pronoun_cache):
        pronoun_cache.set(42, SHE)

        async with session.begin():
            pronoun_id = await resolver.resolve_or_create(session, SHE)

        assert pronoun_id == 42
        assert (await session.execute(select(PronounModel.id))).all() == []

    @pytest.mark.asyncio
    async def test_stored_pair_is_selected_and_cached(
        self, session, resolver, pronoun_cache, probe
    ):
        async with session.begin():
            stored_id = await _insert_pair(session, THEY)

        async with session.begin():
            pronoun_id = await resolver.resolve_or_create(session, THEY)

        assert pronoun_id == stored_id
        assert pronoun_cache.get_by_pronouns(THEY) == stored_id
        probe.pronoun_created.assert_not_called()

    @pytest.mark.asyncio
    async def test_unique_conflict_returns_winning_row(
        self, session, resolver, pronoun_cache, probe
    ):
        """A concurrent insert of the same pair resolves to the winner's id."""
        async with session.begin():
            winner_id = await _insert_pair(session, SHE)

        # The first lookup misses as if the winner had not committed yet
        with patch.object(
            resolver, "_select_id", AsyncMock(side_effect=[None, winner_id])
        ):
            async with session.begin():
                pronoun_id = await resolver.resolve_or_create(session, SHE)

        assert pronoun_id == winner_id
        assert pronoun_cache.get_by_pronouns(SHE) == winner_id
        probe.pronoun_insert_conflict.assert_called_once_with("she/her")
        count = len((await session.execute(select(PronounModel.id))).all())
        assert count == 1


class TestResolveId:
    """Tests for resolving pronoun ids referenced by user rows."""

    @pytest.mark.asyncio
    async def test_cached_id_is_returned(self, session, resolver, pronoun_cache):
        pronoun_cache.set(3, THEY)

        async with session.begin():
            assert await resolver.resolve_id(session, 3) == THEY

    @pytest.mark.asyncio
    async def test_stored_id_is_read_and_cached(
        self, session, resolver, pronoun_cache, probe
    ):
        async with session.begin():
            stored_id = await _insert_pair(session, SHE)

        async with session.begin():
            pronouns = await resolver.resolve_id(session, stored_id)

        assert pronouns == SHE
        assert pronoun_cache.get_by_id(stored_id) == SHE
        probe.pronoun_cache_miss.assert_called_once_with(
            pronoun_id=stored_id, pronouns=None
        )

    @pytest.mark.asyncio
    async def test_staged_id_is_visible_inside_its_transaction(
        self, session, resolver
    ):
        async with session.begin():
            pronoun_id = await resolver.resolve_or_create(session, SHE)
            assert await resolver.resolve_id(session, pronoun_id) == SHE

    @pytest.mark.asyncio
    async def test_missing_id_raises_dangling_reference(self, session, resolver, probe):
        with pytest.raises(DanglingPronounReferenceError) as exc_info:
            async with session.begin():
                await resolver.resolve_id(session, 999)

        assert exc_info.value.pronoun_id == 999
        probe.dangling_pronoun_reference.assert_called_once_with(999)


class TestLoadAll:
    """Tests for warming the cache."""

    @pytest.mark.asyncio
    async def test_loads_every_stored_pair(self, session, resolver, pronoun_cache, probe):
        async with session.begin():
            she_id = await _insert_pair(session, SHE)
            they_id = await _insert_pair(session, THEY)

        async with session.begin():
            count = await resolver.load_all(session)

        assert count == 2
        assert pronoun_cache.get_by_id(she_id) == SHE
        assert pronoun_cache.get_by_pronouns(THEY) == they_id
        probe.pronouns_loaded.assert_called_once_with(2)

    @pytest.mark.asyncio
    async def test_empty_table_loads_nothing(self, session, resolver, pronoun_cache):
        async with session.begin():
            assert await resolver.load_all(session) == 0
        assert len(pronoun_cache) == 0
