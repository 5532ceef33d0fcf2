"""Resolves pronoun ids and pairs through the cache and the pronouns table.

All methods run on the caller's session and inside the caller's
transaction. Pairs this resolver inserts are staged on the session and only
reach the shared cache once the transaction commits.
"""

from __future__ import annotations

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from users.domain.value_objects import Pronouns
from users.infrastructure.models import PronounModel
from users.infrastructure.observability import DefaultPronounProbe, PronounProbe
from users.infrastructure.pronoun_cache import PronounCache
from users.ports.exceptions import DanglingPronounReferenceError

_PENDING_KEY = "pending_pronouns"


class PronounResolver:
    """Cache-first lookup and get-or-create for pronoun pairs."""

    def __init__(self, cache: PronounCache, probe: PronounProbe | None = None):
        self._cache = cache
        self._probe = probe or DefaultPronounProbe()

    @staticmethod
    def _pending(session: AsyncSession) -> dict[int, Pronouns]:
        return session.info.setdefault(_PENDING_KEY, {})

    async def resolve_id(self, session: AsyncSession, pronoun_id: int) -> Pronouns:
        """Return the pair for a pronoun id referenced by a user row.

        Raises:
            DanglingPronounReferenceError: If no pronouns row has this id
        """
        cached = self._cache.get_by_id(pronoun_id)
        if cached is not None:
            return cached

        staged = self._pending(session).get(pronoun_id)
        if staged is not None:
            return staged

        self._probe.pronoun_cache_miss(pronoun_id=pronoun_id, pronouns=None)
        stmt = select(PronounModel.subjective, PronounModel.objective).where(
            PronounModel.id == pronoun_id
        )
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            self._probe.dangling_pronoun_reference(pronoun_id)
            raise DanglingPronounReferenceError(pronoun_id)

        pronouns = Pronouns(subjective=row.subjective, objective=row.objective)
        self._cache.set(pronoun_id, pronouns)
        return pronouns

    async def resolve_or_create(self, session: AsyncSession, pronouns: Pronouns) -> int:
        """Return the id of a pair, inserting it when no row exists yet.

        The insert runs in a SAVEPOINT so a unique violation from a concurrent
        creator only rolls back the insert; the winner's row is then selected.
        """
        cached = self._cache.get_by_pronouns(pronouns)
        if cached is not None:
            return cached

        pending = self._pending(session)
        for staged_id, staged in pending.items():
            if staged == pronouns:
                return staged_id

        self._probe.pronoun_cache_miss(pronoun_id=None, pronouns=str(pronouns))
        existing = await self._select_id(session, pronouns)
        if existing is not None:
            self._cache.set(existing, pronouns)
            return existing

        try:
            async with session.begin_nested():
                stmt = (
                    insert(PronounModel)
                    .values(
                        subjective=pronouns.subjective,
                        objective=pronouns.objective,
                    )
                    .returning(PronounModel.id)
                )
                pronoun_id = (await session.execute(stmt)).scalar_one()
        except IntegrityError:
            self._probe.pronoun_insert_conflict(str(pronouns))
            winner = await self._select_id(session, pronouns)
            if winner is None:
                raise
            self._cache.set(winner, pronouns)
            return winner

        pending[pronoun_id] = pronouns
        self._probe.pronoun_created(pronoun_id, str(pronouns))
        return pronoun_id

    async def load_all(self, session: AsyncSession) -> int:
        """Populate the cache from every stored pair and return the count."""
        stmt = select(PronounModel.id, PronounModel.subjective, PronounModel.objective)
        count = 0
        for row in (await session.execute(stmt)).all():
            self._cache.set(
                row.id, Pronouns(subjective=row.subjective, objective=row.objective)
            )
            count += 1
        self._probe.pronouns_loaded(count)
        return count

    def publish_pending(self, session: AsyncSession) -> None:
        """Move pairs inserted by the committed transaction into the cache."""
        pending = session.info.pop(_PENDING_KEY, None)
        if not pending:
            return
        for pronoun_id, pronouns in pending.items():
            self._cache.set(pronoun_id, pronouns)
        self._probe.pending_pronouns_published(len(pending))

    def discard_pending(self, session: AsyncSession) -> None:
        """Drop pairs staged by a transaction that rolled back."""
        session.info.pop(_PENDING_KEY, None)

    async def _select_id(self, session: AsyncSession, pronouns: Pronouns) -> int | None:
        stmt = select(PronounModel.id).where(
            PronounModel.subjective == pronouns.subjective,
            PronounModel.objective == pronouns.objective,
        )
        return (await session.execute(stmt)).scalar_one_or_none()
