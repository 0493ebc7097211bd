"""
Persistence of finished quiz attempts.

One record per (fid, quiz version), first write wins. A repeated submission
returns the stored record untouched, so client retries are safe and a user
cannot replace a finished attempt with a better one.

Both backends write with an atomic conditional primitive:
- Redis: SET key value NX
- Database: INSERT guarded by the (version, fid) primary key
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..config import Settings
from ..errors import StoreUnavailable, Unauthorized
from ..models.quiz import GuessResult

logger = logging.getLogger(__name__)

results_adapter = TypeAdapter(List[GuessResult])


def attempt_key(fid: str, version: str) -> str:
    return f"quiz:{version}:fid:{fid}"


def _decode(key: str, raw, from_json: bool = True) -> List[GuessResult]:
    try:
        if from_json:
            return results_adapter.validate_json(raw)
        return results_adapter.validate_python(raw)
    except ValidationError as e:
        raise StoreUnavailable(f"Stored quiz state for {key} is unreadable: {e}")


def _require_fid(fid: Optional[str]) -> str:
    if not fid:
        raise Unauthorized()
    return fid


class ResultStore(ABC):
    """Per-user, per-version idempotent record store."""

    @abstractmethod
    async def get(self, fid: str, version: str) -> Optional[List[GuessResult]]:
        """Stored results for the user, or None if nothing was submitted."""

    @abstractmethod
    async def submit(
        self, fid: str, version: str, results: List[GuessResult]
    ) -> List[GuessResult]:
        """Store results unless a record exists; return the stored record."""

    async def init(self) -> None:
        """Prepare the backing store, e.g. create tables."""

    async def close(self) -> None:
        pass


class RedisResultStore(ResultStore):
    """Result store on a Redis compatible server."""

    def __init__(self, client: Redis):
        self.client = client

    async def get(self, fid: str, version: str) -> Optional[List[GuessResult]]:
        key = attempt_key(_require_fid(fid), version)
        try:
            raw = await self.client.get(key)
        except RedisError as e:
            raise StoreUnavailable(f"Cannot read quiz state: {e}")

        if raw is None:
            return None
        return _decode(key, raw)

    async def submit(
        self, fid: str, version: str, results: List[GuessResult]
    ) -> List[GuessResult]:
        key = attempt_key(_require_fid(fid), version)
        payload = results_adapter.dump_json(results, by_alias=True)

        try:
            created = await self.client.set(key, payload, nx=True)
            if created:
                logger.info("Stored quiz results key=%s", key)
                return list(results)

            existing = await self.client.get(key)
        except RedisError as e:
            raise StoreUnavailable(f"Cannot store quiz state: {e}")

        if existing is None:
            # Only possible if the key was removed out of band
            raise StoreUnavailable(f"Quiz state for {key} disappeared")

        logger.info("Replay ignored, returning stored results key=%s", key)
        return _decode(key, existing)

    async def close(self) -> None:
        await self.client.aclose()


class DatabaseResultStore(ResultStore):
    """Result store on the SQL database."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory
        self.engine = session_factory.kw["bind"]

    async def init(self) -> None:
        from ..database.session import init_db

        await init_db(self.engine)

    async def close(self) -> None:
        await self.engine.dispose()

    async def _fetch(self, session, fid: str, version: str):
        from ..database.models import QuizAttempt

        result = await session.execute(
            select(QuizAttempt).where(
                QuizAttempt.version == version,
                QuizAttempt.fid == fid
            )
        )
        return result.scalar_one_or_none()

    async def get(self, fid: str, version: str) -> Optional[List[GuessResult]]:
        fid = _require_fid(fid)
        try:
            async with self.session_factory() as session:
                attempt = await self._fetch(session, fid, version)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Cannot read quiz state: {e}")

        if attempt is None:
            return None
        return _decode(attempt_key(fid, version), attempt.results, from_json=False)

    async def submit(
        self, fid: str, version: str, results: List[GuessResult]
    ) -> List[GuessResult]:
        from ..database.models import QuizAttempt

        fid = _require_fid(fid)
        key = attempt_key(fid, version)
        payload = results_adapter.dump_python(results, by_alias=True, mode="json")

        try:
            async with self.session_factory() as session:
                session.add(QuizAttempt(version=version, fid=fid, results=payload))
                try:
                    await session.commit()
                    logger.info("Stored quiz results key=%s", key)
                    return list(results)
                except IntegrityError:
                    await session.rollback()

                existing = await self._fetch(session, fid, version)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Cannot store quiz state: {e}")

        if existing is None:
            raise StoreUnavailable(f"Quiz state for {key} disappeared")

        logger.info("Replay ignored, returning stored results key=%s", key)
        return _decode(key, existing.results, from_json=False)


def create_result_store(settings: Settings) -> Optional[ResultStore]:
    """
    Build the configured result store.

    Returns None when the store is not configured (no REDIS_URL for the
    redis backend).
    """
    backend = settings.STORE_BACKEND.lower()

    if backend == "database":
        from ..database.session import make_session_factory

        logger.info("Result store: database")
        return DatabaseResultStore(make_session_factory(settings))

    if backend != "redis":
        raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")

    if not settings.REDIS_URL:
        logger.warning("REDIS_URL not set, quiz results will not be stored")
        return None

    client = Redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=settings.REDIS_TIMEOUT_SECONDS,
        socket_connect_timeout=settings.REDIS_TIMEOUT_SECONDS,
    )
    logger.info("Result store: redis")
    return RedisResultStore(client)
