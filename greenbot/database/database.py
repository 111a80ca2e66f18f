import asyncio
from collections import defaultdict
from typing import Dict, Optional, List
from redis.exceptions import LockError, LockNotOwnedError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy import select
from contextlib import asynccontextmanager

from greenbot.config import Config
from greenbot.database.models import Base, User
from greenbot.utils.logger import setup_logger
from greenbot.utils.redis_utils import RedisUtils

# Seconds a distributed user lock may be held before Redis expires it
USER_LOCK_TIMEOUT = 10

class Database:
    """Durable per-user record store for users and their activity entries."""

    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url or Config.DATABASE_URL
        self.engine = None
        self.async_session = None
        self.redis_client = None
        # In-process locks live only while some coroutine holds or awaits them
        self._user_locks: Dict[int, asyncio.Lock] = {}
        self._user_lock_users: Dict[int, int] = defaultdict(int)

    @property
    def session_factory(self) -> async_sessionmaker:
        return self.async_session

    async def initialize(self):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")

        # Convert sqlite URL to async if needed
        database_url = self.database_url
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')

        self.engine = create_async_engine(
            database_url,
            echo=Config.DEBUG,
            future=True
        )

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.redis_client = await RedisUtils.create_redis_client()
        if self.redis_client is None:
            self.logger.info("Using in-process user write locks")

        self.logger.info("Database initialized successfully")

    @asynccontextmanager
    async def get_session(self):
        """Get a database session"""
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    @asynccontextmanager
    async def transaction(self):
        """
        Create a transaction boundary for atomic operations.

        All operations within the context are committed together on success,
        or rolled back together on failure. Exceptions must be allowed to
        propagate out of the context for rollback to occur.
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    @asynccontextmanager
    async def user_write_lock(self, user_id: int):
        """
        Serialize read-modify-write sequences against one user's record.

        Uses a Redis lock when Redis is configured so several bot processes
        sharing the database stay consistent, otherwise an in-process lock.
        """
        if self.redis_client is not None:
            lock = self.redis_client.lock(f"user_write_lock:{user_id}", timeout=USER_LOCK_TIMEOUT)
            if not await lock.acquire():
                raise LockError(f"Could not acquire write lock for user {user_id}")
            try:
                yield
            finally:
                try:
                    await lock.release()
                except LockNotOwnedError:
                    # Lock expired while held; the work inside already finished
                    self.logger.warning(f"Write lock for user {user_id} expired before release")
            return

        lock = self._user_locks.get(user_id)
        if lock is None:
            lock = self._user_locks[user_id] = asyncio.Lock()
        self._user_lock_users[user_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._user_lock_users[user_id] -= 1
            if not self._user_lock_users[user_id]:
                del self._user_lock_users[user_id]
                del self._user_locks[user_id]

    async def close(self):
        """Close the database connection"""
        if self.redis_client is not None:
            await self.redis_client.aclose()
            self.redis_client = None
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Database connection closed")

    # User operations
    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by primary key, or None"""
        async with self.get_session() as session:
            return await session.get(User, user_id)

    async def get_user_by_discord_id(self, discord_id: int) -> Optional[User]:
        """Get a user by their Discord ID"""
        async with self.get_session() as session:
            result = await session.execute(
                select(User).where(User.discord_id == discord_id)
            )
            return result.scalar_one_or_none()

    async def create_user(self, username: Optional[str], discord_id: Optional[int] = None,
                          display_name: Optional[str] = None) -> User:
        """Create a new user"""
        async with self.transaction() as session:
            user = User(
                discord_id=discord_id,
                username=username,
                display_name=display_name or username
            )
            session.add(user)
            await session.flush()
            await session.refresh(user)
            return user

    async def get_all_users(self) -> List[User]:
        """Get every user in insertion order"""
        async with self.get_session() as session:
            result = await session.execute(select(User).order_by(User.id))
            return list(result.scalars().all())
