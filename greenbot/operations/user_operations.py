"""
User Operations Module

Links Discord accounts to ledger users. Registration itself is thin: a user
row with the Discord handle as its unique username, so the user can appear on
leaderboards.
"""

import discord
from typing import Optional, Union
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from greenbot.database.models import User
from greenbot.utils.activity_exceptions import StoreFailureError
from greenbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class UserOperations:
    """Discord user -> ledger User lookups and registration."""

    def __init__(self, database):
        self.db = database
        self.logger = logger

    async def get_or_create_user(self, discord_user: Union[discord.User, discord.Member]) -> User:
        """
        Get existing User or create a new one from a Discord user.

        Idempotent. An existing user's username and display name are refreshed
        from Discord so renamed accounts keep showing correctly.

        Raises:
            StoreFailureError: If the username is taken or the database fails
        """
        try:
            async with self.db.transaction() as session:
                user = await session.scalar(
                    select(User).where(User.discord_id == discord_user.id)
                )

                if user:
                    user.username = discord_user.name
                    user.display_name = discord_user.display_name
                    self.logger.debug(f"Refreshed User {user.id} for Discord user {discord_user.id}")
                    return user

                user = User(
                    discord_id=discord_user.id,
                    username=discord_user.name,
                    display_name=discord_user.display_name
                )
                session.add(user)
                await session.flush()
                self.logger.info(f"Created new User {user.id} for Discord user {discord_user.id} ({discord_user.name})")
                return user

        except IntegrityError as e:
            self.logger.warning(f"Username '{discord_user.name}' already belongs to another user: {e}")
            raise StoreFailureError(f"Username '{discord_user.name}' is already registered")
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to get/create User for Discord user {discord_user.id}: {e}")
            raise StoreFailureError(f"Database error in get_or_create_user: {e}")

    async def get_user(self, discord_user: Union[discord.User, discord.Member]) -> Optional[User]:
        """Get an existing User for a Discord account without registering it."""
        try:
            return await self.db.get_user_by_discord_id(discord_user.id)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to get User for Discord user {discord_user.id}: {e}")
            raise StoreFailureError(f"Database error in get_user: {e}")
