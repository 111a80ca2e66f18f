"""
Centralized error embeds for consistent error handling across the bot.
"""

import discord
from typing import Optional


class ErrorEmbeds:
    """Centralized error embed factory for consistent error handling."""

    @staticmethod
    def user_not_registered(member: Optional[discord.abc.User] = None) -> discord.Embed:
        """Create embed for when a Discord user has no ledger record."""
        who = member.mention if member else "This user"
        return discord.Embed(
            title="Not Registered",
            description=f"{who} hasn't registered yet!\n\nUse `/register` to start tracking activities.",
            color=discord.Color.red()
        )

    @staticmethod
    def command_error(error: str) -> discord.Embed:
        """Create embed for general command errors."""
        return discord.Embed(
            title="Command Error",
            description=f"An error occurred: {error}\n\nPlease try again or contact an administrator.",
            color=discord.Color.red()
        )

    @staticmethod
    def invalid_input(message: str) -> discord.Embed:
        """Create embed for invalid user input."""
        return discord.Embed(
            title="Invalid Input",
            description=message,
            color=discord.Color.red()
        )

    @staticmethod
    def database_error() -> discord.Embed:
        """Create embed for database-related errors."""
        return discord.Embed(
            title="Database Error",
            description="A database error occurred. Please try again later or contact an administrator.",
            color=discord.Color.red()
        )

    @staticmethod
    def no_activities(activity: str) -> discord.Embed:
        """Create embed for an empty activity listing."""
        return discord.Embed(
            title="No Activities",
            description=f"No **{activity}** entries match those filters.",
            color=discord.Color.orange()
        )

    @staticmethod
    def quiz_unavailable(message: str) -> discord.Embed:
        """Create embed for when a quiz could not be generated."""
        return discord.Embed(
            title="Quiz Unavailable",
            description=f"{message}\n\nPlease try again later.",
            color=discord.Color.orange()
        )
