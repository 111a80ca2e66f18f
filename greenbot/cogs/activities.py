import discord
from discord import app_commands
from discord.ext import commands
from typing import Optional
import logging

from greenbot.data_models.activity import ActivityFilter, ErrorKind
from greenbot.services.rate_limiter import rate_limit
from greenbot.utils.activity_exceptions import ActivityException
from greenbot.utils.activity_registry import activity_names, parse_activity_type
from greenbot.utils.date_parser import parse_date_bound, resolve_range
from greenbot.utils.embeds import build_activities_embed, build_leaderboard_embed, build_score_embed
from greenbot.utils.error_embeds import ErrorEmbeds
from greenbot.utils.validation import validate_activity_value

logger = logging.getLogger(__name__)

ACTIVITY_CHOICES = [app_commands.Choice(name=name, value=name) for name in activity_names()]
UNIT_CHOICES = [
    app_commands.Choice(name="Fahrenheit", value="F"),
    app_commands.Choice(name="Celsius", value="C"),
]

class ActivitiesCog(commands.Cog):
    """Activity logging, score and leaderboard commands"""

    def __init__(self, bot):
        self.bot = bot
        self.activity_ops = bot.activity_ops
        self.user_ops = bot.user_ops
        self.score_service = bot.score_service
        self.leaderboard_service = bot.leaderboard_service

    async def _require_user(self, interaction: discord.Interaction, member: Optional[discord.abc.User] = None):
        """Resolve the ledger user for a Discord account, replying when unregistered."""
        target = member or interaction.user
        user = await self.user_ops.get_user(target)
        if user is None:
            await interaction.followup.send(embed=ErrorEmbeds.user_not_registered(target), ephemeral=True)
        return user

    @app_commands.command(name="register", description="Start tracking your sustainability activities")
    @rate_limit("register", limit=3, window=60)
    async def register(self, interaction: discord.Interaction):
        """Create or refresh the caller's ledger user."""
        await interaction.response.defer(ephemeral=True)

        try:
            user = await self.user_ops.get_or_create_user(interaction.user)
            await interaction.followup.send(
                f"🌿 You're registered as **{user.username}**! Use `/log-activity` to start earning points.",
                ephemeral=True
            )
        except ActivityException as e:
            logger.error(f"Registration failed for {interaction.user.id}: {e}")
            await interaction.followup.send(e.user_message, ephemeral=True)

    @app_commands.command(name="log-activity", description="Log a sustainability activity")
    @app_commands.describe(
        activity="What you did",
        value="Boxes recycled, miles travelled, or today's room temperature",
        unit="Temperature unit (room temperature only, default Fahrenheit)"
    )
    @app_commands.choices(activity=ACTIVITY_CHOICES, unit=UNIT_CHOICES)
    @rate_limit("log-activity", limit=10, window=60)
    async def log_activity(
        self,
        interaction: discord.Interaction,
        activity: str,
        value: float,
        unit: Optional[str] = None
    ):
        """Validate the submission and write it to the ledger."""
        await interaction.response.defer(ephemeral=True)

        try:
            category = parse_activity_type(activity)
            normalized = validate_activity_value(category, value, unit)

            user = await self._require_user(interaction)
            if user is None:
                return

            result = await self.activity_ops.log_activity(user.id, category, normalized)
            if result.success:
                await interaction.followup.send(
                    f"✅ Activity logged successfully: **{category.value}** {normalized:g}",
                    ephemeral=True
                )
            else:
                await interaction.followup.send(embed=ErrorEmbeds.command_error(result.message), ephemeral=True)

        except ActivityException as e:
            await interaction.followup.send(e.user_message, ephemeral=True)
        except Exception as e:
            logger.error(f"Unexpected error logging activity for user {interaction.user.id}: {e}", exc_info=True)
            await interaction.followup.send(
                "❌ An unexpected error occurred. Please try again later.",
                ephemeral=True
            )

    @app_commands.command(name="activities", description="List your logged activities")
    @app_commands.describe(
        activity="Activity type to list",
        date_from="Start (YYYY-MM-DD, ISO datetime, today, week, month)",
        date_to="End (YYYY-MM-DD, ISO datetime, today)",
        unit_from="Minimum value",
        unit_to="Maximum value"
    )
    @app_commands.choices(activity=ACTIVITY_CHOICES)
    @rate_limit("activities", limit=5, window=60)
    async def activities(
        self,
        interaction: discord.Interaction,
        activity: str,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        unit_from: Optional[float] = None,
        unit_to: Optional[float] = None
    ):
        """Show entries of one category through the optional filters."""
        await interaction.response.defer(ephemeral=True)

        try:
            category = parse_activity_type(activity)
            clock = self.activity_ops.clock
            activity_filter = ActivityFilter(
                date_from=parse_date_bound(date_from, clock) if date_from else None,
                date_to=parse_date_bound(date_to, clock, upper=True) if date_to else None,
                unit_from=unit_from,
                unit_to=unit_to
            )

            user = await self._require_user(interaction)
            if user is None:
                return

            result = await self.activity_ops.get_activities(user.id, category, activity_filter)
            if not result.success:
                await interaction.followup.send(embed=ErrorEmbeds.command_error(result.message), ephemeral=True)
            elif not result.data:
                await interaction.followup.send(embed=ErrorEmbeds.no_activities(category.value), ephemeral=True)
            else:
                await interaction.followup.send(embed=build_activities_embed(category.value, result.data), ephemeral=True)

        except ActivityException as e:
            await interaction.followup.send(e.user_message, ephemeral=True)
        except Exception as e:
            logger.error(f"Error in activities command: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("An error occurred while fetching activities. Please try again later."), ephemeral=True)

    @app_commands.command(name="score", description="Show a score breakdown for a period")
    @app_commands.describe(
        date_from="Start (default: today)",
        date_to="End (default: end of today)",
        member="Whose score to show (default: you)"
    )
    @rate_limit("score", limit=5, window=60)
    async def score(
        self,
        interaction: discord.Interaction,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        member: Optional[discord.Member] = None
    ):
        """Display the per-category breakdown and total score."""
        await interaction.response.defer()

        try:
            start, end = resolve_range(date_from, date_to, self.activity_ops.clock)

            user = await self._require_user(interaction, member)
            if user is None:
                return

            result = await self.score_service.compute_breakdown(user.id, start, end)
            if not result.success:
                await interaction.followup.send(embed=ErrorEmbeds.command_error(result.message))
                return

            await interaction.followup.send(embed=build_score_embed(user.display_name or user.username, result.data, start, end))

        except ActivityException as e:
            await interaction.followup.send(e.user_message, ephemeral=True)
        except Exception as e:
            logger.error(f"Error in score command: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("An error occurred while calculating the score. Please try again later."))

    @app_commands.command(name="leaderboard", description="View the sustainability leaderboard")
    @app_commands.describe(
        date_from="Start (default: today)",
        date_to="End (default: end of today)"
    )
    @rate_limit("leaderboard", limit=5, window=60)
    async def leaderboard(
        self,
        interaction: discord.Interaction,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None
    ):
        """Display the ranked leaderboard for a period."""
        await interaction.response.defer()

        try:
            start, end = resolve_range(date_from, date_to, self.activity_ops.clock)

            result = await self.leaderboard_service.build_leaderboard(start, end)
            if not result.success:
                if result.error is ErrorKind.STORE_FAILURE:
                    await interaction.followup.send(embed=ErrorEmbeds.database_error())
                else:
                    await interaction.followup.send(embed=ErrorEmbeds.command_error(result.message))
                return

            await interaction.followup.send(embed=build_leaderboard_embed(result.data, start, end))

        except ActivityException as e:
            await interaction.followup.send(e.user_message, ephemeral=True)
        except Exception as e:
            logger.error(f"Error in leaderboard command: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("An error occurred while fetching leaderboard data. Please try again later."))

async def setup(bot):
    await bot.add_cog(ActivitiesCog(bot))
