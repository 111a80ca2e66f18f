import discord
from discord import app_commands
from discord.ext import commands
from typing import Optional
import logging

from greenbot.config import Config
from greenbot.constants import ValidationConstants
from greenbot.services.rate_limiter import rate_limit
from greenbot.utils.activity_exceptions import ActivityException
from greenbot.utils.error_embeds import ErrorEmbeds
from greenbot.views.quiz import QuizView, build_quiz_embed

logger = logging.getLogger(__name__)

class QuizCog(commands.Cog):
    """Sustainability quizzes that award QuizCompleted points"""

    def __init__(self, bot):
        self.bot = bot
        self.quiz_service = bot.quiz_service
        self.user_ops = bot.user_ops

    async def cog_unload(self):
        await self.quiz_service.close()

    @app_commands.command(name="quiz", description="Take a short sustainability quiz for points")
    @app_commands.describe(topic="Quiz topic (default: carbon footprint)")
    @rate_limit("quiz", limit=2, window=300)
    async def quiz(self, interaction: discord.Interaction, topic: Optional[str] = None):
        """Generate a quiz and present it with answer dropdowns."""
        await interaction.response.defer()

        try:
            if topic and len(topic) > ValidationConstants.MAX_TOPIC_LENGTH:
                await interaction.followup.send(
                    embed=ErrorEmbeds.invalid_input(f"Topic must be at most {ValidationConstants.MAX_TOPIC_LENGTH} characters."),
                    ephemeral=True
                )
                return

            user = await self.user_ops.get_user(interaction.user)
            if user is None:
                await interaction.followup.send(embed=ErrorEmbeds.user_not_registered(interaction.user), ephemeral=True)
                return

            result = await self.quiz_service.generate_quiz(topic or Config.QUIZ_DEFAULT_TOPIC)
            if not result.success:
                logger.warning(f"Quiz generation failed for user {interaction.user.id}: {result.message}")
                await interaction.followup.send(embed=ErrorEmbeds.quiz_unavailable(result.message), ephemeral=True)
                return

            view = QuizView(self.quiz_service, result.quiz, user.id, interaction.user.id)
            await interaction.followup.send(embed=build_quiz_embed(result.quiz), view=view)

        except ActivityException as e:
            await interaction.followup.send(e.user_message, ephemeral=True)
        except Exception as e:
            logger.error(f"Error in quiz command: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("An error occurred while creating the quiz. Please try again later."))

async def setup(bot):
    await bot.add_cog(QuizCog(bot))
