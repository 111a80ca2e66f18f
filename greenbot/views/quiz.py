"""
Quiz view components

Interactive Discord UI for answering a generated quiz: one dropdown per
question and a submit button that scores the answers and logs the points.
"""

import discord
from discord.ui import View, Button, Select
from typing import List, Optional
import logging

from greenbot.constants import UIConstants
from greenbot.data_models.quiz import Quiz, QuizQuestion

logger = logging.getLogger(__name__)

# Discord caps select option labels at 100 characters
_LABEL_LIMIT = 100


class AnswerSelect(Select):
    """Dropdown holding the options of one question."""

    def __init__(self, index: int, question: QuizQuestion):
        options = [
            discord.SelectOption(label=option[:_LABEL_LIMIT], value=str(position))
            for position, option in enumerate(question.options)
        ]
        super().__init__(
            placeholder=f"Question {index + 1}",
            options=options,
            row=index
        )
        self.index = index
        self.question = question

    async def callback(self, interaction: discord.Interaction):
        """Remember the chosen option."""
        view: QuizView = self.view
        view.answers[self.index] = self.question.options[int(self.values[0])]
        await interaction.response.defer()


class QuizView(View):
    """Quiz answering view owned by the user who started it."""

    def __init__(self, quiz_service, quiz: Quiz, user_id: int, owner_discord_id: int, *, timeout: int = 600):
        super().__init__(timeout=timeout)
        self.quiz_service = quiz_service
        self.quiz = quiz
        self.user_id = user_id
        self.owner_discord_id = owner_discord_id
        self.answers: List[Optional[str]] = [None] * len(quiz.questions)

        for index, question in enumerate(quiz.questions):
            self.add_item(AnswerSelect(index, question))

        submit_button = Button(
            label="Submit Answers",
            style=discord.ButtonStyle.success,
            row=4
        )
        submit_button.callback = self.submit
        self.add_item(submit_button)

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.owner_discord_id:
            await interaction.response.send_message("This quiz belongs to someone else. Start your own with `/quiz`!", ephemeral=True)
            return False
        return True

    async def submit(self, interaction: discord.Interaction):
        """Score the answers, log the points and reveal the correct answers."""
        await interaction.response.defer()
        result = await self.quiz_service.complete_quiz(self.user_id, self.quiz, self.answers)

        if not result.success:
            logger.error(f"Quiz {self.quiz.quiz_id} could not be logged: {result.message}")
            await interaction.followup.send(f"❌ Your quiz result could not be saved: {result.message}", ephemeral=True)
            return

        self.stop()
        await interaction.followup.edit_message(
            message_id=interaction.message.id,
            embed=build_quiz_result_embed(self.quiz, self.answers, result.data),
            view=None
        )


def build_quiz_embed(quiz: Quiz) -> discord.Embed:
    """Build the question embed shown above the dropdowns."""
    embed = discord.Embed(
        title=f"{UIConstants.QUIZ_EMOJI} Quiz: {quiz.topic}",
        color=UIConstants.DEFAULT_EMBED_COLOR
    )
    for index, question in enumerate(quiz.questions):
        options = "\n".join(f"• {option}" for option in question.options)
        embed.add_field(name=f"{index + 1}. {question.question}"[:256], value=options[:1024] or "-", inline=False)
    embed.set_footer(text="Pick one answer per question, then press Submit.")
    return embed


def build_quiz_result_embed(quiz: Quiz, answers: List[Optional[str]], points: int) -> discord.Embed:
    """Build the result embed with per-question feedback."""
    embed = discord.Embed(
        title=f"{UIConstants.QUIZ_EMOJI} Quiz Results: {quiz.topic}",
        description=f"You earned **{points}** points!",
        color=UIConstants.SUCCESS_COLOR if points else UIConstants.ERROR_COLOR
    )
    for index, (question, answer) in enumerate(zip(quiz.questions, answers)):
        mark = "✅" if answer == question.answer else "❌"
        embed.add_field(
            name=f"{mark} {index + 1}. {question.question}"[:256],
            value=f"Your answer: {answer or '-'}\nCorrect: {question.answer}"[:1024],
            inline=False
        )
    return embed
