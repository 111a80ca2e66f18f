"""
Shared embed utilities for the GreenBot Discord bot.

Provides reusable embed building functions for activity listings, score
breakdowns and leaderboards.
"""

import discord
from datetime import datetime
from typing import List

from greenbot.constants import UIConstants
from greenbot.data_models.activity import ActivityRecord
from greenbot.data_models.leaderboard import LeaderboardEntry, ScoreBreakdown
from greenbot.utils.date_parser import format_range
from greenbot.utils.scoring_strategies import ScoringStrategyFactory


def build_leaderboard_embed(entries: List[LeaderboardEntry], start: datetime, end: datetime) -> discord.Embed:
    """
    Build the leaderboard embed as a compact monospace table.

    Only the first LEADERBOARD_DISPLAY_LIMIT rows are shown; ranks come from
    the full board.
    """
    embed = discord.Embed(
        title=f"{UIConstants.TROPHY_EMOJI} Sustainability Leaderboard",
        description=f"Period: **{format_range(start, end)}**",
        color=UIConstants.GOLD_RANK_COLOR
    )

    if not entries:
        embed.description += "\n\nNo registered users yet."
        return embed

    lines = ["```", f"{'#':<4} {'User':<20} {'Score':>8}", "-" * 34]
    for entry in entries[:UIConstants.LEADERBOARD_DISPLAY_LIMIT]:
        lines.append(f"{entry.rank:<4} {entry.username[:20]:<20} {entry.score:>8.1f}")
    lines.append("```")
    embed.description += "\n" + "\n".join(lines)

    embed.set_footer(text=f"Total Users: {len(entries)}")
    return embed


def build_score_embed(display_name: str, breakdown: ScoreBreakdown, start: datetime, end: datetime) -> discord.Embed:
    """Build a per-category score breakdown embed."""
    embed = discord.Embed(
        title=f"{UIConstants.LEAF_EMOJI} Score: {display_name}",
        description=f"Period: **{format_range(start, end)}**\nTotal: **{breakdown.score:,.1f}**",
        color=UIConstants.SUCCESS_COLOR
    )

    for category, total in breakdown.totals.items():
        strategy = ScoringStrategyFactory.for_category(category)
        embed.add_field(
            name=category.value,
            value=f"Logged: {total:g}\nPoints: {breakdown.points[category]:g}\n*{strategy.get_strategy_name()}*",
            inline=True
        )

    return embed


def build_activities_embed(activity: str, records: List[ActivityRecord]) -> discord.Embed:
    """Build a listing of activity entries, newest last."""
    shown = records[-UIConstants.ACTIVITY_DISPLAY_LIMIT:]
    lines = [
        f"`{record.recorded_at.strftime('%Y-%m-%d %H:%M')}` - **{record.value:g}**"
        for record in shown
    ]

    embed = discord.Embed(
        title=f"{activity} Activities",
        description="\n".join(lines),
        color=UIConstants.DEFAULT_EMBED_COLOR
    )
    total = sum(record.value for record in records)
    footer = f"{len(records)} entries | Total: {total:g}"
    if len(records) > len(shown):
        footer += f" | Showing last {len(shown)}"
    embed.set_footer(text=footer)
    return embed
