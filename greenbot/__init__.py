"""GreenBot: sustainability activity tracking, scoring and leaderboards for Discord."""

__version__ = "1.0.0"
