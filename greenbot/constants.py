"""
Bot-wide constants for the GreenBot sustainability tracker.

Keeps the scoring numbers and UI values used across cogs and services in one place.
"""

class ScoringConstants:
    """Constants related to activity scoring."""

    # Comfort setpoint for room temperature, in Fahrenheit.
    # The temperature reward peaks here and falls to zero at +/- this many degrees.
    COMFORT_SETPOINT_F = 72.0

    # Celsius readings are converted before they reach the ledger
    CELSIUS_SCALE = 9 / 5
    CELSIUS_OFFSET = 32

class ValidationConstants:
    """Limits enforced by the command layer before calling the ledger."""

    MAX_ACTIVITY_VALUE = 1_000_000
    MAX_TOPIC_LENGTH = 100

    # A quiz view holds one select per question (rows 0-3) plus the submit row,
    # and a select holds at most 25 options
    MAX_QUIZ_QUESTIONS = 4
    MAX_QUIZ_OPTIONS = 25

class UIConstants:
    """Constants for Discord UI elements."""

    # Embed colors
    DEFAULT_EMBED_COLOR = 0x3498db  # Blue
    GOLD_RANK_COLOR = 0xffd700     # Gold for the #1 ranked user
    ERROR_COLOR = 0xe74c3c         # Red for errors
    SUCCESS_COLOR = 0x2ecc71       # Green for success

    # Discord embed descriptions cap at 4096 characters
    LEADERBOARD_DISPLAY_LIMIT = 25
    ACTIVITY_DISPLAY_LIMIT = 20

    LEAF_EMOJI = "🌿"
    TROPHY_EMOJI = "🏆"
    QUIZ_EMOJI = "🧠"
