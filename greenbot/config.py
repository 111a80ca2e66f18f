import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Bot configuration settings"""

    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    DISCORD_GUILD_ID = int(os.getenv('DISCORD_GUILD_ID', 0))
    DISCORD_GUILD_IDS = os.getenv('DISCORD_GUILD_IDS', '')  # Comma-separated for multi-guild support
    OWNER_DISCORD_ID = int(os.getenv('OWNER_DISCORD_ID', 0))

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///greenbot.db')
    REDIS_URL = os.getenv('REDIS_URL', '')  # Enables distributed per-user write locks

    # Bot settings
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')  # Empty disables the log file

    # Calendar days for the once-per-day temperature reading use this zone.
    # Empty means the server's local time.
    TIMEZONE = os.getenv('TIMEZONE', '')

    # Quiz generation (OpenRouter-compatible chat completions endpoint)
    OPENROUTER_URL = os.getenv('OPENROUTER_URL', '')
    OPENROUTER_API_KEY = os.getenv('OPENROUTER_API_KEY', '')
    QUIZ_MODEL = os.getenv('QUIZ_MODEL', 'x-ai/grok-4.1-fast:free')
    QUIZ_TIMEOUT = int(os.getenv('QUIZ_TIMEOUT', 30))
    QUIZ_QUESTION_COUNT = 3
    QUIZ_POINTS_PER_CORRECT = 10
    QUIZ_DEFAULT_TOPIC = "carbon footprint"

    @classmethod
    def get_guild_ids(cls):
        """Get list of guild IDs for command syncing"""
        if cls.DISCORD_GUILD_IDS:
            # Multi-guild support: comma-separated IDs
            try:
                return [int(guild_id.strip()) for guild_id in cls.DISCORD_GUILD_IDS.split(',') if guild_id.strip()]
            except ValueError:
                raise ValueError("DISCORD_GUILD_IDS must be comma-separated integers")
        elif cls.DISCORD_GUILD_ID:
            return [cls.DISCORD_GUILD_ID]
        else:
            # Global sync
            return []

    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not cls.OWNER_DISCORD_ID:
            raise ValueError("OWNER_DISCORD_ID is required")
