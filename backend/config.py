"""Calculation Configuration

Thresholds and display settings for the subscription/ledger calculations.
Values come from the environment (or a local .env file).
"""

import os
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Subscription status thresholds (in days)
EXPIRING_SOON_THRESHOLD_DAYS = int(os.environ.get("EXPIRING_SOON_THRESHOLD_DAYS", "7"))
EARLY_RENEWAL_THRESHOLD_DAYS = int(os.environ.get("EARLY_RENEWAL_THRESHOLD_DAYS", "7"))

# Calendar "today" is taken in this zone when callers do not pass `now`
TIMEZONE = os.environ.get("TIMEZONE", "Asia/Kolkata")

# Display
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₹")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def get_log_level() -> int:
    """Map LOG_LEVEL to a logging level, falling back to INFO."""
    level = logging.getLevelName(LOG_LEVEL)
    if isinstance(level, int):
        return level
    logger.warning(f"Unknown LOG_LEVEL '{LOG_LEVEL}', using INFO")
    return logging.INFO
