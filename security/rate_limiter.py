"""
security/rate_limiter.py
-------------------------
Per-user sliding-window rate limiting for bot commands.
"""

import time
from collections import defaultdict
from functools import wraps
from typing import Callable, Optional

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Allows at most `limit` hits per user inside any `window` seconds.

    Timestamps live in memory, so limits reset on restart.
    """

    def __init__(self, limit: int = RATE_LIMIT_MESSAGES,
                 window: float = RATE_LIMIT_WINDOW_SECONDS,
                 clock: Callable[[], float] = time.time):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: dict[int, list[float]] = defaultdict(list)

    def hit(self, user_id: int, now: Optional[float] = None) -> bool:
        """Record a hit; False when the user is over the limit (hit not recorded)."""
        now = self._clock() if now is None else now
        cutoff = now - self.window
        recent = [t for t in self._hits[user_id] if t > cutoff]
        if len(recent) >= self.limit:
            self._hits[user_id] = recent
            return False
        recent.append(now)
        self._hits[user_id] = recent
        return True


_limiter = RateLimiter()


def rate_limited(func: Callable):
    """
    Decorator that enforces rate limiting per user.

    Configuration (via .env):
        RATE_LIMIT_MESSAGES: Max messages per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not _limiter.hit(user.id):
            logger.warning(f"Rate limit hit for user {user.id}")
            await update.message.reply_text("⚠️ Too many messages. Wait a moment and try again.")
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
