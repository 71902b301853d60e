"""
security/auth.py
-----------------
Identity gate for the Telegram bot.
The Telegram account is the user identity; an optional allow-list
restricts who may use the bot.
"""

from functools import wraps
from typing import Callable, Iterable

from telegram import Update
from telegram.ext import ContextTypes

from config import ALLOWED_USER_IDS
from utils.logger import get_logger

logger = get_logger(__name__)


def is_allowed(user_id: int, allowed: Iterable[int] = ALLOWED_USER_IDS) -> bool:
    """An empty allow-list admits everyone (dev mode)."""
    allowed = list(allowed)
    return not allowed or user_id in allowed


def authorized_only(func: Callable):
    """
    Decorator that restricts a handler to allowed users.

    Usage:
        @authorized_only
        async def my_handler(update, context):
            ...

    Updates without a user (channel posts, etc.) are ignored.
    Refused attempts are logged.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not is_allowed(user.id):
            logger.warning(
                f"Unauthorized access attempt: user_id={user.id}, "
                f"username={user.username}, name={user.first_name}"
            )
            await update.message.reply_text("⛔ Sorry, this bot is private.")
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
