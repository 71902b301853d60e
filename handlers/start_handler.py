"""
handlers/start_handler.py
--------------------------
Handles /start, /help, /myid and /logout.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.common import end_session
from repositories.user_repo import UserRepository
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
user_repo = UserRepository()

HELP_TEXT = """
🤖 *Welcome to ExpenseLens!*
Track expenses and see where your money goes 💰

*📝 Recording:*
/add <amount> <category> [YYYY-MM-DD] [note]
/edit <id> amount=<x> category=<c> desc=<text>
/delete <id>
/list [Mon] [YYYY] - your expenses, newest first
/categories - allowed categories

*📊 Dashboard:*
/view week|month|year - switch granularity
/period <label> - pick a week, month (Oct 2025) or year
/periods - list the weeks, months and years you can pick
/prev, /next - step through weeks
/insights - spending insights for the selection
/chart - category pie and trend line
/watch, /unwatch - live insights after every change

*📄 Export:*
/export\\_csv [Mon] [YYYY]
/export\\_excel [Mon] [YYYY]

/myid - show your Telegram ID
/logout - stop live updates and reset your view
"""


@authorized_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - register user and show welcome message."""
    user = update.effective_user
    user_repo.ensure_user(user.id, user.first_name)
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")

    await update.message.reply_text(
        f"Hi {user.first_name}! 👋\n"
        f"Record an expense with /add, then check /insights.\n\n"
        f"Type /help to see every command.",
    )


@authorized_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")


@authorized_only
async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show user's Telegram ID for the allow-list."""
    user = update.effective_user
    await update.message.reply_text(
        f"🆔 Your ID: `{user.id}`\n"
        f"Add it to `ALLOWED_USER_IDS` in `.env` to lock the bot down.",
        parse_mode="Markdown",
    )


@authorized_only
async def logout_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /logout - release live updates and forget the dashboard selection."""
    end_session(context)
    logger.info(f"User {update.effective_user.id} logged out.")
    await update.message.reply_text("👋 Logged out. Live updates stopped.")
