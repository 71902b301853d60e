"""
main.py
-------
Entry point for the ExpenseLens Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure and start the Telegram bot with all handlers.
    - Schedule the weekly insights push.
"""

from datetime import date, time as dt_time, timedelta

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from analytics.buckets import week_label
from config import ALLOWED_USER_IDS, TELEGRAM_BOT_TOKEN
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from handlers.common import dashboard_service, expense_service
from handlers.dashboard_handler import (
    chart_command,
    insights_command,
    next_command,
    period_command,
    periods_command,
    prev_command,
    render_insights,
    unwatch_command,
    view_command,
    watch_command,
)
from handlers.expense_handler import (
    add_command,
    categories_command,
    delete_command,
    edit_command,
    list_command,
)
from handlers.export_handler import export_csv_command, export_excel_command
from handlers.start_handler import help_command, logout_command, myid_command, start_command
from services.dashboard_service import DashboardState
from utils.logger import get_logger

logger = get_logger(__name__)


async def send_weekly_insights(context) -> None:
    """
    Scheduled job: send last week's insights to every allowed user.
    Runs every Monday at 09:00.
    """
    last_week = week_label(date.today() - timedelta(days=7))
    state = DashboardState(view_mode="week", selected_week=last_week)

    for user_id in ALLOWED_USER_IDS:
        try:
            records = expense_service.snapshot(user_id)
            view = dashboard_service.build(records, state)
            await context.bot.send_message(
                chat_id=user_id,
                text=f"📬 <b>Weekly report</b>\n\n{render_insights(view)}",
                parse_mode="HTML",
            )
            logger.info(f"Sent weekly insights to user {user_id}")
        except Exception as e:
            logger.error(f"Failed to send weekly insights to {user_id}: {e}")


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("start", "🚀 Start"),
        BotCommand("help", "📖 Help"),
        BotCommand("add", "➕ Add an expense"),
        BotCommand("edit", "✏️ Edit an expense"),
        BotCommand("delete", "🗑️ Delete an expense"),
        BotCommand("list", "🧾 List expenses"),
        BotCommand("categories", "🏷️ Categories"),
        BotCommand("view", "🔎 week / month / year"),
        BotCommand("period", "📅 Pick a period"),
        BotCommand("periods", "🗂️ Periods with expenses"),
        BotCommand("prev", "⬅️ Previous week"),
        BotCommand("next", "➡️ Next week"),
        BotCommand("insights", "💡 Insights"),
        BotCommand("chart", "📊 Charts"),
        BotCommand("watch", "👀 Live insights on"),
        BotCommand("unwatch", "🔕 Live insights off"),
        BotCommand("export_csv", "📄 Export CSV"),
        BotCommand("export_excel", "📊 Export Excel"),
        BotCommand("myid", "🆔 Your ID"),
        BotCommand("logout", "👋 Log out"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()

    # ── 3. Register command handlers ──────────────────────
    handlers = {
        "start": start_command,
        "help": help_command,
        "myid": myid_command,
        "logout": logout_command,
        "add": add_command,
        "edit": edit_command,
        "delete": delete_command,
        "list": list_command,
        "categories": categories_command,
        "view": view_command,
        "period": period_command,
        "periods": periods_command,
        "prev": prev_command,
        "next": next_command,
        "insights": insights_command,
        "chart": chart_command,
        "watch": watch_command,
        "unwatch": unwatch_command,
        "export_csv": export_csv_command,
        "export_excel": export_excel_command,
    }
    for name, callback in handlers.items():
        app.add_handler(CommandHandler(name, callback))

    # ── 4. Schedule jobs ──────────────────────────────────
    job_queue = app.job_queue
    if job_queue:
        job_queue.run_daily(
            send_weekly_insights,
            time=dt_time(hour=9, minute=0),
            days=(1,),  # Monday
            name="weekly_insights",
        )
        logger.info("Scheduled weekly insights (Monday 09:00)")

    # ── 5. Start polling ──────────────────────────────────
    logger.info("ExpenseLens is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 6. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("ExpenseLens stopped.")


if __name__ == "__main__":
    main()
