"""
handlers/dashboard_handler.py
------------------------------
Dashboard commands: view mode, period selection, insights, charts and
live insight updates. View state lives in `context.user_data`; every
reply is rebuilt from a fresh snapshot.
"""

from dataclasses import replace
from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from analytics.buckets import is_current_week, parse_week_label, year_key
from handlers.common import (
    dashboard_service,
    expense_service,
    feed,
    get_state,
    release_watcher,
    set_state,
    set_watcher,
)
from models.expense import VIEW_MODES
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.chart_service import ChartService
from services.dashboard_service import DashboardView, step_week
from utils.logger import get_logger

logger = get_logger(__name__)
chart_service = ChartService()


def render_insights(view: DashboardView) -> str:
    """Insights as one HTML message, one bullet per statement."""
    return "💡 <b>Insights</b>\n\n" + "\n".join(f"• {line}" for line in view.insights)


def render_selection(view: DashboardView, today: date) -> str:
    state = view.state
    label = view.period_label or "nothing selected"
    if state.view_mode == "week" and is_current_week(label, today):
        label += " (Current Week)"
    return f"🔎 View: <b>{state.view_mode}</b> - {label}"


def render_periods(view: DashboardView) -> str:
    """
    Years, months and weeks that have records, ready to pass to /period.

    Months are listed for the month-mode year; weeks for the year of the
    selected week.
    """
    if not view.years:
        return "📭 No expenses recorded yet."
    state = view.state
    monday = parse_week_label(state.selected_week)
    week_year = year_key(monday) if monday else state.selected_month_year
    weeks = view.weeks_by_year.get(week_year, [])

    lines = [
        "🗂️ <b>Periods with expenses</b>",
        "",
        f"<b>Years:</b> {', '.join(view.years)}",
        f"<b>Months in {state.selected_month_year}:</b> {', '.join(view.months_in_year) or 'none'}",
        f"<b>Weeks in {week_year}:</b>",
    ]
    lines += [f"• {week}" for week in weeks] or ["• none"]
    lines += ["", "Pick one with /period &lt;label&gt;."]
    return "\n".join(lines)


async def _reply_dashboard(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user = update.effective_user
    records = expense_service.snapshot(user.id)
    today = date.today()
    view = dashboard_service.build(records, get_state(context), today)
    set_state(context, view.state)
    await update.message.reply_text(
        render_selection(view, today) + "\n\n" + render_insights(view),
        parse_mode="HTML",
    )


@authorized_only
@rate_limited
async def view_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /view week|month|year."""
    mode = (context.args[0].lower() if context.args else "")
    if mode not in VIEW_MODES:
        await update.message.reply_text("⚠️ Usage: /view week|month|year")
        return
    state = get_state(context)
    set_state(context, replace(state, view_mode=mode))
    await _reply_dashboard(update, context)


@authorized_only
@rate_limited
async def period_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /period <label>.

    Usage:
        /period Oct 20 – Oct 26, 2025
        /period Oct 20 - Oct 26, 2025
        /period Oct 2025
        /period 2025
    """
    label = " ".join(context.args or [])
    try:
        state = get_state(context).with_period(label)
    except ValueError:
        await update.message.reply_text(
            "⚠️ Usage: /period <week label | Mon YYYY | YYYY>\n"
            "Example: /period Oct 2025\n"
            "See /periods for the labels you can use."
        )
        return
    set_state(context, state)
    await _reply_dashboard(update, context)


@authorized_only
@rate_limited
async def periods_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /periods - list the years, months and weeks that have records."""
    records = expense_service.snapshot(update.effective_user.id)
    view = dashboard_service.build(records, get_state(context))
    set_state(context, view.state)
    await update.message.reply_text(render_periods(view), parse_mode="HTML")


async def _step(update: Update, context: ContextTypes.DEFAULT_TYPE, offset: int) -> None:
    records = expense_service.snapshot(update.effective_user.id)
    state = get_state(context).resolve(records)
    set_state(context, step_week(state, records, offset))
    await _reply_dashboard(update, context)


@authorized_only
@rate_limited
async def prev_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /prev - previous week with records."""
    await _step(update, context, -1)


@authorized_only
@rate_limited
async def next_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /next - next week with records."""
    await _step(update, context, 1)


@authorized_only
@rate_limited
async def insights_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /insights - insights for the current selection."""
    await _reply_dashboard(update, context)


@authorized_only
@rate_limited
async def chart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /chart - category pie and trend line for the current selection."""
    user = update.effective_user
    records = expense_service.snapshot(user.id)
    view = dashboard_service.build(records, get_state(context))
    set_state(context, view.state)

    if not view.has_data:
        await update.message.reply_text("📭 No data for the selected period.")
        return

    pie = chart_service.category_pie(view)
    if pie:
        await update.message.reply_photo(photo=pie, caption=f"📊 Expenses by category - {view.period_label}")
    line = chart_service.trend_line(view)
    if line:
        await update.message.reply_photo(photo=line, caption=f"📈 Spending trend ({view.state.view_mode})")


@authorized_only
@rate_limited
async def watch_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /watch - push fresh insights after every change to the user's records."""
    user = update.effective_user
    chat_id = update.effective_chat.id

    def on_snapshot(snapshot) -> None:
        view = dashboard_service.build(snapshot, get_state(context))
        context.application.create_task(
            context.bot.send_message(chat_id=chat_id, text=render_insights(view), parse_mode="HTML")
        )

    set_watcher(context, feed.subscribe(user.id, on_snapshot))
    await update.message.reply_text("👀 Live insights on. Use /unwatch to stop.")


@authorized_only
async def unwatch_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /unwatch - release the live subscription."""
    if release_watcher(context):
        await update.message.reply_text("🔕 Live insights off.")
    else:
        await update.message.reply_text("ℹ️ Live insights were not on.")
