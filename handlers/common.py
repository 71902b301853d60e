"""
handlers/common.py
------------------
Service instances and per-user view state shared by all handlers.
"""

from telegram.ext import ContextTypes

from services.dashboard_service import DashboardService, DashboardState
from services.expense_service import ExpenseService
from services.live_feed import ExpenseFeed

feed = ExpenseFeed()
expense_service = ExpenseService(feed=feed)
dashboard_service = DashboardService()

_STATE_KEY = "dashboard_state"
_UNWATCH_KEY = "unwatch"


def get_state(context: ContextTypes.DEFAULT_TYPE) -> DashboardState:
    """The user's dashboard selection (defaults on first use)."""
    return context.user_data.get(_STATE_KEY) or DashboardState()


def set_state(context: ContextTypes.DEFAULT_TYPE, state: DashboardState) -> None:
    context.user_data[_STATE_KEY] = state


def set_watcher(context: ContextTypes.DEFAULT_TYPE, unsubscribe) -> None:
    """Remember a live subscription, releasing any previous one first."""
    release_watcher(context)
    context.user_data[_UNWATCH_KEY] = unsubscribe


def release_watcher(context: ContextTypes.DEFAULT_TYPE) -> bool:
    """Release the user's live subscription. Returns True if one was active."""
    unsubscribe = context.user_data.pop(_UNWATCH_KEY, None)
    if unsubscribe is None:
        return False
    unsubscribe()
    return True


def end_session(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Drop everything the bot keeps for the user between messages."""
    release_watcher(context)
    context.user_data.pop(_STATE_KEY, None)
