"""
handlers/expense_handler.py
----------------------------
Handles recording, editing, deleting and listing expenses.
Delegates all logic to ExpenseService.
"""

import html
import re
from typing import Optional

from telegram import Update
from telegram.ext import ContextTypes

from analytics.dates import normalize_date
from handlers.common import expense_service
from models.expense import CATEGORIES
from repositories.user_repo import UserRepository
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.expense_service import ExpenseValidationError
from utils.logger import get_logger

logger = get_logger(__name__)
user_repo = UserRepository()

_EDIT_FIELD_RE = re.compile(
    r"(?P<key>amount|category|desc)\s*=\s*(?P<value>.+?)(?=\s+(?:amount|category|desc)\s*=|$)",
    re.IGNORECASE,
)

ADD_USAGE = (
    "⚠️ Usage: /add <amount> <category> [YYYY-MM-DD] [note]\n"
    "Example: /add 12.50 Food 2025-10-21 lunch"
)
EDIT_USAGE = (
    "✏️ Usage: /edit <id> amount=<x> category=<c> desc=<text>\n"
    "Examples:\n"
    "• /edit 5 amount=75\n"
    "• /edit 3 category=Transport desc=taxi home"
)


def parse_add_args(args: list[str]) -> Optional[dict]:
    """
    Split /add arguments into amount, category, optional date and note.

    The third token is taken as the date only when it parses as one;
    otherwise it starts the note.
    """
    if len(args) < 2:
        return None
    rest = args[2:]
    on = None
    if rest and normalize_date(rest[0]) is not None:
        on, rest = rest[0], rest[1:]
    return {
        "amount": args[0],
        "category": args[1],
        "on": on,
        "description": " ".join(rest) or None,
    }


def parse_edit_args(text: str) -> dict:
    """Pull amount=/category=/desc= pairs out of the /edit text."""
    fields = {}
    for match in _EDIT_FIELD_RE.finditer(text):
        key = match.group("key").lower()
        fields["description" if key == "desc" else key] = match.group("value").strip()
    return fields


@authorized_only
@rate_limited
async def add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /add <amount> <category> [date] [note]."""
    user = update.effective_user
    parsed = parse_add_args(context.args or [])
    if parsed is None:
        await update.message.reply_text(ADD_USAGE)
        return

    user_repo.ensure_user(user.id, user.first_name)
    try:
        saved = expense_service.add_expense(user.id, **parsed)
    except ExpenseValidationError as e:
        logger.warning(f"Rejected /add from user {user.id}: {e}")
        await update.message.reply_text(f"⚠️ {e}")
        return

    msg = (
        f"💸 Expense recorded:\n"
        f"  📂 Category: {saved.category}\n"
        f"  💶 Amount: {saved.amount:.2f}\n"
        f"  📅 Date: {saved.date}\n"
    )
    if saved.description:
        msg += f"  📝 Note: {saved.description}\n"
    msg += f"  🔖 ID: #{saved.id}"
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def edit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /edit <id> amount=<x> category=<c> desc=<text>."""
    user = update.effective_user
    args = context.args or []
    if not args:
        await update.message.reply_text(EDIT_USAGE)
        return

    try:
        expense_id = int(args[0])
    except ValueError:
        await update.message.reply_text("⚠️ The first argument of /edit must be the expense ID.")
        return

    fields = parse_edit_args(" ".join(args[1:]))
    try:
        updated = expense_service.edit_expense(expense_id, user.id, **fields)
    except ExpenseValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return

    if updated:
        changes = "\n".join(f"  • {k}: {v}" for k, v in fields.items())
        await update.message.reply_text(f"✏️ Updated #{expense_id}:\n{changes}")
    else:
        await update.message.reply_text(f"⚠️ Expense #{expense_id} not found.")


@authorized_only
@rate_limited
async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete <id>."""
    user = update.effective_user
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /delete <id>\nExample: /delete 5")
        return

    try:
        expense_id = int(context.args[0])
    except ValueError:
        await update.message.reply_text("⚠️ The expense ID must be a whole number.")
        return

    if expense_service.delete_expense(expense_id, user.id):
        await update.message.reply_text(f"🗑️ Deleted expense #{expense_id}.")
    else:
        await update.message.reply_text(f"⚠️ Expense #{expense_id} not found.")


def parse_list_filters(args: list[str]) -> tuple[Optional[str], Optional[str]]:
    """Optional 'Mon' and 'YYYY' filters in any order."""
    month, year = None, None
    for arg in args:
        if arg.isdigit() and len(arg) == 4:
            year = arg
        elif len(arg) == 3 and arg.isalpha():
            month = arg.capitalize()
    return month, year


@authorized_only
@rate_limited
async def list_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /list [Mon] [YYYY] - the expense list, newest first.

    Usage:
        /list
        /list Oct
        /list Oct 2025
    """
    user = update.effective_user
    month, year = parse_list_filters(context.args or [])
    records = expense_service.list_expenses(user.id, month=month, year=year)
    if not records:
        await update.message.reply_text("📭 No expenses found.")
        return

    lines = [f"🧾 <b>My Expenses</b> ({len(records)})\n"]
    for e in records[:50]:
        desc = f" - {html.escape(e.description)}" if e.description else ""
        lines.append(
            f"#{e.id} | {e.date} | {html.escape(e.category or 'Uncategorized')} | {float(e.amount):.2f}{desc}"
        )
    if len(records) > 50:
        lines.append(f"\n… {len(records) - 50} more. Narrow it down with /list Mon YYYY.")
    await update.message.reply_text("\n".join(lines), parse_mode="HTML")


@authorized_only
async def categories_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /categories - show the allowed category names."""
    await update.message.reply_text("🏷️ Categories: " + ", ".join(CATEGORIES))
