"""
handlers/export_handler.py
---------------------------
Handles data export commands (CSV, Excel).
Delegates to ExportService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.common import expense_service
from handlers.expense_handler import parse_list_filters
from services.export_service import ExportService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()


def export_filename(month, year, extension: str) -> str:
    parts = ["expenses"] + [p for p in (year, month) if p]
    return "_".join(parts) + f".{extension}"


async def _send_export(update: Update, context: ContextTypes.DEFAULT_TYPE, kind: str) -> None:
    user = update.effective_user
    month, year = parse_list_filters(context.args or [])
    records = expense_service.list_expenses(user.id, month=month, year=year)
    if not records:
        await update.message.reply_text("📭 Nothing to export for that filter.")
        return

    await update.message.reply_text(f"📄 Preparing {kind.upper()} file...")
    try:
        if kind == "csv":
            buffer = export_service.export_csv(records)
            filename = export_filename(month, year, "csv")
        else:
            buffer = export_service.export_excel(records)
            filename = export_filename(month, year, "xlsx")
        await update.message.reply_document(
            document=buffer,
            filename=filename,
            caption=f"📊 {len(records)} expenses",
        )
    except Exception as e:
        logger.error(f"{kind.upper()} export failed for user {user.id}: {e}")
        await update.message.reply_text("❌ Export failed. Please try again.")


@authorized_only
@rate_limited
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_csv [Mon] [YYYY] - send the expense list as CSV.
    Example: /export_csv Oct 2025
    """
    await _send_export(update, context, "csv")


@authorized_only
@rate_limited
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_excel [Mon] [YYYY] - send the expense list as Excel.
    Example: /export_excel 2025
    """
    await _send_export(update, context, "excel")
