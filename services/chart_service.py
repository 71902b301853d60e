"""
services/chart_service.py
--------------------------
Renders dashboard charts.
Uses matplotlib to draw the category pie and the spending trend line
from a DashboardView and returns them as PNG BytesIO buffers.
"""

import io

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server use
import matplotlib.pyplot as plt

from config import DEFAULT_CURRENCY
from services.dashboard_service import DashboardView
from utils.logger import get_logger

logger = get_logger(__name__)

plt.rcParams["font.family"] = "DejaVu Sans"
plt.rcParams["figure.facecolor"] = "#0F0E47"
plt.rcParams["text.color"] = "#EAEAEA"
plt.rcParams["axes.facecolor"] = "#0F0E47"

_PALETTE = [
    "#FF6384", "#36A2EB", "#FFCE56", "#4BC0C0",
    "#9966FF", "#FF9F40", "#C9CBCF", "#8AC926",
    "#F15BB5", "#00BBF9",
]
_LINE_COLOR = "#4F46E5"
_X_TITLES = {"week": "Day", "month": "Month", "year": "Year"}


def _to_png(fig) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=150, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    buf.seek(0)
    plt.close(fig)
    return buf


class ChartService:
    """Generates visual charts for a dashboard view."""

    def __init__(self, currency: str = DEFAULT_CURRENCY):
        self.currency = currency

    def category_pie(self, view: DashboardView) -> io.BytesIO | None:
        """
        Doughnut chart of spending per category for the selected period.

        Returns:
            BytesIO buffer with PNG image, or None if nothing was spent.
        """
        items = [(name, value) for name, value in view.pie_totals.items() if value > 0]
        if not items:
            return None

        labels = [name for name, _ in items]
        values = [value for _, value in items]
        total = sum(values)

        fig, ax = plt.subplots(figsize=(8, 6))
        wedges, _, autotexts = ax.pie(
            values,
            labels=None,
            autopct=lambda pct: f"{pct:.1f}%",
            colors=[_PALETTE[i % len(_PALETTE)] for i in range(len(values))],
            startangle=90,
            pctdistance=0.82,
            wedgeprops=dict(width=0.5, edgecolor="#0F0E47", linewidth=2),
        )
        for autotext in autotexts:
            autotext.set_color("white")
            autotext.set_fontsize(10)
            autotext.set_fontweight("bold")

        ax.legend(
            wedges,
            [f"{label}: {self.currency} {value:.2f}" for label, value in zip(labels, values)],
            loc="center left",
            bbox_to_anchor=(1, 0, 0.5, 1),
            fontsize=10,
            frameon=False,
        )
        ax.set_title(
            f"Spending by category - {view.period_label}\n"
            f"Total: {self.currency} {total:.2f}",
            fontsize=14, fontweight="bold", pad=20,
        )
        plt.tight_layout()

        logger.info(f"Generated category pie for '{view.period_label}'")
        return _to_png(fig)

    def trend_line(self, view: DashboardView) -> io.BytesIO | None:
        """
        Line chart of spending per bucket in axis order.

        Returns:
            BytesIO buffer with PNG image, or None if there are no points.
        """
        keys, values = view.line_keys, view.line_values
        if not keys or not any(values):
            return None

        mode = view.state.view_mode
        positions = range(len(keys))

        fig, ax = plt.subplots(figsize=(9, 5))
        ax.plot(positions, values, color=_LINE_COLOR, marker="o", linewidth=2, zorder=3)
        if len(keys) > 1:
            ax.fill_between(positions, values, color=_LINE_COLOR, alpha=0.2)

        ax.set_xticks(list(positions))
        ax.set_xticklabels(keys, fontsize=9, color="#EAEAEA",
                           rotation=45 if mode == "week" else 0)
        ax.set_xlabel(_X_TITLES.get(mode, ""), fontsize=11, color="#EAEAEA")
        ax.set_ylabel(f"Amount ({self.currency})", fontsize=11, color="#EAEAEA")
        ax.set_title(
            f"Spending trend ({mode})\nTotal: {self.currency} {sum(values):.2f}",
            fontsize=13, fontweight="bold", pad=15,
        )

        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        ax.spines["left"].set_color("#444")
        ax.spines["bottom"].set_color("#444")
        ax.tick_params(colors="#EAEAEA")
        ax.grid(axis="y", alpha=0.2, color="#888")
        ax.set_axisbelow(True)
        plt.tight_layout()

        logger.info(f"Generated {mode} trend line with {len(keys)} points")
        return _to_png(fig)
