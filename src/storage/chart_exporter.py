# src/storage/chart_exporter.py

"""Generate the interactive Plotly inventory dashboard as HTML."""

import importlib
import logging
import webbrowser
from datetime import datetime
from pathlib import Path
from types import ModuleType
from typing import Any

from src.config.locales import normalize_locale, status_label
from src.config.settings import Settings
from src.models.product import StockStatus
from src.services.metrics import InventoryMetrics

logger = logging.getLogger("sims.chart")

_CHARTS_DIR: Path = Settings.CHARTS_DIR

STATUS_COLORS: dict[StockStatus, str] = {
    StockStatus.IN_STOCK: "hsl(142, 76%, 36%)",
    StockStatus.LOW_STOCK: "hsl(38, 92%, 50%)",
    StockStatus.OUT_OF_STOCK: "hsl(0, 84%, 60%)",
}

_TITLES: dict[str, tuple[str, str, str]] = {
    "en": ("Stock Status", "Units by Category", "Value by Category"),
    "ru": ("Статус запасов", "Количество по категориям",
           "Стоимость по категориям"),
}


def _get_plotly_go() -> ModuleType:
    """Import plotly.graph_objects lazily."""
    return importlib.import_module("plotly.graph_objects")


def _get_make_subplots() -> Any:
    """Import plotly.subplots.make_subplots lazily."""
    return importlib.import_module("plotly.subplots").make_subplots


def _ensure_charts_dir() -> Path:
    """Create charts directory if it doesn't exist."""
    _CHARTS_DIR.mkdir(parents=True, exist_ok=True)
    return _CHARTS_DIR


def shorten_label(name: str) -> str:
    """Trim long category names for axis labels."""
    limit = Settings.CHART_LABEL_MAX_LENGTH
    return name[:limit] + "..." if len(name) > limit else name


def build_dashboard(metrics: InventoryMetrics, locale: str) -> Any:
    """Build the three-panel dashboard figure."""
    go = _get_plotly_go()
    make_subplots = _get_make_subplots()
    locale = normalize_locale(locale)
    titles = _TITLES[locale]

    fig: Any = make_subplots(
        rows=1,
        cols=3,
        specs=[[{"type": "domain"}, {"type": "xy"}, {"type": "xy"}]],
        subplot_titles=titles,
    )

    visible = metrics.visible_status_counts()
    fig.add_trace(
        go.Pie(
            labels=[status_label(s.value, locale) for s in visible],
            values=list(visible.values()),
            marker={"colors": [STATUS_COLORS[s] for s in visible]},
            hole=0.4,
            name=titles[0],
        ),
        row=1, col=1,
    )

    by_quantity = metrics.top_categories_by_quantity()
    fig.add_trace(
        go.Bar(
            x=[name for name, _ in by_quantity],
            y=[qty for _, qty in by_quantity],
            name=titles[1],
        ),
        row=1, col=2,
    )

    by_value = metrics.top_categories_by_value()
    fig.add_trace(
        go.Bar(
            x=[shorten_label(name) for name, _ in by_value],
            y=[float(value) for _, value in by_value],
            customdata=[name for name, _ in by_value],
            hovertemplate=(
                "%{customdata}<br>$%{y:,.2f}<extra></extra>"
            ),
            name=titles[2],
        ),
        row=1, col=3,
    )

    fig.update_layout(
        title=f"SIMS: {metrics.total_products} products, "
        f"${metrics.total_value_display:,}",
        showlegend=False,
        template="plotly_white",
    )
    return fig


def export_dashboard(
    metrics: InventoryMetrics,
    locale: str = Settings.DEFAULT_LOCALE,
    open_browser: bool = False,
) -> Path | None:
    """Write the dashboard HTML; ``None`` when there is nothing to plot."""
    if metrics.total_products == 0:
        logger.warning("No products to chart")
        return None

    fig = build_dashboard(metrics, locale)

    charts_dir = _ensure_charts_dir()
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = charts_dir / f"dashboard_{stamp}.html"
    fig.write_html(str(filepath))
    logger.info("Dashboard chart saved to %s", filepath)

    if open_browser:
        webbrowser.open(filepath.as_uri())

    return filepath
