from spendly.charts.templates import (
    category_chart,
    category_figure,
    report_chart,
    report_figure,
)

__all__ = [
    "category_chart",
    "category_figure",
    "report_chart",
    "report_figure",
]
