"""Classification strategies and the classifiers behind them."""

from .classifiers import (
    ARCHIVE_EXTENSIONS,
    DOCUMENT_EXTENSIONS,
    EXECUTABLE_EXTENSIONS,
    build_strategy,
    classify,
    classify_by_content,
    classify_by_date,
    classify_by_extension,
    classify_by_recency,
    classify_by_size,
    normalize_strategy_name,
    week_of_month,
)
from .models import (
    STRATEGY_NAMES,
    ContentStrategy,
    DateStrategy,
    ExtensionStrategy,
    RecencyStrategy,
    SizeStrategy,
    Strategy,
)

__all__ = [
    "ARCHIVE_EXTENSIONS",
    "DOCUMENT_EXTENSIONS",
    "EXECUTABLE_EXTENSIONS",
    "STRATEGY_NAMES",
    "ContentStrategy",
    "DateStrategy",
    "ExtensionStrategy",
    "RecencyStrategy",
    "SizeStrategy",
    "Strategy",
    "build_strategy",
    "classify",
    "classify_by_content",
    "classify_by_date",
    "classify_by_extension",
    "classify_by_recency",
    "classify_by_size",
    "normalize_strategy_name",
    "week_of_month",
]
