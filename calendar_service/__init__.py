# Calendar service package: quarterly CSV event loading

from .csv_parser import (
    parse_events_csv,
    parse_date,
    parse_number,
    split_list,
)
from .quarter_store import (
    QuarterStore,
    QuarterSource,
    HttpQuarterSource,
    DirectoryQuarterSource,
)
from .range_resolver import (
    MIN_SUPPORTED_DATE,
    DateWindow,
    InvalidQuarterKeyError,
    add_months,
    clamp_to_min_date,
    month_visible_range,
    parse_quarter_key,
    quarter_file_path,
    quarter_key,
    quarter_keys_in_range,
    search_visible_range,
    start_of_week,
    week_visible_range,
)
from .logging_config import (
    setup_logging,
    stop_logging,
    get_logger,
)
from .models import EventRecord

__all__ = [
    # Parsing
    "parse_events_csv",
    "parse_date",
    "parse_number",
    "split_list",
    # Store
    "QuarterStore",
    "QuarterSource",
    "HttpQuarterSource",
    "DirectoryQuarterSource",
    # Ranges
    "MIN_SUPPORTED_DATE",
    "DateWindow",
    "InvalidQuarterKeyError",
    "add_months",
    "clamp_to_min_date",
    "month_visible_range",
    "parse_quarter_key",
    "quarter_file_path",
    "quarter_key",
    "quarter_keys_in_range",
    "search_visible_range",
    "start_of_week",
    "week_visible_range",
    # Logging
    "setup_logging",
    "stop_logging",
    "get_logger",
    # Models
    "EventRecord",
]
