# Common utilities
from .async_utils import bounded_gather
from .config_loader import (
    PartnerConfig,
    ReconcilerConfig,
    SheetSettings,
    load_config,
    load_reconciler_config,
)
from .csv_utils import configure_csv, read_rows, write_rows
from .log_config import setup_logging
from .text_utils import collapse_newlines, slugify, strip_html
