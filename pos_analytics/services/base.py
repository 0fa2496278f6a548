# pos_analytics/services/base.py
import logging
from datetime import datetime
from typing import Dict, Optional

from pos_analytics.config import config
from pos_analytics.db.interface import SalesDataSource
from pos_analytics.logging_setup import logger as log_manager
from pos_analytics.utils.date_utils import normalize_window, window_days

class ReportService:
    """Common plumbing of the report services."""

    def __init__(
        self,
        data_source: SalesDataSource,
        today: Optional[datetime] = None,
        settings: Optional[Dict] = None
    ):
        """Initialize the report service.

        Args:
            data_source: Where sales, customers and products are read from
            today: Fixed query instant; the current time when omitted
            settings: Analytics settings; the ANALYTICS config section when omitted
        """
        self.data_source = data_source
        self.logger = logging.getLogger(type(self).__module__)
        self._today = today
        self.settings = settings if settings is not None else config.analytics_config

    @property
    def today(self) -> datetime:
        return self._today if self._today is not None else datetime.now()

    def _window(self, start, end):
        """Widen a window to whole days and measure it.

        Returns:
            Tuple with window start, window end and length in days
        """
        window_start, window_end = normalize_window(start, end)
        return window_start, window_end, window_days(window_start, window_end)

    def _fetch(self, description: str, method, *args):
        """Call a data source method, logging failures before re-raising them."""
        try:
            return method(*args)
        except Exception as e:
            self.logger.error(f"Error fetching {description}: {str(e)}")
            raise

    def _run(self, report_name: str, filters: Dict, compute):
        """Run a report computation bracketed by start and end log entries."""
        log_info = log_manager.report_start_log(report_name, filters)
        try:
            result = compute()
        except Exception:
            log_manager.report_end_log(log_info, success=False)
            raise

        log_manager.report_end_log(log_info, success=True, row_count=len(result))
        return result
