from .customer_report_service import CustomerReportService
from .inventory_report_service import InventoryReportService
from .sales_report_service import SalesReportService
from .reporting import build_report, export_report_to_csv, export_report_to_json

__all__ = [
    'CustomerReportService',
    'InventoryReportService',
    'SalesReportService',
    'build_report',
    'export_report_to_csv',
    'export_report_to_json'
]
