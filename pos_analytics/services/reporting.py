# pos_analytics/services/reporting.py
import csv
import io
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from pos_analytics.exceptions import ReportingError
from pos_analytics.records import InventoryValueReport, ProfitMarginReport

# Row sections written after 'data' when a report carries them
EXTRA_SECTIONS = ('categories',)

def _to_row(record) -> Dict[str, Any]:
    if hasattr(record, 'to_dict'):
        return record.to_dict()
    if isinstance(record, dict):
        return record
    raise ReportingError(
        f"Cannot export record of type {type(record).__name__}", code='UNSUPPORTED_RECORD'
    )

def build_report(report_name: str, records, filters: Optional[Dict] = None) -> Dict:
    """Wrap report records in the standard report envelope.

    Args:
        report_name: Name of the report
        records: Derived records, a ProfitMarginReport or an InventoryValueReport
        filters: Filters the report was requested with

    Returns:
        Report dictionary with report_name, report_date, filters and data;
        profit margins add 'categories' and inventory value adds 'summary'
    """
    report = {
        'report_name': report_name,
        'report_date': datetime.now().isoformat(),
        'filters': filters or {}
    }

    if isinstance(records, ProfitMarginReport):
        report['data'] = [_to_row(r) for r in records.products]
        report['categories'] = [_to_row(r) for r in records.categories]
    elif isinstance(records, InventoryValueReport):
        report['data'] = [_to_row(r) for r in records.categories]
        report['summary'] = {'total_value': records.total_value}
    else:
        report['data'] = [_to_row(r) for r in records]

    return report

def _write_rows(writer, rows: List[Dict]):
    header = list(rows[0].keys())
    writer.writerow(header)

    for row in rows:
        writer.writerow([_csv_value(row.get(col, '')) for col in header])

def export_report_to_csv(report: Dict) -> str:
    """Export a report to CSV.

    The data rows come first. Category rows and summary values, when the
    report has them, follow as separate blocks after a blank line, each
    with its own header.

    Args:
        report: Report dictionary

    Returns:
        CSV data as string
    """
    if 'data' not in report:
        raise ReportingError("Report has no data to export", code='NO_DATA')

    data = report['data']
    if not data:
        return "No data to export"

    output = io.StringIO()
    writer = csv.writer(output)

    _write_rows(writer, data)

    for section in EXTRA_SECTIONS:
        if report.get(section):
            writer.writerow([])
            _write_rows(writer, report[section])

    if report.get('summary'):
        writer.writerow([])
        writer.writerow(['metric', 'value'])
        for key, value in report['summary'].items():
            writer.writerow([key, _csv_value(value)])

    return output.getvalue()

def _csv_value(value):
    if value is None:
        return ''
    if isinstance(value, datetime):
        return value.isoformat()
    return value

def export_report_to_json(report: Dict) -> str:
    """Export a report to JSON.

    Args:
        report: Report dictionary

    Returns:
        JSON data as string
    """
    return json.dumps(report, default=str, indent=2, ensure_ascii=False)
