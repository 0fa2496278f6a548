import argparse
import json
import sys
from datetime import date, datetime, timedelta

from pos_analytics.config import config
from pos_analytics.db import db, session_scope
from pos_analytics.db.interface import SQLAlchemySalesDataSource
from pos_analytics.exceptions import ConfigError, POSAnalyticsError, ReportingError, ValidationError
from pos_analytics.logging_setup import logger, get_logger, log_exception
from pos_analytics.services import (
    CustomerReportService, InventoryReportService, SalesReportService,
    build_report, export_report_to_csv, export_report_to_json
)

DEFAULT_WINDOW_DAYS = 30

# report name -> (service class, method name, display name, accepted arguments)
REPORTS = {
    'rfm': (CustomerReportService, 'rfm_analysis', 'RFM Analysis', ('start', 'end')),
    'segments': (CustomerReportService, 'segment_summary', 'Customer Segments', ('start', 'end')),
    'lifecycle': (CustomerReportService, 'customer_lifecycle', 'Customer Lifecycle', ()),
    'retention': (CustomerReportService, 'retention_rate', 'Customer Retention', ('end', 'months')),
    'seasonal': (CustomerReportService, 'seasonal_patterns', 'Seasonal Patterns', ('start', 'end')),
    'tiers': (CustomerReportService, 'purchase_tiers', 'Purchase Tiers', ('start', 'end')),
    'top-customers': (CustomerReportService, 'top_customers', 'Top Customers', ('start', 'end', 'limit')),
    'stock-prediction': (InventoryReportService, 'stock_prediction', 'Stock Prediction', ('start', 'end')),
    'early-alerts': (InventoryReportService, 'early_alerts', 'Early Stock Alerts', ('start', 'end')),
    'excess': (InventoryReportService, 'excess_inventory', 'Excess Inventory', ('start', 'end')),
    'velocity': (InventoryReportService, 'inventory_velocity', 'Inventory Velocity', ('start', 'end')),
    'inventory-value': (InventoryReportService, 'inventory_value', 'Inventory Value', ()),
    'affinity': (SalesReportService, 'associated_products', 'Associated Products', ('start', 'end', 'limit')),
    'margins': (SalesReportService, 'profit_margin_analysis', 'Profit Margin Analysis', ('start', 'end', 'limit')),
    'profit': (SalesReportService, 'profit_by_period', 'Profit By Period', ('start', 'end', 'period')),
    'category-sales': (SalesReportService, 'sales_by_category', 'Sales By Category', ('start', 'end')),
    'sales-trend': (SalesReportService, 'sales_trend', 'Sales Trend', ('start', 'end')),
    'hourly': (SalesReportService, 'hourly_analysis', 'Hourly Analysis', ('start', 'end')),
    'weekday': (SalesReportService, 'weekday_analysis', 'Weekday Analysis', ('start', 'end')),
    'tickets': (SalesReportService, 'ticket_analysis', 'Ticket Analysis', ('start', 'end')),
    'comparative': (SalesReportService, 'comparative_analysis', 'Comparative Analysis', ('end',)),
}

def parse_date(value):
    """Parse a YYYY-MM-DD command-line date."""
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date: {value}. Expected YYYY-MM-DD")

def setup_database(drop=False):
    """Create the database schema, optionally dropping existing tables first."""
    log = get_logger('cli')

    db.initialize()
    if drop:
        log.info("Dropping existing tables")
        db.drop_all_tables()

    db.create_all_tables()
    log.info("Database schema created")

def report_arguments(args):
    """Collect the keyword arguments a report accepts from parsed arguments."""
    _, _, _, accepted = REPORTS[args.report]

    end = args.end or date.today()
    start = args.start or (end - timedelta(days=DEFAULT_WINDOW_DAYS - 1))

    if start > end:
        raise ValidationError(f"Start date {start} is after end date {end}", code='INVALID_WINDOW')

    values = {
        'start': start,
        'end': end,
        'limit': getattr(args, 'limit', None),
        'months': getattr(args, 'months', None),
        'period': getattr(args, 'period', None)
    }

    return {name: values[name] for name in accepted if values[name] is not None}

def run_report(args, data_source):
    """Run the report named in the arguments and return the report dictionary.

    Args:
        args: Parsed command-line arguments
        data_source: SalesDataSource the report reads from

    Returns:
        Report dictionary
    """
    if args.report not in REPORTS:
        raise ReportingError(f"Unknown report: {args.report}", code='UNKNOWN_REPORT')

    service_class, method_name, display_name, _ = REPORTS[args.report]
    kwargs = report_arguments(args)

    service = service_class(data_source)
    records = getattr(service, method_name)(**kwargs)

    return build_report(display_name, records, filters=kwargs)

def build_parser():
    parser = argparse.ArgumentParser(description='POS Analytics reports')

    parser.add_argument('--config', help='Path to the settings file')
    parser.add_argument('--setup-db', action='store_true',
                        help='Set up the database schema')
    parser.add_argument('--drop-db', action='store_true',
                        help='Drop existing tables before setup')
    parser.add_argument('--format', choices=['json', 'csv'], default='json',
                        help='Output format')

    subparsers = parser.add_subparsers(dest='report', help='Reports')

    for name, (_, _, display_name, accepted) in REPORTS.items():
        report_parser = subparsers.add_parser(name, help=display_name)
        report_parser.add_argument('--start', type=parse_date, help='First day of the window (YYYY-MM-DD)')
        report_parser.add_argument('--end', type=parse_date, help='Last day of the window (YYYY-MM-DD)')

        if 'limit' in accepted:
            report_parser.add_argument('--limit', type=int, help='Maximum number of rows')
        if 'months' in accepted:
            report_parser.add_argument('--months', type=int, help='Number of months')
        if 'period' in accepted:
            report_parser.add_argument('--period', choices=['daily', 'weekly', 'monthly'],
                                       default='monthly', help='Grouping period')

    return parser

def main(argv=None):
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        try:
            config.load(args.config)
        except ConfigError as e:
            print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
            return 1
        logger.reconfigure()

    log = get_logger('cli')

    try:
        if args.setup_db:
            setup_database(args.drop_db)
            return 0

        if not args.report:
            parser.print_help()
            return 1

        db.initialize()
        logger.app_logger.info(f"Running report {args.report}")

        with session_scope() as session:
            report = run_report(args, SQLAlchemySalesDataSource(session))

        if args.format == 'csv':
            output = export_report_to_csv(report)
        else:
            output = export_report_to_json(report)

        print(output)
        return 0

    except POSAnalyticsError as e:
        log_exception('cli', e, f"Report {args.report} failed")
        print(json.dumps(e.to_dict(), ensure_ascii=False, default=str), file=sys.stderr)
        return 1

    except Exception as e:
        log_exception('cli', e, f"Report {args.report} failed")
        log.error(f"Error: {str(e)}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
