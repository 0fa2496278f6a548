# pos_analytics/services/inventory_report_service.py
from datetime import date, datetime
from typing import List, Union

from pos_analytics.core.excess_inventory import detect_excess
from pos_analytics.core.stock_forecast import (
    early_alert, forecast_stock, inventory_velocity, summarize_inventory_value,
    order_alerts, rank_by_depletion, rank_by_velocity, units_sold_by_product
)
from pos_analytics.records import (
    EarlyAlert, ExcessInventory, InventoryValueReport, InventoryVelocity, StockPrediction
)
from pos_analytics.services.base import ReportService

DateLike = Union[date, datetime]

class InventoryReportService(ReportService):
    """Service for stock forecasts, alerts and inventory analysis."""

    def _products_and_sales(self, window_start, window_end):
        products = self._fetch("products", self.data_source.get_products)
        sales = self._fetch("completed sales", self.data_source.get_completed_sales, window_start, window_end)
        return products, sales

    def stock_prediction(self, start: DateLike, end: DateLike) -> List[StockPrediction]:
        """Predict when each selling product runs out of stock.

        Consumption is the average daily units sold over the window.

        Args:
            start: First day of the window
            end: Last day of the window

        Returns:
            Predictions for products that sell, soonest to empty first
        """
        window_start, window_end, days = self._window(start, end)

        def compute():
            products, sales = self._products_and_sales(window_start, window_end)
            sold = units_sold_by_product(sales)
            today = self.today

            return rank_by_depletion(
                forecast_stock(product, sold.get(product.id, 0), days, today)
                for product in products
            )

        return self._run("Stock Prediction", {'start': window_start, 'end': window_end}, compute)

    def early_alerts(self, start: DateLike, end: DateLike) -> List[EarlyAlert]:
        """Products at or approaching their minimum stock, critical first."""
        window_start, window_end, days = self._window(start, end)

        def compute():
            products, sales = self._products_and_sales(window_start, window_end)
            sold = units_sold_by_product(sales)

            return order_alerts(
                early_alert(
                    product,
                    sold.get(product.id, 0),
                    days,
                    low_stock_days=self.settings['low_stock_alert_days'],
                    horizon_days=self.settings['reorder_horizon_days']
                )
                for product in products
            )

        return self._run("Early Stock Alerts", {'start': window_start, 'end': window_end}, compute)

    def excess_inventory(self, start: DateLike, end: DateLike) -> List[ExcessInventory]:
        """Products holding more stock than the reorder horizon needs."""
        window_start, window_end, days = self._window(start, end)

        def compute():
            products, sales = self._products_and_sales(window_start, window_end)
            return detect_excess(
                products, sales, days, self.today, horizon_days=self.settings['reorder_horizon_days']
            )

        return self._run("Excess Inventory", {'start': window_start, 'end': window_end}, compute)

    def inventory_velocity(self, start: DateLike, end: DateLike) -> List[InventoryVelocity]:
        """Stock turnover per product, fastest first."""
        window_start, window_end, days = self._window(start, end)

        def compute():
            products, sales = self._products_and_sales(window_start, window_end)
            sold = units_sold_by_product(sales)

            return rank_by_velocity(
                inventory_velocity(product, sold.get(product.id, 0), days)
                for product in products
            )

        return self._run("Inventory Velocity", {'start': window_start, 'end': window_end}, compute)

    def inventory_value(self) -> InventoryValueReport:
        """Current stock value at purchase price per category and in total."""
        def compute():
            return summarize_inventory_value(self._fetch("products", self.data_source.get_products))

        return self._run("Inventory Value", {}, compute)
