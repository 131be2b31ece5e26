from .setup import setup_observability
from .metrics import (
    warehouse_orders_created_total,
    warehouse_order_fulfillments_total,
    warehouse_inventory_credited_units_total,
    warehouse_stock_adjustments_total,
    warehouse_transaction_failures_total
)
