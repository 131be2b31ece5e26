from prometheus_client import Counter

# Business Metrics
warehouse_orders_created_total = Counter(
    "warehouse_orders_created_total",
    "Total purchase orders created"
)

warehouse_order_fulfillments_total = Counter(
    "warehouse_order_fulfillments_total",
    "Total fulfillment attempts",
    ["outcome"] # Labels: 'fulfilled', 'already_fulfilled'
)

warehouse_inventory_credited_units_total = Counter(
    "warehouse_inventory_credited_units_total",
    "Units credited into inventory by order fulfillment"
)

warehouse_stock_adjustments_total = Counter(
    "warehouse_stock_adjustments_total",
    "Total manual stock adjustments",
    ["direction"] # Labels: 'increase', 'decrease', 'none'
)

warehouse_transaction_failures_total = Counter(
    "warehouse_transaction_failures_total",
    "Units of work rolled back after a database or unexpected error",
    ["operation"]
)
