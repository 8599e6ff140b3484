from .entity import Order, OrderStatus, generate_order_id
from .events import OrderCompleted, OrderFailed
from .service import Settlement, compute_settlement, resolve_commission_rate

__all__ = [
    "Order",
    "OrderStatus",
    "generate_order_id",
    "OrderCompleted",
    "OrderFailed",
    "Settlement",
    "compute_settlement",
    "resolve_commission_rate",
]
