"""Cart services."""

from .cart_engine import CartEngine
from .checkout import CheckoutReceipt, simulate_checkout

__all__ = ["CartEngine", "CheckoutReceipt", "simulate_checkout"]
