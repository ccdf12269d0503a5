"""Domain package."""

from .cart import Cart
from .models import CartLineItem, Product, Rating

__all__ = ["Cart", "CartLineItem", "Product", "Rating"]
