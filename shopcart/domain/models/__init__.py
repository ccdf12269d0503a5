"""Domain models for data validation."""

from .product import CartLineItem, Product, Rating, make_line_item, parse_line_item, parse_product

__all__ = [
    "CartLineItem",
    "Product",
    "Rating",
    "make_line_item",
    "parse_line_item",
    "parse_product",
]
