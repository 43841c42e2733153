from delivery_tracker.models.route import Route
from delivery_tracker.models.product import Product
from delivery_tracker.models.car import Car
from delivery_tracker.models.expense_type import ExpenseType
from delivery_tracker.models.expense import Expense
from delivery_tracker.models.route_product_pricing import RouteProductPricing
from delivery_tracker.models.entry import Entry
from delivery_tracker.models.user import User

__all__ = [
    "Route",
    "Product",
    "Car",
    "ExpenseType",
    "Expense",
    "RouteProductPricing",
    "Entry",
    "User",
]
