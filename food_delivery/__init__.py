"""
                Food Delivery API

GraphQL backend for a food-delivery platform: accounts, restaurants and
categories, dish menus, order placement and restaurant promotion payments.
"""

__version__ = "1.0.0"
