"""Bookstore e-commerce API server.

Storefront (catalog, cart, checkout, reviews, wishlist) and back office
(inventory, fulfilment, moderation, reporting) over one REST API.
"""

__version__ = "0.1.0"
