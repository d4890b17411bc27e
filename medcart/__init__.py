"""
medcart - pharmacy shopping cart engine

Subpackages:
- cart: line items, delivery options, summaries, persistence
- payments: payment statuses, method catalog, checkout handoff
- services: Decimal money helpers

Wire the pieces together with medcart.container.Container.
"""

__version__ = "1.0.0"
