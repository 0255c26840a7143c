"""ExpenseFlow analytics dashboard.

Fetches six analytical views from the ExpenseFlow analytics service and
renders them into a single standalone HTML dashboard.
"""

__version__ = "0.4.0"
