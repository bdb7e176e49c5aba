"""Quote scanner - trust reports for window/door quotes and lead valuation."""

__version__ = "1.0.0"
