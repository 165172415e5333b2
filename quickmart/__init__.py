"""Jerry's Quick Mart point-of-sale engine."""

__version__ = "0.1.0"
