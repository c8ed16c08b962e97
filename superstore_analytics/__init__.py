"""
Superstore Sales Analytics
Reporting engine over denormalized retail order lines.
"""

__version__ = "1.0.0"
