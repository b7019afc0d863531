"""
Database models for QuickURL.

The only table is `urls`; click counts are kept on the row itself.
"""

from .url import URL

__all__ = ["URL"]
