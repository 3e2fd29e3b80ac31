"""
Top-level package for the Sales Tracker API.

All functionality lives in the ``app`` subpackage; import the ASGI
application as ``sales_tracker_api.app.main:app``.
"""

__all__ = []
