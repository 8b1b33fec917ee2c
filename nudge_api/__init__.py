"""
Top-level package for the Nudge API.

All functionality lives in submodules under ``app``; import the ASGI
application from ``nudge_api.app.main``.
"""

__all__ = []
