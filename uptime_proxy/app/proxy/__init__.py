"""
Proxy Package
=============

This package implements the endpoint that forwards browser monitor queries
to the UptimeRobot API with the server-side API key injected.

Main Components:
----------------
- routes.py: FastAPI router with the /get-monitors endpoint
- upstream.py: parameter merging and the outbound UptimeRobot call

Usage:
------
    from uptime_proxy.app.proxy import proxy_router
    app.include_router(proxy_router, prefix="/api")
"""

from .routes import proxy_router

__all__ = ["proxy_router"]
