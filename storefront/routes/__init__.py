"""
HTTP routers for the Storefront backend.

Each module exposes a `router` that main.py registers on the app.
"""
