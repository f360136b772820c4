"""Core Business Components.

This package contains independent business modules:
- tracking: snapshot derivation, analytics and timer
- remote: HTTP client for the tracking API
"""
