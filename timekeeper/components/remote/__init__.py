"""Tracking API client.

Usage:
    from timekeeper.components.remote import TimeTrackingClient

    client = TimeTrackingClient(base_url="http://127.0.0.1:8000")
    user = await client.login(email, password)
    state = await client.fetch_state()
"""

from timekeeper.components.remote.client import ZEIT_PATH, TimeTrackingClient

__all__ = ["TimeTrackingClient", "ZEIT_PATH"]
