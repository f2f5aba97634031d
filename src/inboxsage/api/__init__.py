"""HTTP control surface."""

from inboxsage.api.app import create_app

__all__ = ["create_app"]
