"""Web view for candlescan."""

from candlescan.web.app import create_app

__all__ = ["create_app"]
