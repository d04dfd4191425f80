"""HTTP surface (FastAPI) over the estimation core."""

from api.app import create_app

__all__ = ["create_app"]
