"""HTTP API for the surf session planner."""

from surf_planner.api.app import create_app

__all__ = ["create_app"]
