"""API routers."""

from . import managers, packs, players, results, seasons

__all__ = ["managers", "packs", "players", "results", "seasons"]
