"""Core services: playlist locator, mutation engine, commands, Spotify adapters."""
from mainlist.core.commands import Commands
from mainlist.core.history import HistoryStore
from mainlist.core.locator import PlaylistLocator
from mainlist.core.mutation_engine import MutationEngine

__all__ = ["Commands", "HistoryStore", "MutationEngine", "PlaylistLocator"]
