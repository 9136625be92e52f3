"""Launchpad Curve Engine - hybrid bonding-curve pricing for a token launchpad."""

from launchpad.engine import LaunchpadEngine, NetworkSession, get_default_engine

__version__ = "0.1.0"
__all__ = ["LaunchpadEngine", "NetworkSession", "get_default_engine", "__version__"]
