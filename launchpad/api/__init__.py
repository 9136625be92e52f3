"""HTTP API for the launchpad engine."""
