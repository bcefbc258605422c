"""Roblox bundle watcher that posts new catalog bundles to Discord."""

__version__ = "0.1.0"
