"""Pushover Notifier: a countdown that ends in one push notification."""

__version__ = "0.1.0"
