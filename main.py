#!/usr/bin/env python3
"""Pushover Notifier entry point.

Run with:
    python main.py
    python -m pushnotifier
"""

from pushnotifier.__main__ import main


if __name__ == "__main__":
    main()
