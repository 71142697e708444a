"""setuptools setup for Pushover Notifier.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup, find_packages

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,
    "plist": {
        "CFBundleName": "PushoverNotifier",
        "CFBundleDisplayName": "Pushover Notifier",
        "CFBundleIdentifier": "com.pushovernotifier.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
        "LSMinimumSystemVersion": "13.0",
    },
}

# py2app only when a bundle is actually being built
bundle_kwargs = {}
if "py2app" in sys.argv:
    bundle_kwargs = {
        "app": APP,
        "data_files": DATA_FILES,
        "options": {"py2app": OPTIONS},
        "setup_requires": ["py2app"],
    }

setup(
    name="PushoverNotifier",
    version="0.1.0",
    description="Countdown timer that sends a Pushover notification when it ends",
    packages=find_packages(include=["pushnotifier", "pushnotifier.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "cryptography>=41",
        "pywin32>=306; sys_platform == 'win32'",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "gui_scripts": ["pushover-notifier = pushnotifier.__main__:main"],
    },
    **bundle_kwargs,
)
