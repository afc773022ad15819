"""
Configuration & Path Management
===============================
This module serves as the central registry for resource paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: Field identifiers, debounce windows and default locations are
   part of the contract between the core and the widgets. Keeping them here
   stops magic strings from spreading across the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find the bundled location dataset when the app is frozen into an .exe.

Exports:
    TIME_FIELD, LOCATION1_FIELD, LOCATION2_FIELD (str): Stable field identifiers.
    DEFAULT_LOCATIONS_PATH (str): Absolute path to the bundled location dataset.
"""
import os
import sys
from importlib.resources import files

# Stable field identifiers used by every caller to address a field
TIME_FIELD: str = "time"
LOCATION1_FIELD: str = "location1"
LOCATION2_FIELD: str = "location2"
LOCATION_FIELDS: tuple[str, str] = (LOCATION1_FIELD, LOCATION2_FIELD)

# Timings (ms)
SEARCH_DEBOUNCE_MS: int = 150
CONVERSION_DEBOUNCE_MS: int = 100

MAX_SUGGESTIONS: int = 10
PLACEHOLDER_TIME: str = "--:--"

# (name, country) used when nothing has been persisted yet
DEFAULT_LOCATIONS: tuple[tuple[str, str], tuple[str, str]] = (
    ("New York", "United States"),
    ("London", "United Kingdom"),
)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to a packaged resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, "clockpair", "resources", relative_path)

    return str(files("clockpair.resources").joinpath(relative_path))


DEFAULT_LOCATIONS_PATH: str = get_resource_path("locations.json")
