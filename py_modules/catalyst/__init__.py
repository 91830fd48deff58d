"""
Catalyst - local Steam client state for the Catalyst game library.

Reads Steam's KeyValues (VDF) configuration and manifest files to report
install/download status and collections, and edits per-game settings.
"""

__version__ = "0.3.0"
