"""Path management for cpinit.

Manages the ~/.cpinit/ directory structure.
"""

from pathlib import Path

# Base directory for all cpinit data
CPINIT_DIR = Path.home() / ".cpinit"

# CLI settings file
CONFIG_FILE = CPINIT_DIR / "config.yaml"
