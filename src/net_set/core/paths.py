"""Locations of the data files and scripts shipped inside the package."""

from __future__ import annotations

from pathlib import Path

# src/net_set/core/paths.py → src/net_set/
PACKAGE_DIR = Path(__file__).resolve().parent.parent

DATA_DIR = PACKAGE_DIR / "data"
BUNDLED_SCRIPTS_DIR = PACKAGE_DIR / "scripts"

PROVIDERS_FILE = DATA_DIR / "providers.yaml"
VERIFY_SCRIPT_NAME = "network-verify.sh"
