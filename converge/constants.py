"""Centralized constants for converge."""

from __future__ import annotations

from pathlib import Path
from typing import Final

# =============================================================================
# Wait Defaults (in seconds)
# =============================================================================

DEFAULT_TIMEOUT: Final = 300.0
DEFAULT_INTERVAL: Final = 5.0
DEFAULT_BACKOFF: Final = 1.0


# =============================================================================
# Configuration Files
# =============================================================================

GLOBAL_CONFIG_PATH: Final = Path.home() / ".converge" / "defaults.toml"
PROJECT_CONFIG_NAME: Final = "converge.toml"
