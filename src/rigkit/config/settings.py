"""
Rigging Configuration Settings

All configuration constants for the skeleton and skinning subsystem.
Modify these values to change default behavior.
"""

from pathlib import Path

# ============================================================================
# Project Paths
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
SKELETON_CONFIG_DIR = ASSETS_DIR / "config" / "skeletons"

# ============================================================================
# Vertex Weights
# ============================================================================

DEFAULT_MAX_WEIGHT_COUNT = 0    # Per-joint weight cap (0 = unlimited)
WEIGHT_SUM_TOLERANCE = 1e-5     # Allowed drift of a normalized weight list from 1.0

# ============================================================================
# Transforms
# ============================================================================

TRANSFORM_TOLERANCE = 1e-6      # Used when comparing matrices against identity

# ============================================================================
# Animation Playback
# ============================================================================

DEFAULT_PLAYBACK_SPEED = 1.0
DEFAULT_ANIMATION_LOOP = True

# ============================================================================
# Debug / Logging
# ============================================================================

DEBUG_SKELETON_LOGGING = False  # Log every joint visited while baking poses
LOG_FORMAT = "%(name)s: %(message)s"
