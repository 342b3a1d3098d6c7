# =============================================================================
# config.py — Central Configuration for the Face Attribute Engine
# All tunable parameters live here. Never hardcode values in modules.
# =============================================================================

import os

# ── Paths ─────────────────────────────────────────────────────────────────────
BASE_DIR    = os.path.dirname(os.path.abspath(__file__))
LOGS_DIR    = os.environ.get("FACE_ENGINE_LOGS_DIR", os.path.join(BASE_DIR, "logs"))

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_FILE_PREFIX     = "face_engine"
LOG_TO_FILE         = os.environ.get("FACE_ENGINE_LOG_TO_FILE", "1") != "0"
CONSOLE_LOG_LEVEL   = os.environ.get("FACE_ENGINE_LOG_LEVEL", "INFO")

# ── Eye / EAR ─────────────────────────────────────────────────────────────────
# Canonical eye order: p1 outer corner, p2,p3 upper lid, p4 inner corner,
# p5,p6 lower lid
EAR_MIN_POINTS          = 6
EAR_MIN                 = 0.08    # EAR at or below → probability 0
EAR_MAX                 = 0.32    # EAR at or above → probability 1

# Hysteresis band on the smoothed probability
EYE_CLOSED_THRESHOLD    = 0.20    # Below this → CLOSED
EYE_OPEN_THRESHOLD      = 0.45    # Above this → OPEN

# ── Smile ─────────────────────────────────────────────────────────────────────
SMILE_MIN_POINTS        = 6
SMILE_RATIO_OFFSET      = 0.20    # Mouth open/width ratio mapped to 0
SMILE_RATIO_RANGE       = 0.30    # Ratio span mapped onto [0, 1]

# ── Head Pose ─────────────────────────────────────────────────────────────────
PITCH_NEUTRAL_RATIO     = 0.50    # Eye-mouth distance / face height at 0°
PITCH_DEGREES_SCALE     = 60.0
PITCH_LIMIT_DEG         = 30.0    # Proxy saturates beyond ±30°

# ── Temporal Smoothing ────────────────────────────────────────────────────────
EYE_EMA_ALPHA           = 0.3
EYE_EMA_INITIAL         = 0.0
# True → first reading seeds the EMA instead of blending against 0
EYE_EMA_SEED_WITH_FIRST = False
# Frames a face id may go unseen before its smoother is dropped
EYE_SMOOTHER_TTL_FRAMES = 30

# ── Contours ──────────────────────────────────────────────────────────────────
INCLUDE_CHEEK_CONTOURS  = True
