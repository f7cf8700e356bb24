# Global knobs for generation and the radar preview
SCREEN_W, SCREEN_H = 1200, 800
RADAR_RANGE_NM = 15.0        # radar preview scope radius

# Realism envelope every exercise must stay inside
SPEED_KT = (80, 600)
ALTITUDE_FT = (1000, 45000)
INITIAL_DISTANCE_NM = (2.0, 15.0)

# Selection weights (relative, need not sum to 100)
FLIGHT_RULE_WEIGHTS = {"VFR": 75, "IFR": 25}

DIRECTION_WEIGHTS = {
    "crossing left to right": 25,
    "crossing right to left": 25,
    "converging": 20,
    "opposite direction": 15,
    "overtaking": 15,
}

VERTICAL_WEIGHTS = {"above": 40, "below": 40, "same": 20}

# ---------------------------------------------------------------------
# Heading offset (deg) between target and intruder per direction.
# Bands sit inside the classification bands with a margin so that a
# solved pair always re-classifies to the category it was built for.
# ---------------------------------------------------------------------
HEADING_DELTA_BANDS = {
    "overtaking": (0, 20),
    "converging": (10, 40),
    "crossing left to right": (55, 125),
    "crossing right to left": (55, 125),
    "opposite direction": (150, 180),
}

# Classification band edges (deg)
SAME_TRACK_MAX_DEG = 45.0
CROSSING_MAX_DEG = 135.0

OVERTAKE_MARGIN_KT = 20     # intruder at least this much faster
REL_SPEED_MIN_KT = 10.0     # slower closure is not meaningful traffic

# ---------------------------------------------------------------------
# Convergence: projected separation after PROJECTION_MIN must be smaller
# than the current one, and CPA must come within MAX_CPA_TIME_H.
# Along-track placement keeps CLOSING_MARGIN on the projection check.
# ---------------------------------------------------------------------
PROJECTION_MIN = 5.0
MAX_CPA_TIME_H = 0.5
CLOSING_MARGIN = 1.15
MAX_ALONG_TRACK_NM = 14.5
MAX_MISS_NM = 1.0
MISS_FRACTION = 0.2

# Vertical geometry
VERTICAL_STEP_FT = {"VFR": 500, "IFR": 1000}
MAX_VERTICAL_STEPS = {"VFR": 2, "IFR": 3}
LEVEL_CHANGE_PROBABILITY = {"VFR": 0.1, "IFR": 0.3}
MAX_LEVEL_CHANGE_STEPS = 2
SAME_ALTITUDE_FT = 200      # closer than this reads "same altitude"

# Retry budget
MAX_RETRIES = 200
SPEED_ATTEMPTS = 12
LEVEL_ATTEMPTS = 8
TYPE_RESAMPLE_LIMIT = 25     # consecutive type redraws before a fresh category

# Radar history trail
HISTORY_DOTS = 5
HISTORY_INTERVAL_S = 12.0

# Validation tolerance on the reported distance
DISTANCE_TOLERANCE_NM = 0.5
DISTANCE_TOLERANCE_FRAC = 0.2
