"""Shared constants: relation kinds, thresholds, colours, dimension names."""

from __future__ import annotations

RELATION_KINDS = ("pair", "pre", "post")
MATRIX_FILTERS = ("both", "pair", "pre")

UNKNOWN_DOMAIN = "unknown"

COLOR_PAIR = "#4361EE"   # pair
COLOR_PRE  = "#F72585"   # pre (waits on)
COLOR_POST = "#7209B7"   # post
COLOR_ME   = "#F77F00"   # selected member

RELATION_COLORS = {"pair": COLOR_PAIR, "pre": COLOR_PRE, "post": COLOR_POST}

# Bottleneck intensity bands, checked top-down: (lower bound, band)
INTENSITY_BANDS = [
    (80, "critical"),
    (50, "warning"),
    (20, "caution"),
]
DEFAULT_BAND = "normal"

BAND_COLORS = {
    "critical": "#ef233c",
    "warning":  "#f77f00",
    "caution":  "#ffd166",
    "normal":   "#8d99ae",
}

# Anomaly week: inbound > mean + ANOMALY_SIGMA * population stddev
ANOMALY_SIGMA = 1.5
ANOMALY_MIN_WEEKS = 3

# Insight display order, lower sorts first
INSIGHT_ORDER = {"warning": 0, "info": 1, "success": 2, "neutral": 3}
INSIGHT_DISPLAY_LIMIT = 6

# Personal insight thresholds
INBOUND_WARNING     = 2     # people waiting on me
OUTBOUND_WARNING    = 3     # items waiting on others
CROSS_DOMAIN_HIGH   = 50
CROSS_DOMAIN_LOW    = 20
PAIR_ABOVE_AVERAGE  = 1.5   # x team average
COLLAB_GROWTH       = 2     # week-over-week increase worth reporting
REPEATED_WAIT       = 2

# Team insight thresholds
TEAM_BOTTLENECK     = 3
TEAM_ACTIVE_PAIR    = 3
TEAM_WAIT_RATIO     = 1.5

RISK_LEVELS = (0, 1, 2, 3)

RADAR_DIMS  = ["pair", "pre_out", "pre_in", "cross_domain", "cross_module"]
RADAR_NAMES = ["Pair", "Waiting on others", "Others waiting", "Cross-domain", "Cross-module"]
