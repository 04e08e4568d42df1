"""
Constants and fixed parameters for PanelCharts package.

This module defines canvas defaults, scale and mapping defaults, design
presets, split topologies and the lookup table that places each plot of a
panel on the canvas.
"""

import sys

# ============================================================================
# Canvas Defaults
# ============================================================================

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_H_RATIO = 0.5
DEFAULT_V_RATIO = 0.5

# Resolution at which one layout pixel is one output pixel
BASE_DPI = 72

# Fraction of the plot area reserved on each side for labels
PLOT_MARGIN = 0.1

# Small offset applied to the first row/column of plots in a panel
PANEL_ORIGIN_PAD = 0.05

OUTPUT_FORMATS = ("png", "svg", "eps", "ps", "pdf")

# ============================================================================
# Scale Defaults
# ============================================================================

# Defaults of a scale read from a chart document
DEFAULT_PRECISION = 2
DEFAULT_INTERVALS = 5
DEFAULT_LOG = False
DEFAULT_INVERT = False
DEFAULT_OFFSET = 0
DEFAULT_ADJUSTMENT = "off"
DEFAULT_GUIDE = True

# Defaults of a scale built programmatically
SCALE_PRECISION = 4
SCALE_INTERVALS = 4
SCALE_ADJUSTMENT = "tight"

ADJUSTMENTS = ("tight", "round", "off")

# Ideal bounds replace the current ones when padding exceeds this share
ROUND_PAD_TOLERANCE = 0.25

EPSILON = sys.float_info.epsilon

# ============================================================================
# Design Defaults
# ============================================================================

DEFAULT_BG_COLOR = "#ffffff"
DEFAULT_GRID_COLOR = "#d3d7cf"
DEFAULT_GRID_WIDTH = 1
DEFAULT_FONT = "Monospace Regular 12"
MAX_GRID_WIDTH = 50

DARK_BG_COLOR = "#1e1e1eff"
DARK_GRID_COLOR = "#454545ff"

TICK_LABEL_COLOR = "#444444"

# ============================================================================
# Mapping Defaults
# ============================================================================

MAPPING_KINDS = ("line", "scatter", "bar", "area", "surface", "text", "interval")

DEFAULT_COLOR = "#000000"
DEFAULT_COLOR_FINAL = "#ffffff"
DEFAULT_LINE_WIDTH = 1.0
DEFAULT_DASH = 1
DEFAULT_RADIUS = 5.0
DEFAULT_BAR_WIDTH = 100.0
DEFAULT_BAR_SPACING = 1.0
DEFAULT_LIMIT_SIZE = 1.0
DEFAULT_SURFACE_DENSITY = 5
DEFAULT_Z_RANGE = (0.0, 1.0)

# Length in pixels of one dash cycle
DASH_CYCLE = 10.0

# Data columns each mapping kind requires, in document order
MAPPING_COLUMNS = {
    "line": ("x", "y"),
    "scatter": ("x", "y"),
    "bar": ("x",),
    "area": ("x", "y", "z"),
    "interval": ("x", "y", "z"),
    "surface": ("x", "y", "z"),
    "text": ("x", "y", "text"),
}

# Optional properties each mapping kind accepts besides kind, map and color
MAPPING_PROPERTIES = {
    "line": ("width", "spacing"),
    "scatter": ("radius",),
    "bar": ("width", "spacing", "vertical", "center", "origin"),
    "area": (),
    "interval": ("width", "spacing", "vertical", "limits"),
    "surface": ("color_final", "z_start", "z_end", "density"),
    "text": ("font",),
}

# ============================================================================
# Panel Split Topologies
# ============================================================================

SPLIT_PLOT_COUNT = {
    "unique": 1,
    "horizontal": 2,
    "vertical": 2,
    "threetop": 3,
    "threebottom": 3,
    "threeleft": 3,
    "threeright": 3,
    "four": 4,
}

# Split inferred from the plot count when none is declared
SPLIT_BY_COUNT = {
    1: "unique",
    2: "horizontal",
    3: "threetop",
    4: "four",
}

# Placement of each plot as ((origin_x, origin_y), (factor_x, factor_y)).
# Origins: "left"/"top" sit at the panel pad, "right"/"bottom" at the split
# line. Factors: "full" is the whole canvas side, "h"/"v" the split ratio and
# "h_compl"/"v_compl" its complement.
SPLIT_LAYOUT = {
    "unique": [
        (("left", "top"), ("full", "full")),
    ],
    "horizontal": [
        (("left", "top"), ("h", "full")),
        (("right", "top"), ("h_compl", "full")),
    ],
    "vertical": [
        (("left", "top"), ("full", "v")),
        (("left", "bottom"), ("full", "v_compl")),
    ],
    "four": [
        (("left", "top"), ("h", "v")),
        (("right", "top"), ("h_compl", "v")),
        (("left", "bottom"), ("h", "v_compl")),
        (("right", "bottom"), ("h_compl", "v_compl")),
    ],
    "threeleft": [
        (("left", "top"), ("h", "full")),
        (("right", "top"), ("h_compl", "v")),
        (("right", "bottom"), ("h_compl", "v_compl")),
    ],
    "threetop": [
        (("left", "top"), ("full", "v")),
        (("left", "bottom"), ("h", "v_compl")),
        (("right", "bottom"), ("h_compl", "v_compl")),
    ],
    "threeright": [
        (("left", "top"), ("h", "v")),
        (("right", "top"), ("h_compl", "full")),
        (("left", "bottom"), ("h", "v_compl")),
    ],
    "threebottom": [
        (("left", "top"), ("h", "v")),
        (("right", "top"), ("h_compl", "v")),
        (("left", "bottom"), ("full", "v_compl")),
    ],
}
