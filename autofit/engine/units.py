"""
units.py — Layout constants for text measurement and font-size search.

Every numeric policy constant used by the oracle and the resolver lives here.
Never hardcode these values anywhere else in the codebase.

All lengths are canvas pixels; font sizes are integer pixel sizes.
"""

# =============================================================================
# SEARCH POLICY
# =============================================================================

# Hard cap on binary-search iterations per pass. A realistic font-size range
# converges in about 9 steps.
MAX_SEARCH_ITERATIONS = 20

# Slack added to the box height before comparing against the rendered height.
# Absorbs sub-pixel rounding in the layout engine.
HEIGHT_TOLERANCE = 1.0

# Lowest size the below-range pass may go to
ABSOLUTE_MIN_FONT_SIZE = 1

# =============================================================================
# LINE BOX METRICS
# =============================================================================

# Ratio of line box height to font size before the line-height multiplier
# is applied (matches the canvas renderer's text layout).
FONT_SIZE_MULT = 1.13

# letter_spacing is expressed in thousandths of an em
LETTER_SPACING_UNITS_PER_EM = 1000.0

# =============================================================================
# FONT WEIGHTS
# =============================================================================

BOLD_WEIGHT_THRESHOLD = 600
BOLD_WEIGHT_NAMES = {"bold", "bolder", "semibold", "extrabold", "black", "heavy"}

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def letter_spacing_px(letter_spacing: float, font_size: float) -> float:
    """Convert 1/1000 em letter spacing to pixels at the given size."""
    return letter_spacing * font_size / LETTER_SPACING_UNITS_PER_EM


def line_box_height(font_size: float, line_height: float) -> float:
    """Height of one line box including line spacing."""
    return font_size * FONT_SIZE_MULT * line_height


def text_block_height(font_size: float, line_height: float, line_count: int) -> float:
    """Height of ``line_count`` stacked lines.

    The last line does not carry the line-height multiplier, so a single line
    is exactly ``font_size * FONT_SIZE_MULT`` tall.
    """
    if line_count <= 0:
        return 0.0
    base = font_size * FONT_SIZE_MULT
    return base + (line_count - 1) * base * line_height


def is_bold_weight(weight) -> bool:
    """Normalize a CSS-like font weight to bold / not bold."""
    if isinstance(weight, (int, float)):
        return weight >= BOLD_WEIGHT_THRESHOLD
    cleaned = str(weight).strip().lower()
    if cleaned.isdigit():
        return int(cleaned) >= BOLD_WEIGHT_THRESHOLD
    return cleaned in BOLD_WEIGHT_NAMES
