# Auto-fit engine: measurement oracle contract, Pillow oracle, resolver

from .units import (
    MAX_SEARCH_ITERATIONS,
    HEIGHT_TOLERANCE,
    FONT_SIZE_MULT,
    text_block_height,
)

from .oracle import (
    Measurement,
    MeasurementOracle,
)

from .text_measure import (
    PillowMeasurementOracle,
    split_graphemes,
)

from .resolver import (
    FontSizeResolver,
    resolve,
)

from .text_shared import (
    apply_text_transform,
    replace_dynamic_fields,
)

__all__ = [
    # Units
    'MAX_SEARCH_ITERATIONS',
    'HEIGHT_TOLERANCE',
    'FONT_SIZE_MULT',
    'text_block_height',
    # Oracle
    'Measurement',
    'MeasurementOracle',
    'PillowMeasurementOracle',
    'split_graphemes',
    # Resolver
    'FontSizeResolver',
    'resolve',
    # Text preparation
    'apply_text_transform',
    'replace_dynamic_fields',
]
