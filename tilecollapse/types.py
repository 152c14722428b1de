from __future__ import annotations

from typing import TypeAlias

import numpy as np
import numpy.typing as npt

# =============================================================================
# GRID TYPES
# =============================================================================

GridCoord: TypeAlias = int  # Always integer cell/tile position

# Positions are (x, y) with x to the right and y downward.
GridPos: TypeAlias = tuple[GridCoord, GridCoord]  # Example: (2, 3) = column 2, row 3

# Dimensions of a grid or block in cells/tiles.
GridSize: TypeAlias = tuple[int, int]  # Example: (8, 8) = 8 columns, 8 rows

# Linear cell index, always x + y * width.
CellIndex: TypeAlias = int

# =============================================================================
# PATTERN TYPES
# =============================================================================

# Zero-based id assigned during pattern deduplication. Negative values are
# reserved sentinels (see config.UNSET_PATTERN_ID and config.FILLER_PATTERN_ID).
PatternId: TypeAlias = int

# =============================================================================
# PIXEL TYPES
# =============================================================================

# Pixel rectangle inside an asset's backing texture: (x, y, width, height).
PixelRect: TypeAlias = tuple[int, int, int, int]

# Pixel block as returned by RenderableAsset.get_pixel_block.
# Shape is (rows, cols) or (rows, cols, channels); row 0 is the top of the image.
Pixels: TypeAlias = npt.NDArray[np.generic]

# =============================================================================
# RANDOMNESS
# =============================================================================

RandomSeed: TypeAlias = int | str | None
