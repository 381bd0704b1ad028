"""Tool adapters: mutate the scene and hand the history a matching operation."""

from .base import StrokeTool, Tool, ToolContext
from .common import BRUSH_SIZES, brush_footprint, interpolate_line
from .entities import EntityTool
from .erase import EraseTool
from .fill import FillTool, FloodFillResult, flood_fill
from .paint import PaintTool
from .region import Region, RegionTool, copy_region

__all__ = [
    "BRUSH_SIZES",
    "EntityTool",
    "EraseTool",
    "FillTool",
    "FloodFillResult",
    "PaintTool",
    "Region",
    "RegionTool",
    "StrokeTool",
    "Tool",
    "ToolContext",
    "brush_footprint",
    "copy_region",
    "flood_fill",
    "interpolate_line",
]
