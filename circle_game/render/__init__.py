"""
Render - Printable output for a worksheet draft.
"""

from .grid import GRID_COLUMNS, GridLayout, render_grid_html

__all__ = [
    "GRID_COLUMNS",
    "GridLayout",
    "render_grid_html",
]
