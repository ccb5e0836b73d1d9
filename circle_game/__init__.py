"""
Circle Game - Printable word grids from vocabulary worksheets.

Turns a photo of a vocabulary worksheet (or a hand-authored JSON word list)
into a printable 5-column word grid for the classroom circle game:
- Extraction gateway (photo -> vision model -> word list)
- Worksheet session workflow (upload, review, edit, merge)
- Print-oriented grid rendering
"""

__version__ = "0.1.0"
