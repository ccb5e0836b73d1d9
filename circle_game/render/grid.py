"""
Grid rendering - Print layout for the circle game.

The grid is purely presentational: it shows the title once (when there
is one) above every current word in current order, five per row. It
does not deduplicate or drop blanks.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from jinja2 import Environment, PackageLoader, select_autoescape

GRID_COLUMNS = 5

_environment: Environment | None = None


def get_environment() -> Environment:
    global _environment
    if _environment is None:
        _environment = Environment(
            loader=PackageLoader("circle_game", "templates"),
            autoescape=select_autoescape(["html"]),
        )
    return _environment


@dataclass(frozen=True)
class GridLayout:
    """Words laid out in a fixed number of columns."""
    title: str
    words: tuple[str, ...]
    columns: int = GRID_COLUMNS

    @classmethod
    def create(cls, title: str, words: Iterable[str], columns: int = GRID_COLUMNS) -> GridLayout:
        return cls(title=title, words=tuple(words), columns=columns)

    @property
    def show_title(self) -> bool:
        return bool(self.title)


def render_grid_html(
    title: str,
    words: Iterable[str],
    back_url: str | None = None,
    reset_url: str | None = None,
) -> str:
    """
    Render the printable grid page.

    Args:
        title: Heading; omitted from the page when empty
        words: Words in display order
        back_url: Optional link target for the "back to start" control
        reset_url: Optional form target that resets the session first
    """
    layout = GridLayout.create(title, words)
    template = get_environment().get_template("grid.html")
    return template.render(
        layout=layout,
        back_url=back_url,
        reset_url=reset_url,
    )
