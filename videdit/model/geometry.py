"""Display/source coordinate mapping for visual crop selection.

The preview surface draws the source frame letterboxed inside a larger
widget. A selection dragged on that surface is expressed in display pixels
and has to be mapped back onto source pixels before it can become a crop.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Selections smaller than this (in display pixels) are treated as stray clicks.
MIN_SELECTION_SIZE = 10


def round_half_up(value: float) -> int:
    """Round like Qt's qRound: halves always go up."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class Rect:
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @classmethod
    def from_points(cls, x1: int, y1: int, x2: int, y2: int) -> Rect:
        """Rectangle spanned by two corner points, in any drag direction."""
        return cls(min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1))

    def intersected(self, other: Rect) -> Rect:
        left = max(self.x, other.x)
        top = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right <= left or bottom <= top:
            return Rect()
        return Rect(left, top, right - left, bottom - top)


def fit_frame(surface: Size, source: Size) -> Rect:
    """Return the letterboxed rectangle where *source* is drawn on *surface*.

    A source wider than the surface fills the width and is centered
    vertically; otherwise it fills the height and is centered horizontally.
    """
    if surface.is_empty or source.is_empty:
        return Rect()

    if source.aspect_ratio > surface.aspect_ratio:
        width = surface.width
        height = round_half_up(surface.width / source.aspect_ratio)
        return Rect(0, (surface.height - height) // 2, width, height)

    height = surface.height
    width = round_half_up(surface.height * source.aspect_ratio)
    return Rect((surface.width - width) // 2, 0, width, height)


def to_source(selection: Rect, display_frame: Rect, source: Size) -> Rect:
    """Map a display-space selection onto source pixels.

    Parts of the selection outside the frame are clamped away. An empty
    result means "no selection".
    """
    if display_frame.is_empty or source.is_empty:
        return Rect()

    x_scale = source.width / display_frame.width
    y_scale = source.height / display_frame.height

    mapped = Rect(
        round_half_up((selection.x - display_frame.x) * x_scale),
        round_half_up((selection.y - display_frame.y) * y_scale),
        round_half_up(selection.width * x_scale),
        round_half_up(selection.height * y_scale),
    )
    return mapped.intersected(Rect(0, 0, source.width, source.height))


def to_display(source_rect: Rect, display_frame: Rect, source: Size) -> Rect:
    """Inverse of :func:`to_source`: place a source-pixel rect on the surface."""
    if display_frame.is_empty or source.is_empty:
        return Rect()

    x_scale = display_frame.width / source.width
    y_scale = display_frame.height / source.height

    return Rect(
        display_frame.x + round_half_up(source_rect.x * x_scale),
        display_frame.y + round_half_up(source_rect.y * y_scale),
        round_half_up(source_rect.width * x_scale),
        round_half_up(source_rect.height * y_scale),
    )


def selection_to_source(selection: Rect, display_frame: Rect, source: Size) -> Rect:
    """Map a finished drag to source pixels, applying the minimum-size guard.

    The selection is first constrained to the display frame. If what is left
    is smaller than ``MIN_SELECTION_SIZE`` display pixels in either direction,
    the whole frame is selected instead.
    """
    if display_frame.is_empty or source.is_empty:
        return Rect()

    constrained = selection.intersected(display_frame)
    if constrained.width < MIN_SELECTION_SIZE or constrained.height < MIN_SELECTION_SIZE:
        constrained = display_frame
    return to_source(constrained, display_frame, source)
