# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Pan/zoom camera over the mindmap world.

"""
Viewport controller.

Render transform: a world point ``P`` appears on screen at
``(P + pan) * zoom``; the inverse is ``world = screen / zoom - pan``.

Zooming keeps the world point under an anchor fixed on screen. The anchor
defaults to the last known pointer location, then to the viewport centre.
"""

from enum import Enum
from typing import Optional, Tuple
import logging

from ..config import ViewportConfig
from .model import Point
from .optimize.centering import Bounds, fit_to_viewport

logger = logging.getLogger(__name__)


class ScrollAction(Enum):
    """What a scroll/wheel event was interpreted as."""
    PAN = 'pan'
    ZOOM = 'zoom'
    NONE = 'none'


class ViewportController:
    """Owns zoom, pan and screen/world conversion."""

    def __init__(
        self,
        config: Optional[ViewportConfig] = None,
        size: Tuple[float, float] = (1200.0, 700.0)
    ):
        self.config = config or ViewportConfig()
        self.width, self.height = float(size[0]), float(size[1])
        self.zoom = self.clamp_zoom(self.config.zoom_initial)
        self.pan: Point = (0.0, 0.0)
        self.last_pointer: Optional[Point] = None

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def screen_from_world(self, point: Point) -> Point:
        return ((point[0] + self.pan[0]) * self.zoom,
                (point[1] + self.pan[1]) * self.zoom)

    def world_from_screen(self, point: Point) -> Point:
        return (point[0] / self.zoom - self.pan[0],
                point[1] / self.zoom - self.pan[1])

    def world_delta(self, screen_delta: Point) -> Point:
        return (screen_delta[0] / self.zoom, screen_delta[1] / self.zoom)

    @property
    def center(self) -> Point:
        """Screen centre of the viewport."""
        return (self.width / 2, self.height / 2)

    def resize(self, width: float, height: float) -> None:
        self.width, self.height = float(width), float(height)

    def note_pointer(self, point: Point) -> None:
        """Remember the most recent pointer location (screen space)."""
        self.last_pointer = (float(point[0]), float(point[1]))

    def resolve_anchor(self, anchor: Optional[Point] = None) -> Point:
        if anchor is not None:
            return anchor
        if self.last_pointer is not None:
            return self.last_pointer
        return self.center

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def clamp_zoom(self, value: float) -> float:
        return min(self.config.zoom_max, max(self.config.zoom_min, value))

    def zoom_step(self, raw_delta: float) -> float:
        """Signed zoom change for a raw wheel delta (negative delta zooms in)."""
        if raw_delta == 0:
            return 0.0
        cfg = self.config
        direction = 1.0 if raw_delta < 0 else -1.0
        magnitude = min(abs(raw_delta) / cfg.wheel_divisor + cfg.wheel_floor,
                        cfg.wheel_step_max)
        return direction * magnitude

    def zoom_at_point(self, raw_delta: float, anchor: Optional[Point] = None) -> float:
        """
        Zoom by a wheel delta keeping the world point under ``anchor`` fixed.

        Args:
            raw_delta: Wheel delta; the sign picks the direction.
            anchor: Screen point to hold fixed (default: last pointer/centre).

        Returns:
            The new zoom level.
        """
        anchor = self.resolve_anchor(anchor)
        new_zoom = self.clamp_zoom(self.zoom + self.zoom_step(raw_delta))
        if new_zoom == self.zoom:
            return self.zoom

        world_at_anchor = self.world_from_screen(anchor)
        self.zoom = new_zoom
        self.pan = (anchor[0] / new_zoom - world_at_anchor[0],
                    anchor[1] / new_zoom - world_at_anchor[1])
        return self.zoom

    def zoom_in(self) -> float:
        return self.zoom_at_point(-self.config.button_delta)

    def zoom_out(self) -> float:
        return self.zoom_at_point(self.config.button_delta)

    def set_zoom(self, value: float, anchor: Optional[Point] = None) -> float:
        """Jump to an absolute zoom level, anchored like :meth:`zoom_at_point`."""
        anchor = self.resolve_anchor(anchor)
        world_at_anchor = self.world_from_screen(anchor)
        self.zoom = self.clamp_zoom(value)
        self.pan = (anchor[0] / self.zoom - world_at_anchor[0],
                    anchor[1] / self.zoom - world_at_anchor[1])
        return self.zoom

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def pan_by(self, screen_delta: Point) -> Point:
        """Scroll the view by a screen-space delta."""
        dx, dy = self.world_delta(screen_delta)
        self.pan = (self.pan[0] - dx, self.pan[1] - dy)
        return self.pan

    def center_on(self, world_point: Point) -> Point:
        """Put ``world_point`` at the viewport centre."""
        self.pan = (self.width / (2 * self.zoom) - world_point[0],
                    self.height / (2 * self.zoom) - world_point[1])
        return self.pan

    def fit(self, bounds: Optional[Bounds]) -> None:
        """Frame ``bounds`` in the viewport without zooming past 1.0."""
        if bounds is None:
            self.center_on((0.0, 0.0))
            return
        zoom, pan = fit_to_viewport(
            bounds, self.width, self.height,
            padding=self.config.fit_padding,
            min_zoom=self.config.zoom_min,
            max_zoom=min(1.0, self.config.zoom_max))
        self.zoom = self.clamp_zoom(zoom)
        self.pan = pan
        logger.debug(f"Fit view: zoom={self.zoom:.3f} pan=({pan[0]:.1f}, {pan[1]:.1f})")

    # ------------------------------------------------------------------
    # Gesture classification
    # ------------------------------------------------------------------

    def handle_scroll(
        self,
        dx: float,
        dy: float,
        dz: float = 0.0,
        ctrl: bool = False,
        meta: bool = False,
        at: Optional[Point] = None
    ) -> ScrollAction:
        """
        Interpret a wheel/trackpad event.

        Two-axis scroll without modifiers pans. Ctrl/meta or a pinch
        (non-zero ``dz``) zooms at ``at``; ``dz`` is the zoom delta when
        ``dy`` is zero.
        """
        if at is not None:
            self.note_pointer(at)
        if ctrl or meta or abs(dz) > 0:
            delta = dy if dy != 0 else dz
            if delta == 0:
                return ScrollAction.NONE
            self.zoom_at_point(delta, at)
            return ScrollAction.ZOOM
        if dx == 0 and dy == 0:
            return ScrollAction.NONE
        self.pan_by((dx, dy))
        return ScrollAction.PAN

    def state(self) -> Tuple[float, Point]:
        return self.zoom, self.pan
