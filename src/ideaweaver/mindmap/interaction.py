# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Pointer gesture state machine.

"""
Interaction controller.

Turns raw pointer events into pans, node drags and link picks:

    IDLE --down on canvas--> PANNING --up--> IDLE
    IDLE --down on node----> DRAGGING --up--> IDLE (reassign + persist)
    IDLE --arm_link--------> LINKING --down on node--> IDLE (link applied)

The pointer that starts a pan or drag is captured; events from any other
pointer are ignored until it is released.
"""

from enum import Enum
from typing import Optional
import logging

from .errors import MindmapError
from .model import Point
from .session import LinkMode, MindmapSession

logger = logging.getLogger(__name__)


class GestureState(Enum):
    IDLE = 'idle'
    PANNING = 'panning'
    DRAGGING = 'dragging'
    LINKING = 'linking'


class InteractionController:
    """Drives a :class:`MindmapSession` from pointer events."""

    def __init__(self, session: MindmapSession):
        self.session = session
        self.state = GestureState.IDLE
        self.captured_pointer: Optional[int] = None
        self.drag_node_id: Optional[str] = None
        self.link_mode: Optional[LinkMode] = None
        self.link_source: Optional[str] = None
        self._last_point: Optional[Point] = None

    @property
    def viewport(self):
        return self.session.viewport

    def _ignored(self, pointer_id: int) -> bool:
        return self.captured_pointer is not None and pointer_id != self.captured_pointer

    def _capture(self, pointer_id: int, point: Point) -> None:
        self.captured_pointer = pointer_id
        self._last_point = point

    def _release(self) -> None:
        self.captured_pointer = None
        self.drag_node_id = None
        self._last_point = None
        self.state = GestureState.IDLE

    # ------------------------------------------------------------------
    # Linking
    # ------------------------------------------------------------------

    def arm_link(self, mode: LinkMode, source_id: str) -> None:
        """Wait for the next node pick to link ``source_id`` under it."""
        self.session.node(source_id)
        self._release()
        self.state = GestureState.LINKING
        self.link_mode = mode
        self.link_source = source_id
        self.session.selected_id = source_id

    def cancel_link(self) -> None:
        if self.state is GestureState.LINKING:
            self.state = GestureState.IDLE
        self.link_mode = None
        self.link_source = None

    def _complete_link(self, target_id: str) -> None:
        mode, source = self.link_mode, self.link_source
        self.cancel_link()
        try:
            self.session.apply_link(mode, source, target_id)
        except MindmapError as e:
            self.session.status.post(str(e), 'error')

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(
        self,
        pointer_id: int,
        screen_point: Point,
        node_id: Optional[str] = None
    ) -> GestureState:
        """
        Start a gesture.

        Args:
            pointer_id: Id of the pointer (mouse, pen or touch contact).
            screen_point: Pointer location in screen space.
            node_id: Node under the pointer; hit-tested when omitted.
        """
        if self._ignored(pointer_id):
            return self.state
        self.viewport.note_pointer(screen_point)
        if node_id is None:
            node_id = self.session.hit_test(screen_point)

        if node_id is None:
            self.session.selected_id = None
            self.cancel_link()
            self.state = GestureState.PANNING
            self._capture(pointer_id, screen_point)
            return self.state

        if self.state is GestureState.LINKING:
            self._complete_link(node_id)
            return self.state

        self.session.selected_id = node_id
        self.state = GestureState.DRAGGING
        self.drag_node_id = node_id
        self._capture(pointer_id, screen_point)
        return self.state

    def pointer_move(self, pointer_id: int, screen_point: Point) -> GestureState:
        if self._ignored(pointer_id):
            return self.state
        self.viewport.note_pointer(screen_point)
        if self._last_point is None:
            return self.state

        dx = screen_point[0] - self._last_point[0]
        dy = screen_point[1] - self._last_point[1]
        self._last_point = screen_point

        if self.state is GestureState.DRAGGING:
            wdx, wdy = self.viewport.world_delta((dx, dy))
            self.session.drag_node(self.drag_node_id, wdx, wdy)
        elif self.state is GestureState.PANNING:
            # Content follows the pointer.
            self.viewport.pan_by((-dx, -dy))
        return self.state

    def pointer_up(self, pointer_id: int, screen_point: Optional[Point] = None) -> GestureState:
        """Finish the captured gesture; a drag ends in reassignment and a save."""
        if self._ignored(pointer_id):
            return self.state
        if screen_point is not None:
            self.viewport.note_pointer(screen_point)

        try:
            if self.state is GestureState.DRAGGING and self.drag_node_id is not None:
                self._finish_drag(self.drag_node_id)
        finally:
            if self.state is not GestureState.LINKING:
                self._release()
        return self.state

    def _finish_drag(self, node_id: str) -> None:
        try:
            self.session.reassign_on_drop(node_id)
        except MindmapError as e:
            logger.warning(f"Drop reassignment for {node_id!r} failed: {e}")
            self.session.status.post(str(e), 'error')
        finally:
            count = self.session.persist_changed_positions()
            logger.debug(f"Drag of {node_id!r} ended; {count} positions queued")

    def pointer_cancel(self, pointer_id: int) -> GestureState:
        """Abort the gesture without reassignment; moved positions stay live."""
        if self._ignored(pointer_id):
            return self.state
        if self.state is not GestureState.LINKING:
            self._release()
        return self.state
