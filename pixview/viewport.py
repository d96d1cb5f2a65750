"""Viewport: the visible part of an image placed on a window surface."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

#: Smallest size, in pixels, an image may be shrunk to along its longer side.
MIN_SCALE = 10
#: Largest allowed scale factor.
MAX_SCALE = 100.0


class ScaleMode(Enum):
    """Fixed image scale modes, in switching order."""

    FIT_OPTIMAL = "optimal"  # fit to window, but not more than 100%
    FIT_WINDOW = "fit"
    FIT_WIDTH = "width"
    FIT_HEIGHT = "height"
    FILL_WINDOW = "fill"
    REAL_SIZE = "real"
    KEEP_ZOOM = "keep"  # keep absolute zoom across images


class Position(Enum):
    """Default position of the image inside the window."""

    FREE = "free"
    CENTER = "center"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


class MoveDirection(Enum):
    """Direction of a viewport move."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


_X_LEFT = {Position.LEFT, Position.TOP_LEFT, Position.BOTTOM_LEFT}
_X_RIGHT = {Position.RIGHT, Position.TOP_RIGHT, Position.BOTTOM_RIGHT}
_Y_TOP = {Position.TOP, Position.TOP_LEFT, Position.TOP_RIGHT}
_Y_BOTTOM = {Position.BOTTOM, Position.BOTTOM_LEFT, Position.BOTTOM_RIGHT}


@dataclass(frozen=True)
class Frame:
    """One image frame: its size in pixels and display duration in ms."""

    width: int
    height: int
    duration: int = 0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid frame size {self.width}x{self.height}")
        if self.duration < 0:
            raise ValueError(f"invalid frame duration {self.duration}")


class Viewport:
    """Scale and position of the current image relative to the window."""

    def __init__(
        self,
        position: Union[Position, str] = Position.CENTER,
        scale: Union[ScaleMode, str] = ScaleMode.FIT_OPTIMAL,
    ):
        self.position = Position(position)
        self.scale_mode = ScaleMode(scale)
        self.frames: Tuple[Frame, ...] = ()
        self.frame = 0
        self.scale = 1.0
        self.x = 0
        self.y = 0
        self.width = 0
        self.height = 0

    # ----------------------------------------------------------------- state

    def current_frame(self) -> Optional[Frame]:
        """Currently displayed frame, or None when no image is attached."""
        return self.frames[self.frame] if self.frames else None

    @property
    def scaled_size(self) -> Tuple[int, int]:
        """Size of the current frame on the window surface, in pixels."""
        pm = self._pixmap()
        return int(self.scale * pm.width), int(self.scale * pm.height)

    def _pixmap(self) -> Frame:
        frame = self.current_frame()
        if frame is None:
            raise RuntimeError("no image attached to the viewport")
        return frame

    # ------------------------------------------------------------- internals

    def _fixup_position(self, force: bool) -> None:
        img_w, img_h = self.scaled_size
        pos = self.position
        fixed = pos is not Position.FREE

        if force or (img_w <= self.width and fixed):
            if pos in _X_LEFT:
                self.x = 0
            elif pos in _X_RIGHT:
                self.x = self.width - img_w
            else:
                self.x = self.width // 2 - img_w // 2
        if force or (img_h <= self.height and fixed):
            if pos in _Y_TOP:
                self.y = 0
            elif pos in _Y_BOTTOM:
                self.y = self.height - img_h
            else:
                self.y = self.height // 2 - img_h // 2

        if fixed:
            # bind to window border
            if self.x > 0 and self.x + img_w > self.width:
                self.x = 0
            if self.y > 0 and self.y + img_h > self.height:
                self.y = 0
            if self.x < 0 and 0 <= self.x + img_w < self.width:
                self.x = self.width - img_w
            if self.y < 0 and 0 <= self.y + img_h < self.height:
                self.y = self.height - img_h

        # don't let the canvas go far out of the window
        if self.x + img_w < 0:
            self.x = -img_w
        if self.x > self.width:
            self.x = self.width
        if self.y + img_h < 0:
            self.y = -img_h
        if self.y > self.height:
            self.y = self.height

    def _scale_fixed(self, mode: ScaleMode) -> None:
        pm = self._pixmap()
        ratio_w = self.width / pm.width
        ratio_h = self.height / pm.height

        if mode in (ScaleMode.KEEP_ZOOM, ScaleMode.FIT_OPTIMAL):
            factor = min(ratio_w, ratio_h, 1.0)
        elif mode is ScaleMode.FIT_WINDOW:
            factor = min(ratio_w, ratio_h)
        elif mode is ScaleMode.FIT_WIDTH:
            factor = ratio_w
        elif mode is ScaleMode.FIT_HEIGHT:
            factor = ratio_h
        elif mode is ScaleMode.FILL_WINDOW:
            factor = max(ratio_w, ratio_h)
        else:
            factor = 1.0

        self.set_scale(factor)

    # ------------------------------------------------------------ operations

    def reset(self, frames: Optional[Iterable[Frame]]) -> None:
        """Attach frames of a new image, or detach the image with None."""
        new_frames = tuple(frames) if frames is not None else ()
        if not new_frames:
            self.frames = ()
            self.frame = 0
            return

        prev = self.current_frame()
        self.frames = new_frames
        self.frame = 0

        if self.scale_mode is not ScaleMode.KEEP_ZOOM:
            self._scale_fixed(self.scale_mode)
            self._fixup_position(True)
        elif prev is None:
            self._scale_fixed(ScaleMode.FIT_OPTIMAL)
            self._fixup_position(True)
        else:
            cur = self._pixmap()
            diff_w = prev.width - cur.width
            diff_h = prev.height - cur.height
            self.x = int(self.x + math.floor(self.scale * diff_w) / 2.0)
            self.y = int(self.y + math.floor(self.scale * diff_h) / 2.0)
            self._fixup_position(False)

    def resize(self, width: int, height: int) -> None:
        """Handle a new window size."""
        self.width = width
        self.height = height
        if self.frames:
            self._scale_fixed(self.scale_mode)
            self._fixup_position(False)

    def switch_frame(self, forward: bool) -> None:
        """Step to the next or previous frame, wrapping around."""
        total = len(self._require_frames())
        self.frame = (self.frame + (1 if forward else -1)) % total

    def _require_frames(self) -> Tuple[Frame, ...]:
        self._pixmap()
        return self.frames

    def move(self, direction: MoveDirection, px: int) -> None:
        """Shift the image by ``px`` pixels."""
        self._pixmap()
        direction = MoveDirection(direction)
        if direction is MoveDirection.UP:
            self.y -= px
        elif direction is MoveDirection.DOWN:
            self.y += px
        elif direction is MoveDirection.LEFT:
            self.x -= px
        else:
            self.x += px
        self._fixup_position(False)

    def rotate(self) -> None:
        """Turn the image by 90 degrees: swap frame sizes, keep it centred."""
        self.frames = tuple(
            replace(f, width=f.height, height=f.width)
            for f in self._require_frames()
        )
        pm = self._pixmap()
        shift = int(self.scale * (pm.width - pm.height) / 2)
        self.x -= shift
        self.y += shift
        self._fixup_position(False)

    def set_default_scale(self, name: Union[ScaleMode, str]) -> ScaleMode:
        """Set the default and current scale mode; ValueError if unknown."""
        mode = ScaleMode(name)
        self.scale_mode = mode
        if self.frames:
            self._scale_fixed(mode)
            self._fixup_position(True)
        return mode

    def switch_scale(self) -> ScaleMode:
        """Advance the default and current scale mode to the next one."""
        modes = list(ScaleMode)
        mode = modes[(modes.index(self.scale_mode) + 1) % len(modes)]
        return self.set_default_scale(mode)

    def set_scale(self, scale: float) -> None:
        """Set an absolute scale factor, keeping the window centre in place."""
        pm = self._pixmap()

        half_w = self.width / 2.0
        half_h = self.height / 2.0
        center_x = half_w / self.scale - self.x / self.scale
        center_y = half_h / self.scale - self.y / self.scale

        if scale > MAX_SCALE:
            scale = MAX_SCALE
        else:
            scale = max(scale, MIN_SCALE / pm.width, MIN_SCALE / pm.height)

        self.scale = scale
        self.x = int(half_w - center_x * self.scale)
        self.y = int(half_h - center_y * self.scale)
        self._fixup_position(False)

    def animation_delay(self) -> int:
        """Delay before the next animation frame in ms; 0 when not animated."""
        frame = self.current_frame()
        if frame is None or len(self.frames) < 2:
            return 0
        return frame.duration