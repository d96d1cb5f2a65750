"""User interface front end: window setup and a thin layer over a backend."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Optional, Tuple

from . import compositor
from .compositor import WindowRect

#: Default window width, in pixels.
WINDOW_DEFAULT_WIDTH = 1280
#: Default window height, in pixels.
WINDOW_DEFAULT_HEIGHT = 720
#: Window size value that stands for full screen mode.
WINDOW_FULLSCREEN = 0
#: Lower bound of a window side, in pixels.
WINDOW_MIN = 10
#: Upper bound of a window side, in pixels.
WINDOW_MAX = 20000

#: Position value meaning "let the compositor decide".
POSITION_AUTO = "auto"
#: Size value meaning "full screen".
SIZE_FULLSCREEN = "fullscreen"
#: Size value meaning "take the size of the first image".
SIZE_FROM_IMAGE = "image"

_NUMBER = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)\s*")

_log = logging.getLogger(__name__)


class Cursor(IntEnum):
    """Mouse pointer shapes."""

    DEFAULT = 0
    DRAG = 1
    HIDE = 2


class ContentType(IntEnum):
    """Kind of content shown on the window surface."""

    IMAGE = 0
    ANIMATION = 1


def _to_int(text: str) -> int:
    """Parse an integer with a decimal, octal (leading 0) or hex (0x) form."""
    match = _NUMBER.fullmatch(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    sign, digits = match.groups()
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    elif len(digits) > 1 and digits.startswith("0"):
        value = int(digits[1:], 8)
    else:
        value = int(digits, 10)
    return -value if sign == "-" else value


def _pair(value: str) -> Tuple[int, int]:
    parts = value.split(",")
    if len(parts) != 2:
        raise ValueError(f"expected two comma separated numbers: {value!r}")
    return _to_int(parts[0]), _to_int(parts[1])


def parse_position(value: str) -> Optional[Tuple[int, int]]:
    """Parse a window position: ``auto`` gives None, ``x,y`` a pair."""
    if value == POSITION_AUTO:
        return None
    return _pair(value)


def parse_size(
    value: str, image_size: Optional[Tuple[int, int]] = None
) -> Tuple[int, int]:
    """Parse a window size: ``fullscreen``, ``image`` or ``width,height``.

    Full screen is reported as a pair of WINDOW_FULLSCREEN values. Raises
    ValueError for malformed or out of range sizes.
    """
    if value == SIZE_FULLSCREEN:
        return WINDOW_FULLSCREEN, WINDOW_FULLSCREEN
    if value == SIZE_FROM_IMAGE:
        if image_size is None:
            raise ValueError("image size is not known")
        return image_size
    width, height = _pair(value)
    for side in (width, height):
        if not WINDOW_MIN < side < WINDOW_MAX:
            raise ValueError(f"window size out of range: {value!r}")
    return width, height


def initial_window(
    position: str,
    size: str,
    image_size: Optional[Tuple[int, int]] = None,
    overlay: bool = False,
) -> WindowRect:
    """Work out the initial window geometry from configuration values.

    Invalid values are logged and replaced with defaults. The returned
    rectangle has ``x`` and ``y`` set to None when the position is left to
    the compositor, and WINDOW_FULLSCREEN width and height for full screen.
    With ``overlay`` the geometry of the currently focused window is used
    when a supported compositor reports one.
    """
    x: Optional[int] = None
    y: Optional[int] = None
    width, height = WINDOW_DEFAULT_WIDTH, WINDOW_DEFAULT_HEIGHT

    try:
        pos = parse_position(position)
    except ValueError as exc:
        _log.warning("invalid window position: %s", exc)
        pos = None
    if pos is not None:
        x, y = pos

    try:
        width, height = parse_size(size, image_size)
    except ValueError as exc:
        _log.warning("invalid window size: %s", exc)

    if width == WINDOW_FULLSCREEN or height == WINDOW_FULLSCREEN:
        return WindowRect(x, y, width, height)

    if overlay:
        focus = compositor.get_focus()
        if focus is not None:
            x, y, width, height = focus.x, focus.y, focus.width, focus.height

    if not (WINDOW_MIN <= width <= WINDOW_MAX and WINDOW_MIN <= height <= WINDOW_MAX):
        width, height = WINDOW_DEFAULT_WIDTH, WINDOW_DEFAULT_HEIGHT

    return WindowRect(x, y, width, height)


class Backend(ABC):
    """A window system driving the display.

    A backend may also provide ``event_prepare()``, ``event_done()``,
    ``set_title(name)``, ``set_cursor(shape)``, ``set_content_type(ctype)``
    and ``toggle_fullscreen()``; the user interface calls them when present.
    """

    def close(self) -> None:
        """Release the window system; a backend without resources keeps this."""

    @abstractmethod
    def draw_begin(self) -> Any:
        """Start a redraw and return the window pixmap, or None if not ready."""

    @abstractmethod
    def draw_commit(self) -> None:
        """Finish a redraw and show the result."""

    @abstractmethod
    def width(self) -> int:
        """Window width in pixels."""

    @abstractmethod
    def height(self) -> int:
        """Window height in pixels."""


class UserInterface:
    """Window management on top of a backend."""

    def __init__(self, backend: Backend):
        self._backend: Optional[Backend] = backend

    def _active(self) -> Backend:
        if self._backend is None:
            raise RuntimeError("user interface is closed")
        return self._backend

    def _optional(self, name: str, *args: Any) -> None:
        handler = getattr(self._active(), name, None)
        if callable(handler):
            handler(*args)

    def close(self) -> None:
        """Close the backend; further calls raise RuntimeError."""
        if self._backend is not None:
            self._backend.close()
        self._backend = None

    def event_prepare(self) -> None:
        """Prepare the window system to read events."""
        self._optional("event_prepare")

    def event_done(self) -> None:
        """Notify the window system that events were read."""
        self._optional("event_done")

    def draw_begin(self) -> Any:
        """Begin a redraw; returns the window pixmap or None."""
        return self._active().draw_begin()

    def draw_commit(self) -> None:
        """Finish a redraw."""
        self._active().draw_commit()

    def set_title(self, name: str) -> None:
        """Set the window title from the current file name."""
        self._optional("set_title", name)

    def set_cursor(self, shape: Cursor) -> None:
        """Set the mouse pointer shape."""
        self._optional("set_cursor", Cursor(shape))

    def set_content_type(self, ctype: ContentType) -> None:
        """Set the surface content type; a bool means "is animation"."""
        self._optional("set_content_type", ContentType(int(ctype)))

    def width(self) -> int:
        """Window width in pixels."""
        return self._active().width()

    def height(self) -> int:
        """Window height in pixels."""
        return self._active().height()

    def toggle_fullscreen(self) -> None:
        """Switch full screen mode on or off."""
        self._optional("toggle_fullscreen")