"""Querying and steering Sway and Hyprland over their IPC sockets."""

from __future__ import annotations

import json
import logging
import os
import socket
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Tuple, Union

#: Largest Hyprland response read from the socket, in bytes.
MAX_RESPONSE_LEN = 16384

_SWAY_MAGIC = b"i3-ipc"
_SWAY_HEADER = struct.Struct("=6sII")
#: Size of the Sway IPC message header, in bytes.
SWAY_HEADER_SIZE = _SWAY_HEADER.size

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_log = logging.getLogger(__name__)


class SwayMessage(IntEnum):
    """Sway IPC message types in use."""

    RUN_COMMAND = 0
    GET_TREE = 4


class CompositorError(Exception):
    """Compositor IPC is unavailable or returned something unusable."""


@dataclass(frozen=True)
class WindowRect:
    """Position and size of a window."""

    x: int
    y: int
    width: int
    height: int


# ------------------------------------------------------------------ wire level


def pack_sway_message(
    msg_type: int, payload: Union[str, bytes, None] = None
) -> bytes:
    """Encode a Sway IPC message: magic, payload length, type, payload."""
    if payload is None:
        body = b""
    elif isinstance(payload, str):
        body = payload.encode()
    else:
        body = bytes(payload)
    return _SWAY_HEADER.pack(_SWAY_MAGIC, len(body), int(msg_type)) + body


def unpack_sway_header(data: bytes) -> Tuple[int, int]:
    """Decode a Sway IPC header into ``(payload_length, message_type)``."""
    if len(data) != SWAY_HEADER_SIZE:
        raise CompositorError(
            f"truncated IPC header: {len(data)} of {SWAY_HEADER_SIZE} bytes"
        )
    magic, length, msg_type = _SWAY_HEADER.unpack(data)
    if magic != _SWAY_MAGIC:
        raise CompositorError(f"invalid IPC magic: {magic!r}")
    return length, msg_type


def _connect(path: str) -> socket.socket:
    if not path:
        raise CompositorError("invalid IPC socket path")
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.connect(path)
    except (OSError, ValueError) as exc:
        sock.close()
        raise CompositorError(f"failed to connect IPC socket {path}: {exc}") from exc
    return sock


def _send(sock: socket.socket, data: bytes) -> None:
    try:
        sock.sendall(data)
    except OSError as exc:
        raise CompositorError(f"IPC write error: {exc}") from exc


def _recv(sock: socket.socket, size: int) -> bytes:
    """Read up to ``size`` bytes, stopping early at end of stream."""
    chunks = bytearray()
    while len(chunks) < size:
        try:
            data = sock.recv(size - len(chunks))
        except OSError as exc:
            raise CompositorError(f"IPC read error: {exc}") from exc
        if not data:
            break
        chunks += data
    return bytes(chunks)


def _parse_json(data: bytes) -> Any:
    try:
        return json.loads(data.decode())
    except (UnicodeDecodeError, ValueError) as exc:
        raise CompositorError(f"invalid JSON response: {exc}") from exc


# ------------------------------------------------------------- JSON helpers


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        number = int(value)
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float):
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            raise CompositorError(
                f"JSON scheme error: field {name} not a number"
            ) from None
    else:
        raise CompositorError(f"JSON scheme error: field {name} not a number")
    return min(max(number, _INT32_MIN), _INT32_MAX)


def _read_int(node: Any, name: Optional[str] = None) -> int:
    if name is not None:
        if not isinstance(node, dict) or name not in node:
            raise CompositorError(f"JSON scheme error: field {name} not found")
        node = node[name]
    return _to_int(node, name or "^")


def _read_pair(node: Any, name: str) -> Tuple[int, int]:
    if not isinstance(node, dict) or name not in node:
        raise CompositorError(f"JSON scheme error: field {name} not found")
    items = node[name]
    if not isinstance(items, list) or len(items) < 2:
        raise CompositorError(f"JSON scheme error: field {name} not a pair")
    return _to_int(items[0], name), _to_int(items[1], name)


def _find_node(items: Any, name: str, value: int) -> Any:
    """Find the array element whose ``name`` field equals ``value``."""
    for obj in items if isinstance(items, list) else ():
        try:
            if _read_int(obj, name) == value:
                return obj
        except CompositorError:
            continue
    raise CompositorError(f"JSON node with name {name} and value {value} not found")


# ------------------------------------------------------------------- Sway


def find_focused(node: Any) -> Optional[dict]:
    """Depth-first search of a Sway tree for the focused node."""
    if not isinstance(node, dict):
        return None
    if node.get("focused"):
        return node
    for key in ("nodes", "floating_nodes"):
        children = node.get(key)
        if not isinstance(children, list):
            continue
        for child in children:
            focus = find_focused(child)
            if focus is not None:
                return focus
    return None


def sway_focus_rect(tree: Any) -> WindowRect:
    """Geometry of the focused window in a Sway ``get_tree`` response."""
    focus = find_focused(tree)
    if focus is None:
        raise CompositorError("focused window not found")
    rect = focus.get("rect")
    wnd = focus.get("window_rect")
    if rect is None or wnd is None:
        raise CompositorError("focused node has no geometry")

    x = _read_int(rect, "x")
    y = _read_int(rect, "y")
    x_offset = _read_int(wnd, "x")
    y_offset = _read_int(wnd, "y")
    width = _read_int(wnd, "width")
    if width <= 0:
        raise CompositorError(f"invalid window width {width}")
    height = _read_int(wnd, "height")
    if height <= 0:
        raise CompositorError(f"invalid window height {height}")
    return WindowRect(x + x_offset, y + y_offset, width, height)


def _sway_socket() -> socket.socket:
    path = os.environ.get("SWAYSOCK")
    if not path:
        raise CompositorError("SWAYSOCK is not set")
    return _connect(path)


def _sway_request(
    sock: socket.socket, msg_type: SwayMessage, payload: Optional[str] = None
) -> Any:
    _send(sock, pack_sway_message(msg_type, payload))
    length, _ = unpack_sway_header(_recv(sock, SWAY_HEADER_SIZE))
    body = _recv(sock, length)
    if not body:
        raise CompositorError("empty IPC response")
    return _parse_json(body)


def sway_get_focus() -> WindowRect:
    """Ask Sway for the geometry of the focused window."""
    with _sway_socket() as sock:
        tree = _sway_request(sock, SwayMessage.GET_TREE)
    return sway_focus_rect(tree)


def sway_overlay(wnd: WindowRect) -> None:
    """Make Sway open this process's window floating at ``wnd``'s position."""
    pid = os.getpid()
    commands = (
        f"for_window [pid={pid}] floating enable",
        f"for_window [pid={pid}] move absolute position {wnd.x} {wnd.y}",
    )
    with _sway_socket() as sock:
        for cmd in commands:
            _sway_request(sock, SwayMessage.RUN_COMMAND, cmd)


# --------------------------------------------------------------- Hyprland


def _hyprland_request(request: str) -> Any:
    signature = os.environ.get("HYPRLAND_INSTANCE_SIGNATURE")
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR")
    if not signature or not runtime_dir:
        raise CompositorError("Hyprland instance is not available")
    path = f"{runtime_dir}/hypr/{signature}/.socket.sock"

    with _connect(path) as sock:
        _send(sock, request.encode())
        data = _recv(sock, MAX_RESPONSE_LEN)

    if data[:1] in (b"[", b"{"):
        return _parse_json(data)
    if data.startswith(b"ok"):
        return {}
    raise CompositorError(f"unexpected Hyprland response: {data[:64]!r}")


def _hyprland_client_rect(clients: Any) -> Tuple[WindowRect, int]:
    focus = _find_node(clients, "focusHistoryID", 0)
    x, y = _read_pair(focus, "at")
    width, height = _read_pair(focus, "size")
    if width <= 0 or height <= 0:
        raise CompositorError(f"invalid window size {width}x{height}")
    monitor_id = _read_int(focus, "monitor")
    return WindowRect(x, y, width, height), monitor_id


def hyprland_focus_rect(clients: Any, monitors: Any = None) -> WindowRect:
    """Geometry of the focused client, relative to its monitor if known."""
    rect, monitor_id = _hyprland_client_rect(clients)
    if monitors is None:
        return rect
    try:
        monitor = _find_node(monitors, "id", monitor_id)
        mon_x = _read_int(monitor, "x")
        mon_y = _read_int(monitor, "y")
    except CompositorError as exc:
        _log.warning("%s", exc)
        return rect
    return WindowRect(rect.x - mon_x, rect.y - mon_y, rect.width, rect.height)


def hyprland_get_focus() -> WindowRect:
    """Ask Hyprland for the geometry of the focused window."""
    clients = _hyprland_request("j/clients")
    rect = hyprland_focus_rect(clients)
    try:
        monitors = _hyprland_request("j/monitors")
    except CompositorError as exc:
        _log.warning("%s", exc)
        return rect
    return hyprland_focus_rect(clients, monitors)


def _hyprland_app_id(app_id: str) -> str:
    # window rules cannot match by pid, so the class name carries it
    return f"{app_id}_{os.getpid()}"


def hyprland_overlay(wnd: WindowRect, app_id: str) -> str:
    """Set Hyprland rules for a floating window; returns the app id to use."""
    new_id = _hyprland_app_id(app_id)
    _hyprland_request(f"keyword windowrule float,class:{new_id}")
    _hyprland_request(f"keyword windowrule move {wnd.x} {wnd.y},class:{new_id}")
    return new_id


# ----------------------------------------------------------------- common


def get_focus() -> Optional[WindowRect]:
    """Geometry of the focused window from Sway or Hyprland, None if neither."""
    for query in (sway_get_focus, hyprland_get_focus):
        try:
            return query()
        except CompositorError as exc:
            _log.debug("%s", exc)
    return None


def overlay(wnd: WindowRect, app_id: str) -> str:
    """Request an overlay window at ``wnd``; returns the app id to use."""
    try:
        sway_overlay(wnd)
        return app_id
    except CompositorError as exc:
        _log.debug("%s", exc)
    try:
        return hyprland_overlay(wnd, app_id)
    except CompositorError as exc:
        _log.debug("%s", exc)
        return _hyprland_app_id(app_id)