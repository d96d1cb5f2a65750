import pytest

from pixview.compositor import WindowRect
from pixview.ui import (
    WINDOW_DEFAULT_HEIGHT,
    WINDOW_DEFAULT_WIDTH,
    WINDOW_FULLSCREEN,
    WINDOW_MAX,
    WINDOW_MIN,
    Backend,
    ContentType,
    Cursor,
    UserInterface,
    initial_window,
    parse_position,
    parse_size,
)


class MinimalBackend(Backend):
    def __init__(self):
        self.calls = []

    def draw_begin(self):
        self.calls.append("draw_begin")
        return "pixmap"

    def draw_commit(self):
        self.calls.append("draw_commit")

    def width(self):
        return 640

    def height(self):
        return 480


class FullBackend(MinimalBackend):
    def close(self):
        self.calls.append("close")

    def event_prepare(self):
        self.calls.append("event_prepare")

    def event_done(self):
        self.calls.append("event_done")

    def set_title(self, name):
        self.calls.append(("set_title", name))

    def set_cursor(self, shape):
        self.calls.append(("set_cursor", shape))

    def set_content_type(self, ctype):
        self.calls.append(("set_content_type", ctype))

    def toggle_fullscreen(self):
        self.calls.append("toggle_fullscreen")


@pytest.fixture
def no_compositor(monkeypatch):
    for name in ("SWAYSOCK", "HYPRLAND_INSTANCE_SIGNATURE", "XDG_RUNTIME_DIR"):
        monkeypatch.delenv(name, raising=False)


def test_parse_position_auto():
    assert parse_position("auto") is None


@pytest.mark.parametrize(
    "value, expected",
    [("10,20", (10, 20)), ("-5, 7", (-5, 7)), ("0x10,8", (16, 8))],
)
def test_parse_position_pair(value, expected):
    assert parse_position(value) == expected


@pytest.mark.parametrize("value", ["10", "a,b", "1,2,3", ""])
def test_parse_position_invalid(value):
    with pytest.raises(ValueError):
        parse_position(value)


def test_parse_size_fullscreen():
    assert parse_size("fullscreen") == (WINDOW_FULLSCREEN, WINDOW_FULLSCREEN)


def test_parse_size_from_image():
    assert parse_size("image", (640, 480)) == (640, 480)


def test_parse_size_from_image_unknown():
    with pytest.raises(ValueError):
        parse_size("image")


def test_parse_size_explicit():
    assert parse_size("800,600") == (800, 600)


@pytest.mark.parametrize(
    "value",
    [f"{WINDOW_MIN},600", f"800,{WINDOW_MAX}", "800", "x,600"],
)
def test_parse_size_invalid(value):
    with pytest.raises(ValueError):
        parse_size(value)


def test_initial_window_auto_position(no_compositor):
    rect = initial_window("auto", "800,600")
    assert rect == WindowRect(None, None, 800, 600)


def test_initial_window_explicit_position(no_compositor):
    rect = initial_window("10,20", "800,600")
    assert (rect.x, rect.y) == (10, 20)


def test_initial_window_invalid_values_use_defaults(no_compositor):
    rect = initial_window("bad", "bad")
    assert rect == WindowRect(None, None, WINDOW_DEFAULT_WIDTH, WINDOW_DEFAULT_HEIGHT)


def test_initial_window_fullscreen(no_compositor):
    rect = initial_window("auto", "fullscreen")
    assert (rect.width, rect.height) == (WINDOW_FULLSCREEN, WINDOW_FULLSCREEN)


def test_initial_window_huge_image_falls_back(no_compositor):
    rect = initial_window("auto", "image", (WINDOW_MAX + 1, 100))
    assert (rect.width, rect.height) == (WINDOW_DEFAULT_WIDTH, WINDOW_DEFAULT_HEIGHT)


def test_initial_window_image_size(no_compositor):
    rect = initial_window("auto", "image", (640, 480))
    assert (rect.width, rect.height) == (640, 480)


def test_initial_window_overlay_without_compositor(no_compositor):
    rect = initial_window("10,20", "800,600", overlay=True)
    assert rect == WindowRect(10, 20, 800, 600)


def test_backend_is_abstract():
    with pytest.raises(TypeError):
        Backend()


def test_ui_forwards_drawing_and_size():
    backend = MinimalBackend()
    ui = UserInterface(backend)
    assert ui.draw_begin() == "pixmap"
    ui.draw_commit()
    assert backend.calls == ["draw_begin", "draw_commit"]
    assert (ui.width(), ui.height()) == (640, 480)


def test_ui_optional_calls_skipped_when_missing():
    backend = MinimalBackend()
    ui = UserInterface(backend)
    ui.event_prepare()
    ui.event_done()
    ui.set_title("a.png")
    ui.set_cursor(Cursor.DRAG)
    ui.set_content_type(ContentType.ANIMATION)
    ui.toggle_fullscreen()
    assert backend.calls == []


def test_ui_optional_calls_forwarded():
    backend = FullBackend()
    ui = UserInterface(backend)
    ui.event_prepare()
    ui.event_done()
    ui.set_title("a.png")
    ui.set_cursor(Cursor.HIDE)
    ui.set_content_type(True)
    ui.toggle_fullscreen()
    assert backend.calls == [
        "event_prepare",
        "event_done",
        ("set_title", "a.png"),
        ("set_cursor", Cursor.HIDE),
        ("set_content_type", ContentType.ANIMATION),
        "toggle_fullscreen",
    ]


def test_ui_content_type_from_false():
    backend = FullBackend()
    UserInterface(backend).set_content_type(False)
    assert backend.calls == [("set_content_type", ContentType.IMAGE)]


def test_ui_close_closes_backend_once():
    backend = FullBackend()
    ui = UserInterface(backend)
    ui.close()
    ui.close()
    assert backend.calls == ["close"]


def test_ui_closed_raises():
    ui = UserInterface(MinimalBackend())
    ui.close()
    with pytest.raises(RuntimeError):
        ui.draw_begin()
    with pytest.raises(RuntimeError):
        ui.width()