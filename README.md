# pixview

Core pieces of an image viewer, usable on their own. It has no dependencies
beyond the standard library.

- `pixview.viewport` places an image on a window surface. It covers the
  scale modes in `ScaleMode` (`optimal`, `fit`, `width`, `height`, `fill`,
  `real`, `keep`) and the anchored positions in `Position`. It moves and
  rotates the image, zooms around the window centre and steps through
  animation frames (`Frame`).
- `pixview.tpool` provides `ThreadPool`, a fixed set of worker threads with
  a FIFO queue. Tasks can have cleanup callbacks. Pending work can be
  cancelled, and the pool can wait until it is idle.
- `pixview.shellcmd` runs a command in the user's shell (`$SHELL`, or
  `/bin/sh` when it is unset) and collects its output (`run_shell`). It
  also expands `%` templates with a file path (`expand_expression`).
- `pixview.compositor` asks Sway or Hyprland for the geometry of the focused
  window (`get_focus`) and sets overlay window rules (`overlay`). It talks to
  them over their IPC sockets, which are found through `SWAYSOCK` or through
  `HYPRLAND_INSTANCE_SIGNATURE` and `XDG_RUNTIME_DIR`.
- `pixview.ui` parses the settings for the initial window position and size
  (`parse_position`, `parse_size`, `initial_window`). It also wraps a drawing
  `Backend` in `UserInterface`.

## Installation

```
pip install .
```

## Examples

Expand a command template and run it:

```python
from pixview.shellcmd import expand_expression, run_shell

cmd = expand_expression("ls -l %", "/tmp/picture.png")
result = run_shell(cmd, timeout=10.0)
print(result.returncode, result.ok, result.stdout.decode())
```

In a template, `%%` stands for a literal `%`. The timeout limits how long
the command may stay inactive, and it starts again whenever the command
writes output. `run_shell` raises:

- `ShellTimeoutError` when that limit is reached; the process is killed and
  the output gathered so far is attached to the error.
- `ChildProcessError` when a signal kills the command.
- `ValueError` for an empty command.

Run work in the background:

```python
from pixview.tpool import ThreadPool

with ThreadPool() as pool:          # size defaults to CPUs - 1, from 1 to 8
    pool.submit(lambda: print("loading"), lambda: print("done"))
    pool.wait()
```

Fit an image into a window:

```python
from pixview.viewport import Frame, Position, ScaleMode, Viewport

vp = Viewport(Position.CENTER, ScaleMode.FIT_OPTIMAL)
vp.resize(800, 600)
vp.reset([Frame(1600, 1200)])
print(vp.scale, vp.x, vp.y)        # 0.5 0 0
print(vp.switch_scale())           # ScaleMode.FIT_WINDOW
vp.set_default_scale("real")       # unknown names raise ValueError
```

Work out the initial window geometry:

```python
from pixview.ui import initial_window

print(initial_window("auto", "640,480"))
# WindowRect(x=None, y=None, width=640, height=480)
```

When a setting is invalid, a warning is logged and the default of 1280x720
at an automatic position is used. With `overlay=True`, the geometry of the
focused window is used if Sway or Hyprland reports it.

## What it does not do

`pixview` does not open windows, decode image files or draw pixels.
`UserInterface` drives a `Backend` subclass that you supply. That subclass
must implement `draw_begin`, `draw_commit`, `width` and `height`, and may
also provide `event_prepare`, `event_done`, `set_title`, `set_cursor`,
`set_content_type` and `toggle_fullscreen`. The package installs no
command-line program.

## Tests

```
pip install .[test]
pytest
```