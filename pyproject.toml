[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pixview"
version = "0.1.0"
description = "Building blocks for an image viewer: viewport geometry, thread pool, shell commands and compositor integration"
requires-python = ">=3.10"
dependencies = []
keywords = ["image", "viewer", "viewport", "wayland", "sway", "hyprland", "thread-pool"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Viewers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pixview"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
