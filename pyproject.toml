[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pixelsprite"
version = "1.0.0"
description = "A small pixel-art sprite editor with frames, layers, animation preview and a JSON sprite format, driven from the terminal."
requires-python = ">=3.10"
dependencies = []
keywords = ["pixel art", "sprite", "animation", "editor", "layers", "frames"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Editors :: Raster-Based",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pixelsprite = "pixelsprite.app:main"

[tool.hatch.build.targets.wheel]
packages = ["pixelsprite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
