# pixelsprite

A small editor for pixel-art sprites. A sprite is a list of frames that play
back as an animation; each frame is a stack of layers that are alpha-blended
into the picture you see. The editor is driven from the terminal, and all of
its logic can also be used directly from Python.

## Features

- Sprites of any positive size; the interactive "new sprite" prompt accepts
  1 to 512 pixels per side and defaults to 70×50.
- Brush and eraser with adjustable square sizes and any RGBA drawing colour.
- Multiple frames: add (blank or duplicating the last frame), remove,
  reorder left and right, select.
- Multiple layers per frame: add, remove, select; layers are composited with
  "over" alpha blending.
- Animation playback at a configurable frame rate.
- Save and open sprites as `.ssp` files (plain JSON).

## Installation

```
pip install .
```

## Running the editor

```
pixelsprite [FILE] [--width W] [--height H]
```

The session starts with a new `UNTITLED` sprite of `--width` × `--height`
pixels (70×50 by default) and, if `FILE` is given, opens that sprite. Commands
are then read line by line from standard input; the prompt shows the sprite's
name, with a `*` while there are unsaved changes.

| Command | Effect |
| --- | --- |
| `new` | create a new sprite; asks for width and height |
| `open` | open a sprite; asks for a file name |
| `save` | save to the last location, or ask for a file name |
| `saveas` | ask for a file name and save there |
| `help` | list the commands |
| `brush`, `eraser` | choose the drawing tool |
| `color` | ask for a colour: `#rrggbb`, `#rrggbbaa` or `r,g,b[,a]` |
| `paint X Y` | apply the current tool at pixel (X, Y) |
| `brushsize N`, `erasersize N` | set the tool's square size |
| `fps N` | set the animation frame rate |
| `frame add\|remove\|left\|right\|N` | add, remove, move or select a frame |
| `layer add\|remove\|N` | add, remove or select a layer in the current frame |
| `play`, `stop` | start or stop the animation |
| `show` | print the title and the current frame (`#` for a visible pixel, `.` for a transparent one) |
| `quit`, `exit` | end the session (end of input does too) |

Before `new` or `open` replaces a sprite with unsaved changes, the editor asks
whether to save it first. `frame add` asks whether to duplicate the previous
frame. Errors are reported on standard error and the session continues.

## Using the model from Python

```python
from pixelsprite.editor import Editor

editor = Editor()
editor.create_new_sprite(16, 16)
editor.set_brush_enabled()
editor.set_brush_size(3)
editor.paint_at(8, 8)
editor.add_new_layer()
editor.set_eraser_enabled()
editor.paint_at(8, 8)
editor.serialize_sprite("hero.ssp")
```

The modules:

- `pixelsprite.sprite` — the data model: `Sprite`, `Frame`, `Layer` and the
  `blend_colors` function used to merge layers. `Sprite.to_json` and
  `Sprite.from_json` convert to and from the `.ssp` document; a malformed
  document raises `SpriteFormatError`.
- `pixelsprite.editor` — `Editor`, which holds the sprite and the tool state
  (`Tool`) and reports every change through `Signal` objects such as
  `display_data_updated` and `sprite_save_status_changed`.
- `pixelsprite.panels` — `IconStrip`, the numbered, highlighted icon list used
  for the frame timeline and the layer list.
- `pixelsprite.views` — `Viewport`, `PreviewPanel`, `ViewTransform` and
  `IconBar`, the view models for the canvas, the animation preview and the
  icon rows, plus helpers such as `checker_pattern`, `fit_scale` and
  `ask_sprite_size`.
- `pixelsprite.app` — `MainWindow`, which wires the editor to the panels and
  takes its dialogs as callables, and `main`, the terminal session.

## The `.ssp` format

An `.ssp` file is a JSON object:

```json
{
  "width": 2,
  "height": 1,
  "fps": 1,
  "frames": [
    {
      "layers": [
        {
          "pixels": [
            {"r": 0, "g": 0, "b": 0, "a": 255},
            {"r": 0, "g": 0, "b": 0, "a": 0}
          ]
        }
      ]
    }
  ]
}
```

Pixels are stored row by row, `width × height` entries per layer, each
channel from 0 to 255. Width and height must be positive numbers, every frame
needs at least one layer, and a sprite needs at least one frame; `fps`
defaults to 1.

## What it does not do

- There is no graphical window: the canvas, preview and icon rows are view
  models that keep their state in memory, and the terminal shows the current
  frame only through `show`.
- Animation playback updates the in-memory preview on a timer; nothing is
  drawn to the terminal while it plays.
- Sprites are stored only in the `.ssp` JSON format; there is no import or
  export of image files.

## Running the tests

```
pip install ".[test]"
pytest
```