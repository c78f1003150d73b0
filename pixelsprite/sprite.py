"""Sprite document model: sprites made of frames, frames made of layers."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

Color = tuple[int, int, int, int]

TRANSPARENT: Color = (0, 0, 0, 0)

_CHANNELS = ("r", "g", "b", "a")


class SpriteFormatError(ValueError):
    """Raised when a serialized sprite cannot be loaded."""


def _as_color(color: Iterable[int]) -> Color:
    values = tuple(int(v) for v in color)
    if len(values) != 4:
        raise ValueError(f"a color needs four channels, got {len(values)}")
    if any(not 0 <= v <= 255 for v in values):
        raise ValueError(f"color channels must lie in 0..255, got {values}")
    return values  # type: ignore[return-value]


def _json_int(value: Any) -> int | None:
    """Integer held by a JSON number, 0 for a non-integral number, None otherwise."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not value.is_integer():
        return 0
    return int(value)


def blend_colors(background: Sequence[int], foreground: Sequence[int]) -> Color:
    """Composite ``foreground`` over ``background`` (straight alpha, RGBA 0..255)."""
    bg = [c / 255.0 for c in background]
    fg = [c / 255.0 for c in foreground]
    alpha = 1 - (1 - fg[3]) * (1 - bg[3])
    rgb = [0.0, 0.0, 0.0]
    if alpha >= 1.0e-6:
        rgb = [
            f * fg[3] / alpha + b * bg[3] * (1 - fg[3]) / alpha
            for f, b in zip(fg[:3], bg[:3])
        ]
    return (int(255.0 * rgb[0]), int(255.0 * rgb[1]), int(255.0 * rgb[2]), int(255.0 * alpha))


class Layer:
    """One layer of pixels inside a frame."""

    def __init__(self, sprite: Sprite, pixels: list[Color] | None = None) -> None:
        self._sprite = sprite
        if pixels is None:
            pixels = [TRANSPARENT] * (sprite.width * sprite.height)
        self._pixels = pixels

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self._sprite.width and 0 <= y < self._sprite.height):
            raise IndexError(f"pixel ({x}, {y}) lies outside the sprite")
        return x + y * self._sprite.width

    def set_pixel(self, x: int, y: int, color: Iterable[int]) -> None:
        """Store ``color`` at the given pixel."""
        self._pixels[self._index(x, y)] = _as_color(color)

    def get_pixel(self, x: int, y: int) -> Color:
        """Return the color stored at the given pixel."""
        return self._pixels[self._index(x, y)]

    def _clone(self) -> Layer:
        return Layer(self._sprite, list(self._pixels))

    @classmethod
    def from_json(cls, data: Any, sprite: Sprite) -> Layer:
        """Build a layer from its JSON object."""
        pixels: list[Color] = []
        entries = data.get("pixels") if isinstance(data, dict) else None
        if isinstance(entries, list):
            for entry in entries:
                obj = entry if isinstance(entry, dict) else {}
                channels = [_json_int(obj.get(key)) for key in _CHANNELS]
                pixels.append(tuple(0 if c is None else c for c in channels))  # type: ignore[arg-type]
        needed = sprite.width * sprite.height
        if len(pixels) < needed:
            raise SpriteFormatError(
                f"layer holds {len(pixels)} pixels, sprite needs {needed}"
            )
        return cls(sprite, pixels)

    def to_json(self) -> dict[str, Any]:
        """Serialize this layer to a JSON object."""
        size = self._sprite.width * self._sprite.height
        return {
            "pixels": [dict(zip(_CHANNELS, pixel)) for pixel in self._pixels[:size]]
        }


class Frame:
    """One image of a sprite, the blend of its layers."""

    def __init__(self, sprite: Sprite, layers: list[Layer] | None = None) -> None:
        self._sprite = sprite
        self._display = [[TRANSPARENT] * sprite.width for _ in range(sprite.height)]
        if layers is None:
            self._layers: list[Layer] = []
            self._current = -1
            self.add_layer()
        else:
            self._layers = list(layers)
            self._current = 0
            self._merge()

    @property
    def layers(self) -> tuple[Layer, ...]:
        return tuple(self._layers)

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    @property
    def current_layer_index(self) -> int:
        return self._current

    @property
    def current_layer(self) -> Layer:
        return self._layers[self._current]

    @property
    def display_data(self) -> tuple[tuple[Color, ...], ...]:
        """Merged image of all layers, indexed as ``[y][x]``."""
        return tuple(tuple(row) for row in self._display)

    def paint_at(self, x: int, y: int, color: Iterable[int], brush_size: int) -> None:
        """Paint a square brush centred on (x, y) into the current layer."""
        color = _as_color(color)
        half = brush_size // 2
        left, top = max(x - half, 0), max(y - half, 0)
        right = min(x + half, self._sprite.width - 1)
        bottom = min(y + half, self._sprite.height - 1)
        layer = self.current_layer
        for row in range(top, bottom + 1):
            for col in range(left, right + 1):
                layer.set_pixel(col, row, color)
                self._display[row][col] = self.merged_pixel(col, row)

    def add_layer(self) -> None:
        """Append a new transparent layer and make it current."""
        self._layers.append(Layer(self._sprite))
        self._current = len(self._layers) - 1

    def select_layer(self, index: int) -> None:
        if not 0 <= index < len(self._layers):
            raise IndexError(f"no layer at index {index}")
        self._current = index

    def remove_current_layer(self) -> None:
        """Remove the current layer unless it is the only one."""
        if len(self._layers) > 1:
            del self._layers[self._current]
            if self._current == len(self._layers):
                self._current -= 1
            self._merge()

    def merged_pixel(self, x: int, y: int) -> Color:
        """Blend the given pixel of every layer, bottom to top."""
        merged = TRANSPARENT
        for layer in self._layers:
            merged = blend_colors(merged, layer.get_pixel(x, y))
        return merged

    def _merge(self) -> None:
        for row in range(self._sprite.height):
            for col in range(self._sprite.width):
                self._display[row][col] = self.merged_pixel(col, row)

    def _clone(self) -> Frame:
        copy = Frame.__new__(Frame)
        copy._sprite = self._sprite
        copy._display = [list(row) for row in self._display]
        copy._layers = [layer._clone() for layer in self._layers]
        copy._current = self._current
        return copy

    @classmethod
    def from_json(cls, data: Any, sprite: Sprite) -> Frame:
        """Build a frame from its JSON object."""
        entries = data.get("layers") if isinstance(data, dict) else None
        layers = [Layer.from_json(e, sprite) for e in entries] if isinstance(entries, list) else []
        if not layers:
            raise SpriteFormatError("a frame needs at least one layer")
        return cls(sprite, layers)

    def to_json(self) -> dict[str, Any]:
        """Serialize this frame to a JSON object."""
        return {"layers": [layer.to_json() for layer in self._layers]}


class Sprite:
    """An animation: an ordered list of frames with a shared size and frame rate."""

    def __init__(self, width: int, height: int) -> None:
        self._init_fields(width, height, 1)
        self.add_frame(False)

    def _init_fields(self, width: int, height: int, fps: int) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"sprite size must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._frames: list[Frame] = []
        self._current = -1
        self.fps = fps

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def frames(self) -> tuple[Frame, ...]:
        return tuple(self._frames)

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def current_frame_index(self) -> int:
        return self._current

    @property
    def current_frame(self) -> Frame:
        return self._frames[self._current]

    def add_frame(self, duplicate: bool) -> None:
        """Append a frame, a copy of the last one if ``duplicate``, and select it."""
        if duplicate and self._frames:
            self._frames.append(self._frames[-1]._clone())
        else:
            self._frames.append(Frame(self))
        self._current = len(self._frames) - 1

    def select_frame(self, index: int) -> None:
        if not 0 <= index < len(self._frames):
            raise IndexError(f"no frame at index {index}")
        self._current = index

    def move_current_frame_left(self) -> None:
        if self._current > 0:
            i = self._current
            self._frames[i - 1], self._frames[i] = self._frames[i], self._frames[i - 1]
            self._current -= 1

    def move_current_frame_right(self) -> None:
        if len(self._frames) > 1 and self._current < len(self._frames) - 1:
            i = self._current
            self._frames[i + 1], self._frames[i] = self._frames[i], self._frames[i + 1]
            self._current += 1

    def remove_current_frame(self) -> None:
        """Remove the current frame unless it is the only one."""
        if len(self._frames) > 1:
            del self._frames[self._current]
            if self._current == len(self._frames):
                self._current -= 1

    def frame(self, index: int) -> Frame:
        if not 0 <= index < len(self._frames):
            raise IndexError(f"no frame at index {index}")
        return self._frames[index]

    @classmethod
    def from_json(cls, data: Any) -> Sprite:
        """Build a sprite from its JSON object."""
        if not isinstance(data, dict):
            raise SpriteFormatError("a sprite must be a JSON object")
        width, height = _json_int(data.get("width")), _json_int(data.get("height"))
        if width is None or height is None:
            raise SpriteFormatError("sprite width and height must be numbers")
        fps = _json_int(data.get("fps"))
        sprite = cls.__new__(cls)
        try:
            sprite._init_fields(width, height, 1 if fps is None else fps)
        except ValueError as exc:
            raise SpriteFormatError(str(exc)) from exc
        entries = data.get("frames")
        if isinstance(entries, list):
            sprite._frames = [Frame.from_json(e, sprite) for e in entries]
        if not sprite._frames:
            raise SpriteFormatError("a sprite needs at least one frame")
        sprite._current = 0
        return sprite

    def to_json(self) -> dict[str, Any]:
        """Serialize this sprite to a JSON object."""
        return {
            "width": self._width,
            "height": self._height,
            "fps": self.fps,
            "frames": [frame.to_json() for frame in self._frames],
        }