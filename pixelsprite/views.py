"""View models for the editing canvas, the animation preview and the icon bars."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from pixelsprite.editor import Signal
from pixelsprite.panels import IconStrip
from pixelsprite.sprite import Color

SCENE_WIDTH = 1024
SCENE_HEIGHT = 1024

MIN_SPRITE_SIZE = 1
MAX_SPRITE_SIZE = 512

VIEWPORT_MARGIN = 0.2
PREVIEW_MARGIN = 0.1
ZOOM_STEP = 1.2

LIGHT_GRAY: Color = (192, 192, 192, 255)
WHITE: Color = (255, 255, 255, 255)

FRAME_ICON_SIZE = (25, 50)
LAYER_ICON_HEIGHT = 25

Pixels = Sequence[Sequence[Color]]
Prompt = Callable[[str], "str | None"]


def checker_pattern(width: int, height: int) -> tuple[tuple[Color, ...], ...]:
    """Light-gray and white checkerboard shown behind transparent pixels, as ``[y][x]``."""
    return tuple(
        tuple(LIGHT_GRAY if (x + y) % 2 == 0 else WHITE for x in range(width))
        for y in range(height)
    )


def sprite_offset(
    scene_width: int, scene_height: int, sprite_width: int, sprite_height: int
) -> tuple[int, int]:
    """Top-left scene position that centres a sprite in the scene."""
    return (
        scene_width // 2 - sprite_width // 2,
        scene_height // 2 - sprite_height // 2,
    )


def fit_scale(
    view_width: float,
    view_height: float,
    sprite_width: float,
    sprite_height: float,
    margin: float,
) -> float:
    """Largest scale that fits the sprite in the view, reduced by ``margin`` (a fraction)."""
    if sprite_width <= 0 or sprite_height <= 0:
        raise ValueError("sprite size must be positive")
    factor = min(view_width / sprite_width, view_height / sprite_height)
    return factor - factor * margin


def clamp_sprite_size(value: int) -> int:
    """Limit a requested sprite dimension to the accepted range."""
    return max(MIN_SPRITE_SIZE, min(MAX_SPRITE_SIZE, int(value)))


def ask_sprite_size(
    parent: Prompt | None = None, default_width: int = 70, default_height: int = 50
) -> tuple[int, int] | None:
    """Ask for the width and height of a new sprite.

    ``parent`` is called with a prompt and returns the answer, or None to cancel;
    it defaults to ``input``. An empty answer keeps the default, a non-number is
    asked again, and values are clamped to the accepted range. Returns None if
    the user cancels.
    """
    prompt = parent or input
    values: list[int] = []
    for label, default in (("Width", default_width), ("Height", default_height)):
        default = clamp_sprite_size(default)
        while True:
            try:
                answer = prompt(
                    f"{label} ({MIN_SPRITE_SIZE} to {MAX_SPRITE_SIZE}) [{default}]: "
                )
            except (EOFError, KeyboardInterrupt):
                return None
            if answer is None:
                return None
            answer = answer.strip()
            if not answer:
                value = default
                break
            try:
                value = int(answer)
            except ValueError:
                continue
            break
        values.append(clamp_sprite_size(value))
    return values[0], values[1]


class ViewTransform:
    """Maps scene coordinates to view coordinates: ``view = scene * factor + offset``."""

    def __init__(self) -> None:
        self._factor = 1.0
        self._offset = (0.0, 0.0)

    @property
    def factor(self) -> float:
        return self._factor

    @property
    def offset(self) -> tuple[float, float]:
        return self._offset

    def map_to_scene(self, x: float, y: float) -> tuple[float, float]:
        ox, oy = self._offset
        return (x - ox) / self._factor, (y - oy) / self._factor

    def map_from_scene(self, x: float, y: float) -> tuple[float, float]:
        ox, oy = self._offset
        return x * self._factor + ox, y * self._factor + oy

    def scale(self, factor: float) -> None:
        """Scale the scene about its origin."""
        if factor <= 0:
            raise ValueError(f"scale factor must be positive, got {factor}")
        self._factor *= factor

    def translate(self, dx: float, dy: float) -> None:
        """Move the scene by (dx, dy) scene units."""
        ox, oy = self._offset
        self._offset = (ox + dx * self._factor, oy + dy * self._factor)

    def zoom(self, x: float, y: float, factor: float) -> None:
        """Scale while keeping the scene point under view position (x, y) fixed."""
        before = self.map_to_scene(x, y)
        self.scale(factor)
        after = self.map_to_scene(x, y)
        self.translate(after[0] - before[0], after[1] - before[1])

    def reset(self) -> None:
        self._factor = 1.0
        self._offset = (0.0, 0.0)


def _center_on(
    transform: ViewTransform, view_width: float, view_height: float, x: float, y: float
) -> None:
    cx, cy = transform.map_to_scene(view_width / 2, view_height / 2)
    transform.translate(cx - x, cy - y)


class MouseButton(Enum):
    LEFT = "left"
    RIGHT = "right"


class Viewport:
    """Editing canvas: shows the sprite and turns mouse input into pixel clicks.

    Signals: ``pixel_clicked(x, y)``, ``mouse_moved((x, y))`` and
    ``sprite_size_changed((width, height))``.
    """

    def __init__(self, view_width: int = 512, view_height: int = 512) -> None:
        self.view_width = view_width
        self.view_height = view_height
        self.transform = ViewTransform()
        self.background: tuple[tuple[Color, ...], ...] = ()
        self.sprite_pixels: Pixels = ()
        self.sprite_offset = (0, 0)
        self.cursor = "cross"
        self._sprite_size = (0, 0)
        self._left_pressed = False
        self._panning = False
        self._pan_origin = (0.0, 0.0)

        self.pixel_clicked = Signal()
        self.mouse_moved = Signal()
        self.sprite_size_changed = Signal()

    @property
    def is_panning(self) -> bool:
        return self._panning

    def setup_new_sprite_display(self, width: int, height: int) -> None:
        """Prepare the canvas for a sprite of the given size and fit it in view."""
        self.background = checker_pattern(width, height)
        self._sprite_size = (width, height)
        self.sprite_offset = sprite_offset(SCENE_WIDTH, SCENE_HEIGHT, width, height)
        self.transform.reset()
        self.transform.scale(
            fit_scale(self.view_width, self.view_height, width, height, VIEWPORT_MARGIN)
        )
        ox, oy = self.sprite_offset
        _center_on(self.transform, self.view_width, self.view_height,
                   ox + width / 2, oy + height / 2)
        self.sprite_size_changed.emit((width, height))

    def update_sprite_display(self, pixels: Pixels) -> None:
        self.sprite_pixels = pixels

    def mouse_press(self, x: float, y: float, button: MouseButton) -> None:
        if button is MouseButton.RIGHT:
            self._panning = True
            self._pan_origin = self.transform.map_to_scene(x, y)
            self.cursor = "closed_hand"
        elif button is MouseButton.LEFT:
            self._left_pressed = True
            self._draw(x, y)

    def mouse_release(self, button: MouseButton) -> None:
        if button is MouseButton.RIGHT:
            self._panning = False
            self.cursor = "cross"
        elif button is MouseButton.LEFT:
            self._left_pressed = False

    def mouse_move(self, x: float, y: float) -> None:
        sx, sy = self.transform.map_to_scene(x, y)
        ox, oy = self.sprite_offset
        self.mouse_moved.emit((int(sx) - ox, int(sy) - oy))
        if self._panning:
            px, py = self._pan_origin
            self.transform.translate(sx - px, sy - py)
            self._pan_origin = self.transform.map_to_scene(x, y)
        elif self._left_pressed:
            self._draw(x, y)

    def wheel(self, x: float, y: float, delta: int) -> None:
        """Zoom in for a positive wheel delta, out for a negative one."""
        if delta < 0:
            self.transform.zoom(x, y, 1.0 / ZOOM_STEP)
        elif delta > 0:
            self.transform.zoom(x, y, ZOOM_STEP)

    def _draw(self, x: float, y: float) -> None:
        sx, sy = self.transform.map_to_scene(x, y)
        ox, oy = self.sprite_offset
        px, py = int(sx - ox), int(sy - oy)
        width, height = self._sprite_size
        if 0 <= px < width and 0 <= py < height:
            self.pixel_clicked.emit(px, py)


class PreviewPanel:
    """Mirrors the frame being edited, or plays the animation while enabled."""

    def __init__(self, view_width: int = 256, view_height: int = 256) -> None:
        self.view_width = view_width
        self.view_height = view_height
        self.transform = ViewTransform()
        self.sprite_pixels: Pixels = ()
        self.sprite_offset = (0, 0)
        self._sprite_size = (0, 0)
        self._playing = False

    @property
    def is_playing_animation(self) -> bool:
        return self._playing

    def setup_new_sprite_display(self, width: int, height: int) -> None:
        self._sprite_size = (width, height)
        self.sprite_offset = sprite_offset(SCENE_WIDTH, SCENE_HEIGHT, width, height)
        self.transform.reset()
        self.transform.scale(
            fit_scale(self.view_width, self.view_height, width, height, PREVIEW_MARGIN)
        )

    def _show(self, pixels: Pixels) -> None:
        self.sprite_pixels = pixels
        width, height = self._sprite_size
        ox, oy = self.sprite_offset
        _center_on(self.transform, self.view_width, self.view_height,
                   ox + width / 2, oy + height / 2)

    def update_sprite_display(self, pixels: Pixels) -> None:
        """Show the edited frame unless the animation is playing."""
        if not self._playing:
            self._show(pixels)

    def update_sprite_animation_display(self, pixels: Pixels) -> None:
        """Show an animation frame while the animation is playing."""
        if self._playing:
            self._show(pixels)

    def set_animation_player_enabled(self, state: bool) -> None:
        self._playing = state


@dataclass(frozen=True)
class Icon:
    label: str
    style: str
    width: int | None
    height: int | None


class IconBar:
    """Displayable icons of an :class:`IconStrip`, with a fixed icon size."""

    def __init__(
        self, strip: IconStrip, icon_width: int | None = None, icon_height: int | None = None
    ) -> None:
        self.strip = strip
        self.icon_width = icon_width
        self.icon_height = icon_height
        self._icons: tuple[Icon, ...] = ()
        self.refresh()

    @classmethod
    def for_frames(cls, strip: IconStrip) -> IconBar:
        return cls(strip, *FRAME_ICON_SIZE)

    @classmethod
    def for_layers(cls, strip: IconStrip) -> IconBar:
        return cls(strip, None, LAYER_ICON_HEIGHT)

    @property
    def icons(self) -> tuple[Icon, ...]:
        return self._icons

    def refresh(self) -> tuple[Icon, ...]:
        """Rebuild the icons from the strip's current state and return them."""
        self._icons = tuple(
            Icon(label, style, self.icon_width, self.icon_height)
            for label, style in zip(self.strip.labels, self.strip.styles())
        )
        return self._icons