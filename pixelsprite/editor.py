"""Editing session: owns the sprite, applies tools and reports changes through signals."""

from __future__ import annotations

import json
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from pixelsprite.sprite import TRANSPARENT, Color, Sprite, SpriteFormatError

Scheduler = Callable[[int, Callable[[], None]], None]

UNTITLED = "UNTITLED"


class Signal:
    """A list of callables invoked together with the same arguments."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        """Call ``slot`` every time the signal is emitted."""
        self._slots.append(slot)

    def emit(self, *args: Any) -> None:
        """Invoke every connected slot with ``args``."""
        for slot in list(self._slots):
            slot(*args)


class Tool(Enum):
    NONE = "none"
    BRUSH = "brush"
    ERASER = "eraser"


def _thread_schedule(delay_ms: int, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay_ms / 1000.0, callback)
    timer.daemon = True
    timer.start()


def _frame_duration(fps: int) -> int:
    if fps < 1:
        raise ValueError(f"frame rate must be positive, got {fps}")
    return 1000 // fps


def _split_filename(filename: str) -> tuple[str, str]:
    path = Path(filename)
    return f"{path.parent.as_posix()}/", path.name


class Editor:
    """Holds the sprite being edited and the state of the drawing tools."""

    def __init__(self, schedule: Scheduler | None = None) -> None:
        self._schedule = schedule or _thread_schedule
        self._sprite: Sprite | None = None
        self._save_path = ""
        self._save_name = ""
        self._is_saved = True
        self._duplicate_frame = False

        self._is_playing = False
        self._play_generation = 0
        self._frame_duration = 0

        self._tool = Tool.NONE
        self._color: Color = (0, 0, 0, 255)
        self._brush_size = 1
        self._eraser_size = 1

        self.new_sprite = Signal()
        self.new_sprite_size = Signal()
        self.new_sprite_framerate = Signal()
        self.new_frame_selection = Signal()
        self.display_data_updated = Signal()
        self.animation_display_data_updated = Signal()
        self.sprite_save_status_changed = Signal()
        self.ready_create_new_sprite = Signal()
        self.ready_open_sprite = Signal()
        self.need_save_filename_to_serialize = Signal()
        self.animation_player_set_enabled = Signal()

    @property
    def sprite(self) -> Sprite:
        if self._sprite is None:
            raise RuntimeError("no sprite is loaded")
        return self._sprite

    @property
    def has_sprite(self) -> bool:
        return self._sprite is not None

    @property
    def is_sprite_saved(self) -> bool:
        return self._is_saved

    @property
    def is_animation_playing(self) -> bool:
        return self._is_playing

    @property
    def frame_duration(self) -> int:
        return self._frame_duration

    @property
    def current_tool(self) -> Tool:
        return self._tool

    @property
    def drawing_color(self) -> Color:
        return self._color

    @property
    def brush_size(self) -> int:
        return self._brush_size

    @property
    def eraser_size(self) -> int:
        return self._eraser_size

    @property
    def duplicate_frame(self) -> bool:
        return self._duplicate_frame

    @property
    def current_save_name(self) -> str:
        return self._save_name

    @property
    def current_save_path(self) -> str:
        return self._save_path

    def _emit_display(self) -> None:
        self.display_data_updated.emit(self.sprite.current_frame.display_data)

    def _emit_frame_selection(self) -> None:
        self.new_frame_selection.emit(self.sprite.current_frame.layer_count)

    def paint_at(self, x: int, y: int) -> None:
        """Apply the active tool at pixel (x, y) of the current frame."""
        if self._tool is Tool.NONE:
            return
        frame = self.sprite.current_frame
        if self._tool is Tool.BRUSH:
            frame.paint_at(x, y, self._color, self._brush_size)
        else:
            frame.paint_at(x, y, TRANSPARENT, self._eraser_size)
        self._set_saved(False)
        self._emit_display()

    def create_new_sprite(self, width: int, height: int) -> None:
        """Replace the sprite with a blank one of the given size."""
        self._set_playing(False)
        sprite = Sprite(width, height)
        self._sprite = sprite
        self._save_path = ""
        self._save_name = UNTITLED
        self._frame_duration = _frame_duration(sprite.fps)
        self._set_saved(True)
        self._emit_new_sprite_signals()

    def serialize_sprite(self, filename: str) -> None:
        """Write the sprite as JSON; an empty filename reuses the last save location."""
        if not filename:
            if not self._save_name or not self._save_path:
                self.need_save_filename_to_serialize.emit()
                return
            path, name = self._save_path, self._save_name
        else:
            path, name = _split_filename(filename)

        document = json.dumps(self.sprite.to_json(), indent=4)
        with open(path + name, "w", encoding="utf-8") as handle:
            handle.write(document)

        if filename:
            self._save_name, self._save_path = name, path
        self._set_saved(True)
        self.sprite_save_status_changed.emit(self._save_name, False)

    def deserialize_sprite(self, filename: str) -> None:
        """Load a sprite from a JSON file, replacing the current one."""
        self._set_playing(False)
        path, name = _split_filename(filename)
        with open(path + name, encoding="utf-8") as handle:
            text = handle.read()
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise SpriteFormatError(f"not a JSON document: {exc}") from exc
        sprite = Sprite.from_json(data)
        try:
            duration = _frame_duration(sprite.fps)
        except ValueError as exc:
            raise SpriteFormatError(str(exc)) from exc

        self._sprite = sprite
        self._save_name, self._save_path = name, path
        self._frame_duration = duration
        self._set_saved(True)
        self._emit_new_sprite_signals()

    def setup_create_new_sprite(self) -> None:
        self.ready_create_new_sprite.emit(not self._is_saved)

    def setup_open_sprite(self) -> None:
        self.ready_open_sprite.emit(not self._is_saved)

    def select_frame(self, index: int) -> None:
        self.sprite.select_frame(index)
        self._emit_frame_selection()
        self._emit_display()

    def add_new_frame(self) -> None:
        self.sprite.add_frame(self._duplicate_frame)
        self._set_saved(False)
        self._emit_frame_selection()
        self._emit_display()

    def remove_frame(self) -> None:
        self.sprite.remove_current_frame()
        self._set_saved(False)
        self._emit_frame_selection()
        self._emit_display()

    def move_frame_left(self) -> None:
        self.sprite.move_current_frame_left()
        self._set_saved(False)
        self._emit_display()

    def move_frame_right(self) -> None:
        self.sprite.move_current_frame_right()
        self._set_saved(False)
        self._emit_display()

    def select_layer(self, index: int) -> None:
        self.sprite.current_frame.select_layer(index)
        self._emit_display()

    def add_new_layer(self) -> None:
        self.sprite.current_frame.add_layer()
        self._set_saved(False)
        self._emit_display()

    def remove_layer(self) -> None:
        self.sprite.current_frame.remove_current_layer()
        self._set_saved(False)
        self._emit_display()

    def set_animation_framerate(self, fps: int) -> None:
        duration = _frame_duration(fps)
        sprite = self.sprite
        self._frame_duration = duration
        sprite.fps = fps
        self._set_saved(False)

    def play_animation(self) -> None:
        """Start cycling through the frames on the animation display."""
        if self._is_playing:
            return
        sprite = self.sprite
        self._set_playing(True)
        self.animation_display_data_updated.emit(sprite.frame(0).display_data)
        self._schedule_tick(0)

    def stop_animation(self) -> None:
        if self._is_playing:
            self._set_playing(False)
            self._emit_display()

    def _schedule_tick(self, played: int) -> None:
        generation = self._play_generation
        self._schedule(self._frame_duration, lambda: self._tick(generation, played))

    def _tick(self, generation: int, played: int) -> None:
        if not self._is_playing or generation != self._play_generation:
            return
        sprite = self.sprite
        if played >= sprite.frame_count - 1:
            played = -1
        played += 1
        self.animation_display_data_updated.emit(sprite.frame(played).display_data)
        self._schedule_tick(played)

    def set_drawing_color(self, color: Color) -> None:
        values = tuple(int(c) for c in color)
        if len(values) != 4 or any(not 0 <= c <= 255 for c in values):
            raise ValueError(f"invalid RGBA color {color!r}")
        self._color = values  # type: ignore[assignment]

    def set_brush_enabled(self) -> None:
        self._tool = Tool.BRUSH

    def set_eraser_enabled(self) -> None:
        self._tool = Tool.ERASER

    def set_brush_size(self, size: int) -> None:
        self._brush_size = size

    def set_eraser_size(self, size: int) -> None:
        self._eraser_size = size

    def set_duplicate_frame(self, duplicate: bool) -> None:
        self._duplicate_frame = duplicate

    def _set_saved(self, state: bool) -> None:
        if state != self._is_saved:
            self._is_saved = state
            self.sprite_save_status_changed.emit(self._save_name, not state)

    def _set_playing(self, state: bool) -> None:
        if state != self._is_playing:
            self._play_generation += 1
        self._is_playing = state
        self.animation_player_set_enabled.emit(state)

    def _emit_new_sprite_signals(self) -> None:
        sprite = self.sprite
        self.new_sprite.emit(sprite.frame_count)
        self.new_sprite_size.emit(sprite.width, sprite.height)
        self.new_sprite_framerate.emit(sprite.fps)
        self._emit_frame_selection()
        self._emit_display()
        self.sprite_save_status_changed.emit(self._save_name, False)