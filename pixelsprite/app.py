"""Main editor window: connects the editor to its panels and drives it from a terminal."""

from __future__ import annotations

import argparse
import sys
import threading
from typing import Callable, Sequence

from pixelsprite.editor import Editor, Signal
from pixelsprite.panels import IconStrip
from pixelsprite.sprite import Color, SpriteFormatError
from pixelsprite.views import Icon, IconBar, PreviewPanel, Viewport, ask_sprite_size

APP_NAME = "Pixel Editor"
WINDOW_SIZE = (968, 652)
DEFAULT_SPRITE_WIDTH = 70
DEFAULT_SPRITE_HEIGHT = 50

TOOL_HIGHLIGHT_STYLE = "background-color: white"
FLASH_STYLE = "background-color: white;"
FLASH_MS = 50

UNSAVED_TITLE = "Unsaved Changes"
UNSAVED_TEXT = "You have unsaved changes. Would you like to save?"
DUPLICATE_TITLE = "Duplicate Frame"
DUPLICATE_TEXT = "Do you want to duplicate the previous frame?"
HELP_TITLE = "Help"
HELP_TEXT = "This is some help text."

TOOL_BUTTONS = ("pencil", "eraser")
BUTTONS = (
    "color_palette",
    "pencil",
    "eraser",
    "add_frame",
    "delete_frame",
    "move_frame_left",
    "move_frame_right",
    "add_layer",
    "remove_layer",
    "play_animation",
    "stop_animation",
)
SLIDERS = ("pencil", "eraser", "fps")
ACTIONS = ("new", "open", "save", "save_as", "help")

Scheduler = Callable[[int, Callable[[], None]], None]
AskQuestion = Callable[[str, str], bool]
ChooseColor = Callable[[Color], "Color | None"]
GetFilename = Callable[[], "str | None"]
AskSize = Callable[[int, int], "tuple[int, int] | None"]
Inform = Callable[[str, str], None]


def window_title(sprite_name: str, modified: bool) -> str:
    """Title shown for a sprite; a star marks unsaved changes."""
    return f"{sprite_name}{'*' if modified else ''} // {APP_NAME}"


def _color_name(color: Color) -> str:
    r, g, b, _ = color
    return f"#{r:02x}{g:02x}{b:02x}"


def _parse_color(text: str) -> Color:
    """Parse ``#rrggbb``, ``#rrggbbaa`` or ``r,g,b[,a]``."""
    text = text.strip()
    if text.startswith("#"):
        digits = text[1:]
        if len(digits) not in (6, 8):
            raise ValueError(f"invalid color {text!r}")
        values = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
    else:
        values = [int(part) for part in text.split(",")]
    if len(values) == 3:
        values.append(255)
    if len(values) != 4 or any(not 0 <= v <= 255 for v in values):
        raise ValueError(f"invalid color {text!r}")
    return (values[0], values[1], values[2], values[3])


def _prompt(text: str) -> str | None:
    sys.stdout.write(text)
    sys.stdout.flush()
    line = sys.stdin.readline()
    if not line:
        return None
    return line.rstrip("\r\n")


def _ask_yes_no(title: str, text: str) -> bool:
    answer = _prompt(f"{title}: {text} [y/N] ")
    return answer is not None and answer.strip().lower() in ("y", "yes")


def _ask_color(current: Color) -> Color | None:
    answer = _prompt(f"Select Color [{_color_name(current)}]: ")
    if answer is None or not answer.strip():
        return None
    return _parse_color(answer)


def _ask_open_filename() -> str | None:
    answer = _prompt("Open sprite (*.ssp): ")
    return answer.strip() or None if answer is not None else None


def _ask_save_filename() -> str | None:
    answer = _prompt("Save as sprite (*.ssp): ")
    return answer.strip() or None if answer is not None else None


def _ask_size(default_width: int, default_height: int) -> tuple[int, int] | None:
    return ask_sprite_size(_prompt, default_width, default_height)


def _print_message(title: str, text: str) -> None:
    print(f"{title}: {text}")


def _thread_schedule(delay_ms: int, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay_ms / 1000.0, callback)
    timer.daemon = True
    timer.start()


class MainWindow:
    """The editor window: buttons, sliders, menu actions and the panels they drive.

    Dialogs are callables so the window can run in a terminal or under test.
    """

    def __init__(
        self,
        editor: Editor,
        *,
        ask_question: AskQuestion | None = None,
        choose_color: ChooseColor | None = None,
        get_open_filename: GetFilename | None = None,
        get_save_filename: GetFilename | None = None,
        ask_size: AskSize | None = None,
        inform: Inform | None = None,
        schedule: Scheduler | None = None,
    ) -> None:
        self.editor = editor
        self._ask_question = ask_question or _ask_yes_no
        self._choose_color = choose_color or _ask_color
        self._get_open_filename = get_open_filename or _ask_open_filename
        self._get_save_filename = get_save_filename or _ask_save_filename
        self._ask_size = ask_size or _ask_size
        self._inform = inform or _print_message
        self._schedule = schedule or _thread_schedule

        self.size = WINDOW_SIZE
        self.title = APP_NAME
        self.fps_text = ""
        self.pencil_text = ""
        self.eraser_text = ""
        self.coord_text = ""
        self.size_text = ""
        self.color_label_style = ""
        self.current_color: Color = (0, 0, 0, 255)
        self.duplicate_frame = False
        self.active_frame = 0
        self.new_sprite_defaults = (DEFAULT_SPRITE_WIDTH, DEFAULT_SPRITE_HEIGHT)

        self.button_styles: dict[str, str] = {name: "" for name in BUTTONS}
        self._tool_styles = {name: self.button_styles[name] for name in TOOL_BUTTONS}
        self.slider_positions: dict[str, int] = {name: 1 for name in SLIDERS}

        self._clicked = {name: Signal() for name in BUTTONS}
        self._slider_moved = {name: Signal() for name in SLIDERS}
        self._actions = {name: Signal() for name in ACTIONS}

        self.viewport = Viewport()
        self.preview = PreviewPanel()
        self.timeline = IconStrip(1)
        self.layers = IconStrip(1)
        self._frame_bar = IconBar.for_frames(self.timeline)
        self._layer_bar = IconBar.for_layers(self.layers)

        self.color_changed = Signal()
        self.new_sprite_requested = Signal()
        self.load_requested = Signal()
        self.save_requested = Signal()
        self.duplicate_frame_requested = Signal()
        self.highlight_icon = Signal()
        self.highlight_layer = Signal()

        self._connect_actions()
        self.new_sprite_requested.connect(editor.create_new_sprite)
        self.load_requested.connect(editor.deserialize_sprite)
        self.save_requested.connect(editor.serialize_sprite)
        editor.sprite_save_status_changed.connect(self.update_title)
        editor.need_save_filename_to_serialize.connect(
            self.initialize_save_process_with_dialogue
        )
        editor.ready_create_new_sprite.connect(self.handle_create_new_sprite)
        editor.ready_open_sprite.connect(self.handle_open_sprite)

        self._connect_highlights()
        self._connect_tools()
        self._connect_viewport()
        self._connect_timeline()
        self._connect_layers()
        self._connect_preview()

    @property
    def frame_icons(self) -> tuple[Icon, ...]:
        return self._frame_bar.refresh()

    @property
    def layer_icons(self) -> tuple[Icon, ...]:
        return self._layer_bar.refresh()

    @staticmethod
    def _lookup(table: dict[str, Signal], name: str, kind: str) -> Signal:
        try:
            return table[name]
        except KeyError:
            raise ValueError(f"unknown {kind} {name!r}") from None

    def click(self, button: str) -> None:
        """Press the named button."""
        self._lookup(self._clicked, button, "button").emit()

    def move_slider(self, slider: str, value: int) -> None:
        """Drag the named slider to ``value``."""
        signal = self._lookup(self._slider_moved, slider, "slider")
        self.slider_positions[slider] = value
        signal.emit(value)

    def trigger(self, action: str) -> None:
        """Run the named menu action."""
        self._lookup(self._actions, action, "action").emit()

    def show_fps(self, fps: int) -> None:
        self.fps_text = f"FPS: {fps}"

    def change_color(self) -> None:
        """Ask for a new drawing color and pass it on to the editor."""
        self.highlight_button("color_palette")
        color = self._choose_color(self.current_color)
        if color is None:
            return
        self.current_color = color
        self.color_changed.emit(color)
        self.color_label_style = f"background-color:{_color_name(color)};"

    def update_title(self, sprite_name: str, modified: bool) -> None:
        self.title = window_title(sprite_name, modified)

    def _offer_save(self) -> None:
        if self._ask_question(UNSAVED_TITLE, UNSAVED_TEXT):
            self.initialize_save_process()

    def handle_create_new_sprite(self, ask_user_to_save: bool) -> None:
        """Offer to save, ask for a size, then request a new sprite."""
        if ask_user_to_save:
            self._offer_save()
        size = self._ask_size(*self.new_sprite_defaults)
        if size is not None:
            self.new_sprite_defaults = (size[0], size[1])
            self.new_sprite_requested.emit(size[0], size[1])

    def handle_open_sprite(self, ask_user_to_save: bool) -> None:
        """Offer to save, ask for a file, then request loading it."""
        if ask_user_to_save:
            self._offer_save()
        filename = self._get_open_filename()
        if filename:
            self.load_requested.emit(filename)

    def initialize_save_process(self) -> None:
        self.save_requested.emit("")

    def initialize_save_process_with_dialogue(self) -> None:
        filename = self._get_save_filename()
        if filename:
            self.save_requested.emit(filename)

    def highlight_button(self, button: str) -> None:
        """Highlight a tool button, or flash any other button briefly."""
        if button in self._tool_styles:
            for name, original in self._tool_styles.items():
                self.button_styles[name] = TOOL_HIGHLIGHT_STYLE if name == button else original
            return
        if button not in self.button_styles:
            raise ValueError(f"unknown button {button!r}")
        original = self.button_styles[button]
        self.button_styles[button] = FLASH_STYLE

        def restore() -> None:
            self.button_styles[button] = original

        self._schedule(FLASH_MS, restore)

    def set_active_frame(self, index: int) -> None:
        self.active_frame = index
        self.highlight_icon.emit(index)

    def set_active_layer(self, index: int) -> None:
        self.highlight_layer.emit(index)

    def set_pencil_text(self, size: int) -> None:
        self.pencil_text = f"Pencil Size: {size}"

    def set_eraser_text(self, size: int) -> None:
        self.eraser_text = f"Eraser Size: {size}"

    def _open_help_window(self) -> None:
        self._inform(HELP_TITLE, HELP_TEXT)

    def _on_add_frame_clicked(self) -> None:
        self.duplicate_frame = bool(self._ask_question(DUPLICATE_TITLE, DUPLICATE_TEXT))
        self.duplicate_frame_requested.emit(self.duplicate_frame)

    def _set_coord_text(self, pos: tuple[int, int]) -> None:
        self.coord_text = f"{pos[0]}, {pos[1]}"

    def _set_size_text(self, size: tuple[int, int]) -> None:
        self.size_text = f"{size[0]}x{size[1]}"

    def _set_fps_slider(self, fps: int) -> None:
        self.slider_positions["fps"] = fps

    def _connect_actions(self) -> None:
        editor = self.editor
        self._actions["new"].connect(editor.setup_create_new_sprite)
        self._actions["open"].connect(editor.setup_open_sprite)
        self._actions["save"].connect(self.initialize_save_process)
        self._actions["save_as"].connect(self.initialize_save_process_with_dialogue)
        self._actions["help"].connect(self._open_help_window)

    def _connect_highlights(self) -> None:
        for name in (
            "pencil",
            "eraser",
            "add_frame",
            "delete_frame",
            "add_layer",
            "remove_layer",
            "play_animation",
            "stop_animation",
        ):
            self._clicked[name].connect(lambda name=name: self.highlight_button(name))

    def _connect_tools(self) -> None:
        editor = self.editor
        self._clicked["color_palette"].connect(self.change_color)
        self.color_changed.connect(editor.set_drawing_color)
        self._clicked["pencil"].connect(editor.set_brush_enabled)
        self._clicked["eraser"].connect(editor.set_eraser_enabled)
        self._slider_moved["pencil"].connect(editor.set_brush_size)
        self._slider_moved["eraser"].connect(editor.set_eraser_size)
        self._slider_moved["pencil"].connect(self.set_pencil_text)
        self._slider_moved["eraser"].connect(self.set_eraser_text)

    def _connect_viewport(self) -> None:
        editor = self.editor
        editor.new_sprite_size.connect(self.viewport.setup_new_sprite_display)
        editor.display_data_updated.connect(self.viewport.update_sprite_display)
        self.viewport.pixel_clicked.connect(editor.paint_at)
        self.viewport.mouse_moved.connect(self._set_coord_text)
        self.viewport.sprite_size_changed.connect(self._set_size_text)

    def _connect_timeline(self) -> None:
        editor, timeline, clicked = self.editor, self.timeline, self._clicked
        self.duplicate_frame_requested.connect(editor.set_duplicate_frame)
        clicked["add_frame"].connect(self._on_add_frame_clicked)
        clicked["add_frame"].connect(timeline.add)
        clicked["delete_frame"].connect(timeline.remove_last)
        timeline.selected.connect(editor.select_frame)
        clicked["add_frame"].connect(editor.add_new_frame)
        clicked["delete_frame"].connect(editor.remove_frame)
        editor.new_sprite.connect(timeline.reset)
        clicked["move_frame_left"].connect(editor.move_frame_left)
        clicked["move_frame_right"].connect(editor.move_frame_right)
        timeline.selected.connect(self.set_active_frame)
        self.highlight_icon.connect(timeline.highlight)
        clicked["move_frame_left"].connect(timeline.move_left)
        clicked["move_frame_right"].connect(timeline.move_right)

    def _connect_layers(self) -> None:
        editor, layers, clicked = self.editor, self.layers, self._clicked
        clicked["add_layer"].connect(layers.add)
        clicked["remove_layer"].connect(layers.remove_last)
        layers.selected.connect(editor.select_layer)
        clicked["add_layer"].connect(editor.add_new_layer)
        clicked["remove_layer"].connect(editor.remove_layer)
        editor.new_frame_selection.connect(layers.reset)
        layers.selected.connect(self.set_active_layer)
        self.highlight_layer.connect(layers.highlight)

    def _connect_preview(self) -> None:
        editor, preview = self.editor, self.preview
        editor.animation_player_set_enabled.connect(preview.set_animation_player_enabled)
        editor.display_data_updated.connect(preview.update_sprite_display)
        editor.animation_display_data_updated.connect(preview.update_sprite_animation_display)
        editor.new_sprite_size.connect(preview.setup_new_sprite_display)
        self._clicked["play_animation"].connect(editor.play_animation)
        self._clicked["stop_animation"].connect(editor.stop_animation)
        self._slider_moved["fps"].connect(self.show_fps)
        editor.new_sprite_framerate.connect(self.show_fps)
        self._slider_moved["fps"].connect(editor.set_animation_framerate)
        editor.new_sprite_framerate.connect(self._set_fps_slider)


_COMMAND_HELP = """\
commands:
  new | open | save | saveas | help
  brush | eraser | color
  paint X Y
  brushsize N | erasersize N | fps N
  frame add|remove|left|right|N
  layer add|remove|N
  play | stop | show | quit"""


def _render(pixels: Sequence[Sequence[Color]]) -> str:
    return "\n".join(
        "".join("." if pixel[3] == 0 else "#" for pixel in row) for row in pixels
    )


def _execute(window: MainWindow, words: list[str]) -> bool:
    """Run one command; return False when the session should end."""
    match words:
        case ["quit" | "exit"]:
            return False
        case ["new"]:
            window.trigger("new")
        case ["open"]:
            window.trigger("open")
        case ["save"]:
            window.trigger("save")
        case ["saveas"]:
            window.trigger("save_as")
        case ["help"]:
            window.trigger("help")
            print(_COMMAND_HELP)
        case ["brush"]:
            window.click("pencil")
        case ["eraser"]:
            window.click("eraser")
        case ["color"]:
            window.click("color_palette")
        case ["paint", x, y]:
            window.editor.paint_at(int(x), int(y))
        case ["brushsize", size]:
            window.move_slider("pencil", int(size))
        case ["erasersize", size]:
            window.move_slider("eraser", int(size))
        case ["fps", fps]:
            window.move_slider("fps", int(fps))
        case ["frame", "add"]:
            window.click("add_frame")
        case ["frame", "remove"]:
            window.click("delete_frame")
        case ["frame", "left"]:
            window.click("move_frame_left")
        case ["frame", "right"]:
            window.click("move_frame_right")
        case ["frame", index]:
            window.timeline.select(int(index))
        case ["layer", "add"]:
            window.click("add_layer")
        case ["layer", "remove"]:
            window.click("remove_layer")
        case ["layer", index]:
            window.layers.select(int(index))
        case ["play"]:
            window.click("play_animation")
        case ["stop"]:
            window.click("stop_animation")
        case ["show"]:
            print(window.title)
            print(_render(window.viewport.sprite_pixels))
        case []:
            pass
        case _:
            raise ValueError(f"unknown command {' '.join(words)!r}; type help")
    return True


def main(argv: Sequence[str] | None = None) -> int:
    """Start an editing session on standard input and output."""
    parser = argparse.ArgumentParser(prog="pixelsprite", description="Edit pixel sprites.")
    parser.add_argument("file", nargs="?", help="sprite file to open")
    parser.add_argument("--width", type=int, default=DEFAULT_SPRITE_WIDTH)
    parser.add_argument("--height", type=int, default=DEFAULT_SPRITE_HEIGHT)
    args = parser.parse_args(argv)

    editor = Editor()
    window = MainWindow(editor)
    try:
        editor.create_new_sprite(args.width, args.height)
        if args.file:
            editor.deserialize_sprite(args.file)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    while True:
        line = _prompt(f"{window.title}> ")
        if line is None:
            break
        try:
            if not _execute(window, line.split()):
                break
        except (OSError, ValueError, IndexError, RuntimeError, SpriteFormatError) as exc:
            print(f"error: {exc}", file=sys.stderr)
    editor.stop_animation()
    return 0