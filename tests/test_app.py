import io
import json

import pytest

from pixelsprite.app import MainWindow, main, window_title
from pixelsprite.editor import Editor
from pixelsprite.panels import HIGHLIGHT_STYLE


class Dialogs:
    def __init__(self):
        self.answers = []
        self.questions = []
        self.colors = []
        self.color_requests = []
        self.open_names = []
        self.save_names = []
        self.sizes = []
        self.size_requests = []
        self.scheduled = []
        self.messages = []

    def ask(self, title, text):
        self.questions.append(title)
        return self.answers.pop(0)

    def color(self, current):
        self.color_requests.append(current)
        return self.colors.pop(0)

    def open_name(self):
        return self.open_names.pop(0)

    def save_name(self):
        return self.save_names.pop(0)

    def size(self, width, height):
        self.size_requests.append((width, height))
        return self.sizes.pop(0)

    def inform(self, title, text):
        self.messages.append((title, text))

    def schedule(self, delay, callback):
        self.scheduled.append((delay, callback))


@pytest.fixture
def dialogs():
    return Dialogs()


@pytest.fixture
def setup(dialogs):
    editor = Editor(schedule=dialogs.schedule)
    window = MainWindow(
        editor,
        ask_question=dialogs.ask,
        choose_color=dialogs.color,
        get_open_filename=dialogs.open_name,
        get_save_filename=dialogs.save_name,
        ask_size=dialogs.size,
        inform=dialogs.inform,
        schedule=dialogs.schedule,
    )
    editor.create_new_sprite(4, 3)
    return editor, window


def test_window_title():
    assert window_title("UNTITLED", True) == "UNTITLED* // Pixel Editor"
    assert window_title("UNTITLED", False) == "UNTITLED // Pixel Editor"


def test_new_sprite_updates_window(setup):
    editor, window = setup
    assert window.title == "UNTITLED // Pixel Editor"
    assert window.fps_text == "FPS: 1"
    assert window.slider_positions["fps"] == 1
    assert window.size_text == "4x3"
    assert window.timeline.count == 1
    assert window.layers.count == 1
    assert window.viewport.sprite_pixels == editor.sprite.current_frame.display_data


def test_paint_through_viewport_marks_modified(setup):
    editor, window = setup
    window.click("pencil")
    window.viewport.pixel_clicked.emit(1, 1)
    assert window.title == "UNTITLED* // Pixel Editor"
    assert editor.sprite.current_frame.current_layer.get_pixel(1, 1) == (0, 0, 0, 255)
    assert window.button_styles["pencil"] == "background-color: white"


def test_tool_buttons_swap_highlight(setup):
    _, window = setup
    window.click("pencil")
    window.click("eraser")
    assert window.button_styles["eraser"] == "background-color: white"
    assert window.button_styles["pencil"] == ""


def test_other_buttons_flash_and_restore(setup, dialogs):
    _, window = setup
    window.click("add_layer")
    assert window.button_styles["add_layer"] == "background-color: white;"
    delay, restore = dialogs.scheduled[-1]
    assert delay == 50
    restore()
    assert window.button_styles["add_layer"] == ""


def test_add_frame_duplicates_when_confirmed(setup, dialogs):
    editor, window = setup
    window.click("pencil")
    window.viewport.pixel_clicked.emit(0, 0)
    dialogs.answers.append(True)
    window.click("add_frame")
    assert dialogs.questions == ["Duplicate Frame"]
    assert editor.duplicate_frame is True
    assert editor.sprite.frame_count == 2
    assert editor.sprite.frame(1).display_data == editor.sprite.frame(0).display_data
    assert window.timeline.count == 2
    assert window.timeline.current == 1


def test_add_frame_blank_when_declined(setup, dialogs):
    editor, window = setup
    window.click("pencil")
    window.viewport.pixel_clicked.emit(0, 0)
    dialogs.answers.append(False)
    window.click("add_frame")
    assert editor.duplicate_frame is False
    assert editor.sprite.frame(1).current_layer.get_pixel(0, 0) == (0, 0, 0, 0)


def test_delete_frame(setup, dialogs):
    editor, window = setup
    dialogs.answers.append(False)
    window.click("add_frame")
    window.click("delete_frame")
    assert editor.sprite.frame_count == 1
    assert window.timeline.count == 1
    assert window.timeline.current == 0


def test_selecting_frame_icon(setup, dialogs):
    editor, window = setup
    dialogs.answers.append(False)
    window.click("add_frame")
    window.timeline.select(0)
    assert editor.sprite.current_frame_index == 0
    assert window.active_frame == 0
    assert window.timeline.current == 0
    assert window.frame_icons[0].style == HIGHLIGHT_STYLE


def test_layers(setup):
    editor, window = setup
    window.click("add_layer")
    assert editor.sprite.current_frame.layer_count == 2
    assert window.layers.count == 2
    window.layers.select(0)
    assert editor.sprite.current_frame.current_layer_index == 0
    assert window.layers.current == 0
    assert window.layer_icons[0].style == HIGHLIGHT_STYLE
    window.click("remove_layer")
    assert editor.sprite.current_frame.layer_count == 1


def test_size_sliders(setup):
    editor, window = setup
    window.move_slider("pencil", 3)
    window.move_slider("eraser", 5)
    assert window.pencil_text == "Pencil Size: 3"
    assert window.eraser_text == "Eraser Size: 5"
    assert editor.brush_size == 3
    assert editor.eraser_size == 5


def test_fps_slider(setup):
    editor, window = setup
    window.move_slider("fps", 4)
    assert window.fps_text == "FPS: 4"
    assert editor.sprite.fps == 4
    assert window.title == "UNTITLED* // Pixel Editor"


def test_save_asks_for_filename(setup, dialogs, tmp_path):
    editor, window = setup
    target = tmp_path / "a.ssp"
    dialogs.save_names.append(str(target))
    window.trigger("save")
    assert window.title == "a.ssp // Pixel Editor"
    assert json.loads(target.read_text())["width"] == 4


def test_save_cancelled(setup, dialogs, tmp_path):
    _, window = setup
    dialogs.save_names.append(None)
    window.trigger("save_as")
    assert list(tmp_path.iterdir()) == []
    assert window.title == "UNTITLED // Pixel Editor"


def test_new_sprite_offers_save_and_remembers_size(setup, dialogs, tmp_path):
    editor, window = setup
    window.click("pencil")
    window.viewport.pixel_clicked.emit(0, 0)
    target = tmp_path / "b.ssp"
    dialogs.answers.append(True)
    dialogs.save_names.append(str(target))
    dialogs.sizes.append((5, 6))
    window.trigger("new")
    assert dialogs.questions == ["Unsaved Changes"]
    assert target.exists()
    assert (editor.sprite.width, editor.sprite.height) == (5, 6)
    assert window.new_sprite_defaults == (5, 6)
    assert dialogs.size_requests == [(70, 50)]

    dialogs.sizes.append(None)
    window.trigger("new")
    assert dialogs.size_requests[-1] == (5, 6)
    assert (editor.sprite.width, editor.sprite.height) == (5, 6)


def test_open_sprite(setup, dialogs, tmp_path):
    editor, window = setup
    target = tmp_path / "c.ssp"
    dialogs.save_names.append(str(target))
    window.trigger("save_as")
    editor.create_new_sprite(2, 2)
    dialogs.open_names.append(str(target))
    window.trigger("open")
    assert (editor.sprite.width, editor.sprite.height) == (4, 3)
    assert window.title == "c.ssp // Pixel Editor"
    assert window.size_text == "4x3"


def test_change_color(setup, dialogs):
    editor, window = setup
    dialogs.colors.append((255, 0, 0, 255))
    window.click("color_palette")
    assert dialogs.color_requests == [(0, 0, 0, 255)]
    assert editor.drawing_color == (255, 0, 0, 255)
    assert window.color_label_style == "background-color:#ff0000;"

    dialogs.colors.append(None)
    window.click("color_palette")
    assert dialogs.color_requests[-1] == (255, 0, 0, 255)
    assert editor.drawing_color == (255, 0, 0, 255)


def test_unknown_names_raise(setup):
    _, window = setup
    with pytest.raises(ValueError):
        window.highlight_button("nope")
    with pytest.raises(ValueError):
        window.click("nope")
    with pytest.raises(ValueError):
        window.move_slider("nope", 1)
    with pytest.raises(ValueError):
        window.trigger("nope")


def test_animation_toggles_preview(setup):
    editor, window = setup
    window.click("play_animation")
    assert window.preview.is_playing_animation is True
    assert editor.is_animation_playing is True
    window.click("stop_animation")
    assert window.preview.is_playing_animation is False


def test_help_action(setup, dialogs):
    editor, window = setup
    window.trigger("help")
    assert dialogs.messages == [("Help", "This is some help text.")]
    assert window.title == "UNTITLED // Pixel Editor"
    assert editor.sprite.frame_count == 1


def test_main_session_saves_painted_sprite(monkeypatch, tmp_path, capsys):
    target = tmp_path / "d.ssp"
    script = f"brush\npaint 0 0\nsaveas\n{target}\nshow\nquit\n"
    monkeypatch.setattr("sys.stdin", io.StringIO(script))
    assert main(["--width", "4", "--height", "3"]) == 0
    data = json.loads(target.read_text())
    assert (data["width"], data["height"]) == (4, 3)
    assert data["frames"][0]["layers"][0]["pixels"][0] == {"r": 0, "g": 0, "b": 0, "a": 255}
    assert "d.ssp // Pixel Editor" in capsys.readouterr().out


def test_main_reports_bad_commands(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("bogus\n"))
    assert main(["--width", "2", "--height", "2"]) == 0
    assert "unknown command" in capsys.readouterr().err


def test_main_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main([str(tmp_path / "missing.ssp")]) == 1