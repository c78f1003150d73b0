import pytest

from pixelsprite.editor import UNTITLED, Editor, Signal, Tool
from pixelsprite.sprite import TRANSPARENT, SpriteFormatError


class FakeScheduler:
    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def run_next(self):
        delay, callback = self.pending.pop(0)
        callback()
        return delay


def record(signal):
    calls = []
    signal.connect(lambda *args: calls.append(args))
    return calls


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def editor(scheduler):
    ed = Editor(schedule=scheduler)
    ed.create_new_sprite(6, 4)
    return ed


def test_signal_calls_every_slot_in_order():
    signal = Signal()
    seen = []
    signal.connect(lambda a, b: seen.append(("first", a, b)))
    signal.connect(lambda a, b: seen.append(("second", a, b)))
    signal.emit(3, "x")
    assert seen == [("first", 3, "x"), ("second", 3, "x")]


def test_create_new_sprite_emits_setup_signals(scheduler):
    ed = Editor(schedule=scheduler)
    sizes = record(ed.new_sprite_size)
    frames = record(ed.new_sprite)
    status = record(ed.sprite_save_status_changed)
    display = record(ed.display_data_updated)
    ed.create_new_sprite(7, 5)
    assert sizes == [(7, 5)]
    assert frames == [(ed.sprite.frame_count,)]
    assert status[-1] == (UNTITLED, False)
    assert display == [(ed.sprite.current_frame.display_data,)]
    assert ed.current_save_name == UNTITLED
    assert ed.is_sprite_saved


def test_operations_without_sprite_raise():
    ed = Editor(schedule=FakeScheduler())
    with pytest.raises(RuntimeError):
        ed.add_new_frame()


def test_paint_without_tool_does_nothing(editor):
    display = record(editor.display_data_updated)
    before = editor.sprite.to_json()
    editor.paint_at(1, 1)
    assert display == []
    assert editor.sprite.to_json() == before
    assert editor.current_tool is Tool.NONE


def test_brush_paints_drawing_color_and_marks_modified(editor):
    status = record(editor.sprite_save_status_changed)
    color = (10, 20, 30, 255)
    editor.set_drawing_color(color)
    editor.set_brush_enabled()
    editor.paint_at(2, 1)
    assert editor.sprite.current_frame.current_layer.get_pixel(2, 1) == color
    assert not editor.is_sprite_saved
    assert status == [(UNTITLED, True)]


def test_eraser_clears_pixels(editor):
    editor.set_drawing_color((200, 100, 50, 255))
    editor.set_brush_enabled()
    editor.set_brush_size(3)
    editor.paint_at(2, 2)
    editor.set_eraser_enabled()
    editor.paint_at(2, 2)
    layer = editor.sprite.current_frame.current_layer
    assert layer.get_pixel(2, 2) == TRANSPARENT
    assert layer.get_pixel(1, 1) == (200, 100, 50, 255)


def test_invalid_color_rejected(editor):
    with pytest.raises(ValueError):
        editor.set_drawing_color((1, 2, 3))


def test_save_without_name_requests_filename(editor):
    requests = record(editor.need_save_filename_to_serialize)
    editor.serialize_sprite("")
    assert requests == [()]


def test_save_and_load_round_trip(editor, scheduler, tmp_path):
    editor.set_drawing_color((9, 8, 7, 255))
    editor.set_brush_enabled()
    editor.paint_at(0, 0)
    editor.add_new_frame()
    target = tmp_path / "walk.ssp"
    editor.serialize_sprite(str(target))
    assert editor.is_sprite_saved
    assert editor.current_save_name == "walk.ssp"

    other = Editor(schedule=scheduler)
    frames = record(other.new_sprite)
    other.deserialize_sprite(str(target))
    assert other.sprite.to_json() == editor.sprite.to_json()
    assert frames == [(editor.sprite.frame_count,)]
    assert other.current_save_name == "walk.ssp"


def test_save_with_empty_name_reuses_last_location(editor, tmp_path):
    target = tmp_path / "reuse.ssp"
    editor.serialize_sprite(str(target))
    editor.add_new_layer()
    editor.serialize_sprite("")
    loaded = Editor(schedule=FakeScheduler())
    loaded.deserialize_sprite(str(target))
    assert loaded.sprite.frame(0).layer_count == editor.sprite.current_frame.layer_count


def test_load_invalid_json_keeps_sprite(editor, tmp_path):
    bad = tmp_path / "bad.ssp"
    bad.write_text("{not json", encoding="utf-8")
    before = editor.sprite
    with pytest.raises(SpriteFormatError):
        editor.deserialize_sprite(str(bad))
    assert editor.sprite is before


def test_load_missing_file_raises(editor, tmp_path):
    with pytest.raises(FileNotFoundError):
        editor.deserialize_sprite(str(tmp_path / "missing.ssp"))


def test_setup_requests_report_unsaved_changes(editor):
    create = record(editor.ready_create_new_sprite)
    opening = record(editor.ready_open_sprite)
    editor.setup_create_new_sprite()
    editor.add_new_layer()
    editor.setup_open_sprite()
    assert create == [(False,)]
    assert opening == [(True,)]


def test_duplicate_frame_copies_pixels(editor):
    editor.set_drawing_color((5, 6, 7, 255))
    editor.set_brush_enabled()
    editor.paint_at(3, 2)
    editor.set_duplicate_frame(True)
    editor.add_new_frame()
    sprite = editor.sprite
    assert sprite.frame_count == 2
    assert sprite.frame(1).to_json() == sprite.frame(0).to_json()
    assert sprite.current_frame_index == 1


def test_frame_selection_reports_layer_count(editor):
    editor.add_new_layer()
    editor.add_new_frame()
    selections = record(editor.new_frame_selection)
    editor.select_frame(0)
    assert selections == [(editor.sprite.frame(0).layer_count,)]
    assert editor.sprite.current_frame_index == 0


def test_move_and_remove_frames(editor):
    editor.add_new_frame()
    second = editor.sprite.current_frame
    editor.move_frame_left()
    assert editor.sprite.frame(0) is second
    editor.move_frame_right()
    assert editor.sprite.frame(1) is second
    editor.remove_frame()
    assert editor.sprite.frame_count == 1
    assert second not in editor.sprite.frames


def test_layer_operations(editor):
    editor.add_new_layer()
    frame = editor.sprite.current_frame
    assert frame.current_layer_index == frame.layer_count - 1
    editor.select_layer(0)
    assert frame.current_layer_index == 0
    editor.remove_layer()
    assert frame.layer_count == 1
    with pytest.raises(IndexError):
        editor.select_layer(frame.layer_count)


def test_framerate_sets_duration(editor):
    editor.set_animation_framerate(4)
    assert editor.frame_duration * 4 == 1000
    assert editor.sprite.fps == 4
    assert not editor.is_sprite_saved
    with pytest.raises(ValueError):
        editor.set_animation_framerate(0)


def test_animation_cycles_through_frames(editor, scheduler):
    editor.add_new_frame()
    editor.set_brush_enabled()
    editor.paint_at(0, 0)
    enabled = record(editor.animation_player_set_enabled)
    shown = record(editor.animation_display_data_updated)
    editor.play_animation()
    assert editor.is_animation_playing
    assert enabled == [(True,)]
    delay = scheduler.run_next()
    scheduler.run_next()
    first = editor.sprite.frame(0).display_data
    second = editor.sprite.frame(1).display_data
    assert shown == [(first,), (second,), (first,)]
    assert delay == editor.frame_duration


def test_stop_animation_halts_ticks(editor, scheduler):
    editor.play_animation()
    shown = record(editor.animation_display_data_updated)
    display = record(editor.display_data_updated)
    editor.stop_animation()
    scheduler.run_next()
    assert shown == []
    assert display == [(editor.sprite.current_frame.display_data,)]
    assert not editor.is_animation_playing
    assert scheduler.pending == []