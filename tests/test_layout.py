from pollchat.scrollback import RowSource
from pollchat.ui.layout import LayoutManager


def output(console) -> str:
    return console.file.getvalue()


def reset(console):
    console.file.seek(0)
    console.file.truncate()


def test_redraw_all_draws_frame_and_panes(model, console):
    model.scrollback.append("[2024 carol]: hey")
    model.roster = ["alice", "carol"]
    LayoutManager(model, console).redraw_all()

    text = output(console)
    assert "#" * 120 in text
    assert "\x1b[2;3H" in text
    assert "[2024 carol]: hey" in text
    assert "\x1b[2;91H" in text
    assert "alice" in text
    assert text.endswith("\x1b[27;3H")


def test_redraw_single_region_leaves_frame_alone(model, console):
    layout = LayoutManager(model, console)
    model.roster = ["alice"]
    layout.redraw('roster')

    text = output(console)
    assert "#" not in text
    assert "alice" in text
    assert "\x1b[2;3H" not in text


def test_rows_are_colored_by_source(model, console):
    model.scrollback.append("[I (to alice)]: hi")
    model.scrollback.append("[2024 carol]: hey")
    model.scrollback.add_message("No such user", RowSource.ERROR)
    LayoutManager(model, console).redraw('messages')

    text = output(console)
    assert "\x1b[36m[I (to alice)]: hi" in text
    assert "\x1b[33m[2024 carol]: hey" in text
    assert "\x1b[31mNo such user" in text


def test_color_change_applies_to_next_draw(model, console):
    layout = LayoutManager(model, console)
    model.scrollback.append("[I (to alice)]: hi")
    layout.redraw('messages')
    assert "\x1b[36m[I" in output(console)

    reset(console)
    model.colors.cycle('text')
    assert model.colors.text == "magenta"
    layout.redraw('messages')
    assert "\x1b[35m[I" in output(console)


def test_error_rows_ignore_user_colors(model, console):
    model.scrollback.append("-No such user")
    model.colors.cycle('text')
    model.colors.cycle('user')
    LayoutManager(model, console).redraw('messages')
    assert "\x1b[31m-No such user" in output(console)


def test_input_line_and_cursor(model, console):
    layout = LayoutManager(model, console)
    for char in "* hi":
        model.command_line.feed(char)
    layout.redraw('input')

    text = output(console)
    assert "* hi" in text
    assert text.endswith("\x1b[27;7H")


def test_long_input_wraps_to_next_row(model, console):
    layout = LayoutManager(model, console)
    for char in "* " + "a" * 120:
        model.command_line.feed(char)
    layout.redraw('input')

    text = output(console)
    assert "\x1b[28;3H" in text
    assert text.endswith("\x1b[28;9H")


def test_park_cursor(model, console):
    LayoutManager(model, console).park_cursor()
    assert output(console).endswith("\x1b[30;1H")


def test_window_color_cycles_through_palette(model):
    assert model.colors.window == "magenta"
    for expected in ["blue", "yellow", "green", "red", "white", "cyan", "magenta"]:
        model.colors.cycle('window')
        assert model.colors.window == expected
