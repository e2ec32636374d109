import random

import pytest

from pollchat.scrollback import RowSource, ScrollbackBuffer, classify_row


def check_window(buffer: ScrollbackBuffer):
    assert 0 <= buffer.read_start <= buffer.read_end <= buffer.write_cursor <= buffer.capacity
    assert buffer.read_end - buffer.read_start <= buffer.window_height


def test_overflow_keeps_most_recent_rows_in_order():
    buffer = ScrollbackBuffer(capacity=50, width=85, window_height=24)
    for i in range(1, 61):
        buffer.append(f"r{i}")

    assert buffer.write_cursor == 50
    assert buffer[0].text == "r11"
    assert [row.text for row in buffer] == [f"r{i}" for i in range(11, 61)]


def test_window_follows_tail():
    buffer = ScrollbackBuffer(capacity=50, width=85, window_height=24)
    for i in range(10):
        buffer.append(f"r{i}")
    assert (buffer.read_start, buffer.read_end) == (0, 10)

    for i in range(10, 30):
        buffer.append(f"r{i}")
    assert (buffer.read_start, buffer.read_end) == (6, 30)
    assert buffer.visible_rows()[-1].text == "r29"


def test_window_invariants_hold_for_random_operations():
    rng = random.Random(1234)
    buffer = ScrollbackBuffer(capacity=10, width=20, window_height=4)
    for _ in range(500):
        operation = rng.choice(["append", "append", "up", "down", "clear"] if rng.random() > 0.02 else ["clear"])
        if operation == "append":
            buffer.append("x" * rng.randint(0, 30))
        elif operation == "up":
            buffer.scroll_up()
        elif operation == "down":
            buffer.scroll_down()
        else:
            buffer.clear()
        check_window(buffer)


def test_scroll_up_at_top_is_noop():
    buffer = ScrollbackBuffer(capacity=50, width=85, window_height=24)
    for i in range(5):
        buffer.append(f"r{i}")
    assert buffer.read_start == 0
    assert buffer.scroll_up() is False
    assert (buffer.read_start, buffer.read_end) == (0, 5)


def test_scroll_down_at_tail_is_noop():
    buffer = ScrollbackBuffer(capacity=50, width=85, window_height=24)
    for i in range(30):
        buffer.append(f"r{i}")
    assert buffer.read_end == buffer.write_cursor
    assert buffer.scroll_down() is False
    assert (buffer.read_start, buffer.read_end) == (6, 30)


def test_scroll_up_then_down():
    buffer = ScrollbackBuffer(capacity=50, width=85, window_height=24)
    for i in range(30):
        buffer.append(f"r{i}")

    assert buffer.scroll_up() and buffer.scroll_up()
    assert (buffer.read_start, buffer.read_end) == (4, 28)
    assert buffer.visible_rows()[0].text == "r4"

    assert buffer.scroll_down()
    assert (buffer.read_start, buffer.read_end) == (5, 29)


def test_scroll_down_needs_more_rows_than_window():
    buffer = ScrollbackBuffer(capacity=50, width=85, window_height=24)
    for i in range(24):
        buffer.append(f"r{i}")
    assert buffer.scroll_down() is False


def test_append_after_scroll_shows_newest_row():
    buffer = ScrollbackBuffer(capacity=50, width=85, window_height=24)
    for i in range(30):
        buffer.append(f"r{i}")
    buffer.scroll_up()
    buffer.append("newest")
    assert buffer.visible_rows()[-1].text == "newest"


def test_clear_resets_everything():
    buffer = ScrollbackBuffer(capacity=50, width=85, window_height=24)
    for i in range(40):
        buffer.append(f"r{i}")
    buffer.clear()
    assert (buffer.write_cursor, buffer.read_start, buffer.read_end) == (0, 0, 0)
    assert buffer.visible_rows() == ()


def test_visible_rows_is_a_snapshot():
    buffer = ScrollbackBuffer(capacity=50, width=85, window_height=24)
    buffer.append("first")
    snapshot = buffer.visible_rows()
    buffer.append("second")
    assert [row.text for row in snapshot] == ["first"]
    assert [row.text for row in buffer.visible_rows()] == ["first", "second"]


def test_append_truncates_to_row_width():
    buffer = ScrollbackBuffer(capacity=5, width=10, window_height=3)
    buffer.append("0123456789abcdef")
    buffer.append("ширина-в-ячейках-терминала")
    assert buffer[0].text == "0123456789"
    assert buffer[1].text == "ширина-в-я"


def test_add_message_wraps_and_keeps_source():
    buffer = ScrollbackBuffer(capacity=50, width=10, window_height=24)
    buffer.add_message("MSGFROM [2024 carol]: a long message")

    texts = [row.text for row in buffer]
    assert texts == ["[2024 caro", "l]: a long", " message"]
    assert {row.source for row in buffer} == {RowSource.OTHER}


def test_add_message_explicit_source():
    buffer = ScrollbackBuffer()
    buffer.add_message("No such user", RowSource.ERROR)
    assert buffer[0].source is RowSource.ERROR


def test_classify_row_markers():
    assert classify_row("[I (to alice)]: hi") is RowSource.SELF
    assert classify_row("[2024-01-01 carol]: hey") is RowSource.OTHER
    assert classify_row("-No such user") is RowSource.ERROR
    assert classify_row("+Sent!") is RowSource.PLAIN
    assert classify_row("") is RowSource.PLAIN


def test_invalid_geometry_is_rejected():
    with pytest.raises(ValueError):
        ScrollbackBuffer(capacity=0)
