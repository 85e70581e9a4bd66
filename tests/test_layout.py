from codeghost.layout import line_display_height, scroll_offset


def test_zero_content_width_is_one_row():
    assert line_display_height("x" * 500, 10, 0) == 1


def test_empty_line_takes_one_row():
    assert line_display_height("", 10, 80) == 1


def test_short_line_takes_one_row():
    assert line_display_height("fn main() {}", 10, 80) == 1


def test_no_room_for_text_is_one_row():
    # Ten columns are taken by padding, gutter and separator.
    assert line_display_height("x" * 100, 10, 10) == 1


def test_long_line_wraps():
    assert line_display_height("x" * 11, 10, 15) == 3


def test_height_grows_with_length():
    heights = [line_display_height("y" * n, 10, 30) for n in range(0, 200, 7)]
    assert heights == sorted(heights)
    assert heights[-1] > heights[0]


def test_wide_characters_count_double():
    for repeat in range(1, 30):
        wide = line_display_height("日本" * repeat, 10, 20)
        narrow = line_display_height("abab" * repeat, 10, 20)
        assert wide == narrow


def test_bigger_gutter_for_many_lines_never_reduces_height():
    line = "z" * 60
    assert line_display_height(line, 100000, 30) >= line_display_height(line, 10, 30)


def test_scroll_stays_at_top_near_start():
    lines = ["line"] * 100
    assert scroll_offset(lines, 2, 10, 0) == 0


def test_scroll_centres_cursor_in_middle():
    lines = ["line"] * 100
    for cursor in (20, 40, 60):
        offset = scroll_offset(lines, cursor, 10, 0)
        assert cursor - offset == 10 // 2


def test_scroll_clamps_at_end():
    lines = ["line"] * 100
    assert scroll_offset(lines, 99, 10, 0) == len(lines) - 10


def test_scroll_cursor_out_of_range_treated_as_top():
    lines = ["line"] * 100
    assert scroll_offset(lines, 1000, 10, 0) == 0


def test_scroll_cursor_always_visible_with_wrapping():
    lines = ["w" * (i % 40) for i in range(120)]
    for cursor in range(0, 120, 9):
        offset = scroll_offset(lines, cursor, 12, 30)
        assert 0 <= offset <= cursor