"""Tests for checkbox stamping."""

import pytest

from checkdate.stamper import (
    LineKind,
    classify_line,
    count_stamps,
    format_stamp,
    has_stamp,
    stamp_text,
)


def test_stamps_unchecked_and_leaves_checked():
    result = stamp_text("- [ ] buy milk\n- [x] done\n", "2024-01-01")

    assert result.text == "- [ ] buy milk ➕ 2024-01-01\n- [x] done\n"
    assert result.added_count == 1


def test_already_stamped_line_is_unchanged():
    text = "- [ ] task ➕ 2023-05-01\n"

    result = stamp_text(text, "2024-01-01")

    assert result.text == text
    assert result.added_count == 0


def test_idempotent():
    text = "# Todo\n- [ ] a\n  * [ ] b\n+ [ ] c\n\nplain line\n"
    first = stamp_text(text, "2024-01-01")
    second = stamp_text(first.text, "2024-01-01")

    assert first.added_count == 3
    assert second.added_count == 0
    assert second.text == first.text


def test_second_call_with_other_date_does_not_restamp():
    first = stamp_text("- [ ] a\n", "2024-01-01")
    second = stamp_text(first.text, "2025-12-31")

    assert second.text == "- [ ] a ➕ 2024-01-01\n"
    assert second.added_count == 0


def test_count_matches_unstamped_task_lines():
    text = "\n".join(
        [
            "- [ ] one",
            "- [ ] two ➕ 2024-02-02",
            "- [x] closed",
            "* [ ] three",
            "1. [ ] ordered",
            "just text",
            "\t+ [ ] four!",
        ]
    )

    result = stamp_text(text, "2024-01-01")

    assert result.added_count == 3


@pytest.mark.parametrize(
    "line",
    [
        "- [x] done",
        "- [X] done",
        "- [-] cancelled",
        "1. [ ] ordered item",
        "plain text",
        "-[ ] no space after bullet",
        "- [ ]glued",
        "> - [ ] quoted",
        "",
    ],
)
def test_non_task_lines_never_mutated(line):
    result = stamp_text(line + "\n", "2024-01-01")

    assert result.text == line + "\n"
    assert result.added_count == 0
    assert classify_line(line) is LineKind.OTHER


def test_empty_text_is_noop():
    result = stamp_text("", "2024-01-01")

    assert result.text == ""
    assert result.added_count == 0


def test_empty_remainder_gets_double_space():
    assert stamp_text("- [ ]", "2024-01-01").text == "- [ ]  ➕ 2024-01-01"
    assert stamp_text("- [ ] ", "2024-01-01").text == "- [ ]  ➕ 2024-01-01"


def test_prefix_kept_and_gap_collapsed():
    result = stamp_text("    *\t[ ]    indented task.", "2024-01-01")

    assert result.text == "    *\t[ ] indented task. ➕ 2024-01-01"


def test_remainder_kept_verbatim():
    result = stamp_text("- [ ] call Bob (re: invoice #42)...", "2024-01-01")

    assert result.text == "- [ ] call Bob (re: invoice #42)... ➕ 2024-01-01"


def test_crlf_endings_preserved():
    result = stamp_text("- [ ] a\r\n- [ ] b\r\n", "2024-01-01")

    assert result.text == "- [ ] a ➕ 2024-01-01\r\n- [ ] b ➕ 2024-01-01\r\n"
    assert result.added_count == 2


def test_cr_only_endings_split_lines():
    result = stamp_text("- [ ] a\r- [ ] b\r", "2024-01-01")

    assert result.text == "- [ ] a ➕ 2024-01-01\r- [ ] b ➕ 2024-01-01\r"
    assert result.added_count == 2


def test_stray_carriage_return_ends_the_line():
    result = stamp_text("- [ ] a\rnot a task\n- [ ] b\r\n", "2024-01-01")

    assert result.text == "- [ ] a ➕ 2024-01-01\rnot a task\n- [ ] b ➕ 2024-01-01\r\n"
    assert result.added_count == 2


def test_missing_final_newline_preserved():
    result = stamp_text("intro\n- [ ] last", "2024-01-01")

    assert result.text == "intro\n- [ ] last ➕ 2024-01-01"


def test_lenient_stamp_detection_blocks_restamp():
    # No space between marker and date still counts as stamped.
    text = "- [ ] a ➕2024-01-01\n"

    result = stamp_text(text, "2024-03-03")

    assert result.text == text
    assert result.added_count == 0


def test_stamp_anywhere_in_line_counts():
    text = "- [ ] ➕ 2024-01-01 moved to front\n"

    assert stamp_text(text, "2024-05-05").text == text


def test_stray_stamp_counts_toward_baseline():
    text = "```\n➕ 2020-01-01\n```\n- [ ] a\n"

    result = stamp_text(text, "2024-01-01")

    assert result.added_count == 1
    assert count_stamps(result.text) == 2


def test_helpers():
    assert format_stamp("2024-01-01") == "➕ 2024-01-01"
    assert has_stamp("x ➕ 2024-01-01 y")
    assert not has_stamp("x ➕ soon")
    assert classify_line("- [ ] a") is LineKind.UNCHECKED_TASK
    assert classify_line("  + [ ]") is LineKind.UNCHECKED_TASK
    assert count_stamps("➕ 2024-01-01 ➕ 2024-01-02 ➕2024-01-03") == 2
