"""
tests/test_scanner.py
Unit tests for comment stripping and the brace-depth cursor.
"""

from __future__ import annotations

from jdlschema.scanner import BraceCursor, strip_comments


class TestStripComments:
    def test_line_comment(self) -> None:
        assert strip_comments("entity A {} // trailing\n") == "entity A {} \n"

    def test_block_comment_spanning_lines(self) -> None:
        text = "/* one\n two */entity A {}"
        assert strip_comments(text) == "entity A {}"

    def test_line_marker_inside_block_comment(self) -> None:
        text = "/* see http://example.org\n */\nentity A {}"
        assert strip_comments(text) == "\nentity A {}"

    def test_multiple_block_comments_are_not_greedy(self) -> None:
        text = "/* a */keep/* b */"
        assert strip_comments(text) == "keep"

    def test_empty_input(self) -> None:
        assert strip_comments("") == ""
        assert strip_comments(None) == ""  # type: ignore[arg-type]


class TestBraceCursor:
    def test_finds_matching_brace(self) -> None:
        text = "{ A to B }"
        cursor = BraceCursor(text, 1)
        end = cursor.find_closing()
        assert end == len(text) - 1
        assert cursor.position == len(text)
        assert cursor.depth == 0

    def test_skips_nested_braces(self) -> None:
        text = "{ A{x} to B{y} } tail"
        cursor = BraceCursor(text, 1)
        end = cursor.find_closing()
        assert end is not None
        assert text[1:end] == " A{x} to B{y} "

    def test_unterminated_returns_none(self) -> None:
        text = "{ A{x} to B"
        cursor = BraceCursor(text, 1)
        assert cursor.find_closing() is None
        assert cursor.exhausted
        assert cursor.depth > 0

    def test_step_tracks_depth(self) -> None:
        cursor = BraceCursor("{}", 0, depth=0)
        assert cursor.step() == "{"
        assert cursor.depth == 1
        assert cursor.step() == "}"
        assert cursor.depth == 0
        assert cursor.exhausted
