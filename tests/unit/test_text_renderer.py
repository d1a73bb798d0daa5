"""Unit tests for the plain-text renderer."""

from datetime import datetime, timezone

import pytest

from termsite.interfaces.renderer import TemplateData
from termsite.models.blocks import CommandPrompt, Frame, Heading, Paragraph, Raw
from termsite.models.records import MetricRecord, TraceRecord
from termsite.strategies.renderers.text import TextRenderer, _split_line, wrap_text


class TestWrapText:
    """Test suite for the word-wrap helper."""

    def test_wraps_on_word_boundaries(self):
        """Test that lines break between words and never exceed the width."""
        lines = wrap_text("the quick brown fox jumps over the lazy dog", 20)

        assert lines == ["the quick brown fox", "jumps over the lazy", "dog"]

    def test_long_words_are_split(self):
        """Test that a word wider than the width is broken."""
        assert wrap_text("a" * 25, 20) == ["a" * 20, "a" * 5]

    def test_whitespace_is_normalized(self):
        """Test that runs of whitespace collapse."""
        assert wrap_text("  one \n\t two  ", 20) == ["one two"]

    def test_empty_text(self):
        assert wrap_text("", 20) == []


class TestTextRenderer:
    """Test suite for TextRenderer."""

    @pytest.fixture
    def renderer(self):
        """Create a default-width renderer."""
        return TextRenderer()

    @pytest.fixture
    def narrow(self):
        """Create a minimum-width renderer."""
        return TextRenderer(width=20)

    @pytest.fixture
    def ascii_renderer(self):
        """Create an ASCII-only minimum-width renderer."""
        return TextRenderer(width=20, ascii_only=True)

    # =========================================================================
    # Configuration
    # =========================================================================

    def test_rejects_narrow_width(self):
        """Test that widths below 20 are refused."""
        with pytest.raises(ValueError, match="at least 20"):
            TextRenderer(width=19)

    def test_format_properties(self, renderer):
        assert renderer.file_extension == ".txt"
        assert renderer.media_type == "text/plain"

    # =========================================================================
    # Headings and Text
    # =========================================================================

    @pytest.mark.parametrize(
        "level, expected",
        [
            (1, "Title\n=====\n\n"),
            (2, "Title\n-----\n\n"),
            (3, "Title\n~~~~~\n\n"),
            (4, "Title\n\n"),
            (0, "Title\n=====\n\n"),
            (9, "Title\n\n"),
        ],
    )
    def test_heading_underlines(self, renderer, level, expected):
        """Test underline characters per clamped level."""
        assert renderer.render_heading(level, "Title") == expected

    def test_paragraph_is_wrapped(self, narrow):
        """Test that paragraphs wrap to the width and end with a blank line."""
        text = narrow.render_paragraph("the quick brown fox jumps over the lazy dog")

        assert text == "the quick brown fox\njumps over the lazy\ndog\n\n"

    @pytest.mark.parametrize("width", [20, 33, 57, 80])
    def test_paragraph_lines_fit_width(self, width):
        """Test that no wrapped line is wider than the renderer."""
        text = " ".join(["lorem", "ipsum", "x" * 45, "dolor", "sit", "amet"] * 6)

        rendered = TextRenderer(width=width).render_paragraph(text)

        assert all(len(line) <= width for line in rendered.splitlines())

    def test_render_blocks_concatenates(self, renderer):
        """Test that a block list renders as the sum of its blocks."""
        blocks = [
            Heading(level=2, text="Status"),
            Paragraph("all systems nominal"),
            CommandPrompt("uptime"),
            Frame(content=[Raw("up 3 days\n")], title="uptime"),
        ]

        assert renderer.render_blocks(blocks) == "".join(renderer.render_block(b) for b in blocks)

    def test_command_prompt(self, renderer):
        assert renderer.render_command_prompt("ls -la") == "$ ls -la\n"

    def test_output_appends_blank_line(self, renderer):
        """Test that an output group is its children plus a newline."""
        assert renderer.render_output([CommandPrompt("ls")]) == "$ ls\n\n"

    def test_raw_passes_through(self, renderer):
        assert renderer.render_raw("<!-- Metrics: 0 -->") == "<!-- Metrics: 0 -->"

    # =========================================================================
    # Frames
    # =========================================================================

    def test_frame_with_title(self, narrow):
        """Test a small titled frame drawn with box characters."""
        text = narrow.render_frame("T", [CommandPrompt("ls")])

        assert text == "┌ T ───┐\n│ $ ls │\n└──────┘\n"

    def test_ascii_frame(self, ascii_renderer):
        """Test the ASCII glyph set."""
        text = ascii_renderer.render_frame("T", [CommandPrompt("ls")])

        assert text == "+ T ---+\n| $ ls |\n+------+\n"

    def test_empty_untitled_frame(self, narrow):
        assert narrow.render_frame(None, []) == "┌──┐\n└──┘\n"

    def test_frame_never_exceeds_width(self, narrow):
        """Test that long titles, paragraphs and raw lines stay inside the width."""
        text = narrow.render_frame(
            "A very long frame title that cannot fit",
            [
                Paragraph("some words that will need wrapping inside the frame"),
                Raw("x" * 50 + "\n"),
                Frame(content=[CommandPrompt("nested command output")], title="inner"),
            ],
        )

        lines = text.splitlines()
        assert len(lines) > 3
        assert all(len(line) <= 20 for line in lines)
        assert len({len(line) for line in lines}) == 1

    @pytest.mark.parametrize("depth", [5, 6, 8])
    @pytest.mark.parametrize("title", [None, "level"])
    def test_deeply_nested_frames(self, narrow, depth, title):
        """Test that frames nested past the usable width still render in bounds."""
        block = Frame(content=[Paragraph("deep")], title=title)
        for _ in range(depth - 1):
            block = Frame(content=[block], title=title)

        text = narrow.render_block(block)

        lines = text.splitlines()
        assert all(len(line) <= 20 for line in lines)
        assert len({len(line) for line in lines}) == 1
        inner_chars = "".join(line[2:-2] for line in lines)
        assert all(char in inner_chars for char in "dep")

    def test_split_line_with_no_room(self):
        assert _split_line("abc", 0) == ["a", "b", "c"]

    # =========================================================================
    # Metrics
    # =========================================================================

    def test_metric_is_right_aligned(self, narrow):
        """Test value padding and the upward trend glyph."""
        text = narrow.render_metric("CPU", "42", "%", 1.0)

        assert text == "CPU: " + " " * 8 + "42 % ▲\n"

    def test_metric_ascii_trend(self, ascii_renderer):
        assert ascii_renderer.render_metric("CPU", "42", None, -0.5).endswith("42 v\n")

    def test_metric_flat_trend_has_no_glyph(self, renderer):
        assert renderer.render_metric("CPU", "42", None, 0.0).endswith(" 42\n")

    def test_metric_with_long_name(self, narrow):
        """Test that padding never goes negative."""
        assert narrow.render_metric("A" * 30, "1") == "A" * 30 + ": 1\n"

    # =========================================================================
    # Log Entries
    # =========================================================================

    def test_log_entry_prefix(self, renderer):
        """Test the timestamp, level and source prefix."""
        text = renderer.render_log_entry("Started", "INFO", "2025", "app")

        assert text == "[2025] [INFO ] [app] Started\n"

    @pytest.mark.parametrize(
        "level, label",
        [("debug", "DEBUG"), ("WARN", "WARN "), ("warning", "WARN "), ("ERROR", "ERROR"), ("TRACE", "INFO ")],
    )
    def test_log_level_labels(self, renderer, level, label):
        """Test fixed-width level labels, with unknown levels shown as info."""
        assert renderer.render_log_entry("m", level) == f"[{label}] m\n"

    def test_log_message_wraps_under_prefix(self):
        """Test that continuation lines are indented to the prefix."""
        renderer = TextRenderer(width=30)

        text = renderer.render_log_entry("disk quota exceeded on volume data", "ERROR")

        assert text == "[ERROR] disk quota exceeded on\n        volume data\n"

    def test_log_message_moves_below_long_prefix(self, narrow):
        """Test that a prefix leaving no room puts the message on its own lines."""
        text = narrow.render_log_entry("hello", "INFO", "2025-01-01T00:00:00Z")

        assert text == "[2025-01-01T00:00:00Z] [INFO ]\nhello\n"

    def test_empty_log_message(self, renderer):
        assert renderer.render_log_entry("", "INFO") == "[INFO ]\n"

    # =========================================================================
    # Tables
    # =========================================================================

    def test_table(self, renderer):
        """Test a bordered table with a header separator."""
        text = renderer.render_table(["Name", "Value"], [["A", "1"]])

        assert text == (
            "┌──────┬───────┐\n"
            "│ Name │ Value │\n"
            "├──────┼───────┤\n"
            "│ A    │ 1     │\n"
            "└──────┴───────┘\n"
        )

    def test_ascii_table(self, ascii_renderer):
        text = ascii_renderer.render_table(["Name", "Value"], [["A", "1"]])

        assert text == (
            "+------+-------+\n"
            "| Name | Value |\n"
            "+------+-------+\n"
            "| A    | 1     |\n"
            "+------+-------+\n"
        )

    def test_ragged_rows_are_padded(self, ascii_renderer):
        """Test that the widest row decides the column count."""
        text = ascii_renderer.render_table(["a", "b"], [["1"], ["2", "3", "4"]])

        assert text.splitlines() == [
            "+---+---+---+",
            "| a | b |   |",
            "+---+---+---+",
            "| 1 |   |   |",
            "+---+---+---+",
            "| 2 | 3 | 4 |",
            "+---+---+---+",
        ]

    def test_headers_only_table(self, ascii_renderer):
        """Test that no separator follows the header when there are no rows."""
        assert ascii_renderer.render_table(["Host"], []) == "+------+\n| Host |\n+------+\n"

    def test_empty_table(self, renderer):
        assert renderer.render_table([], []) == ""

    # =========================================================================
    # Traces and Documents
    # =========================================================================

    def test_trace_metadata_is_sorted(self, renderer):
        """Test the trace layout with metadata listed by key."""
        text = renderer.render_trace("Req", 120, "t0", "ok", {"b": "2", "a": "1"})

        assert text == "Req (120 ms)\nStarted: t0, Status: ok\nMetadata:\n  a: 1\n  b: 2\n"

    def test_trace_without_metadata(self, renderer):
        assert renderer.render_trace("Req", 5, "t0", "ok", {}) == "Req (5 ms)\nStarted: t0, Status: ok\n"

    def test_render_template(self, renderer):
        """Test the document header and generation footer."""
        data = TemplateData(blocks=[Heading(level=1, text="Hi")], template_name="dashboard")

        text = renderer.render_template(data)

        assert text.startswith("# dashboard\n\nHi\n==\n\n")
        assert "\n--- Generated at " in text
        assert text.endswith(" ---\n")

    def test_render_records_directly(self, renderer):
        """Test the direct record entry points and their empty messages."""
        assert renderer.render_metrics([]) == "No metrics available\n"
        assert renderer.render_logs([]) == "No logs available\n"
        assert renderer.render_traces([]) == "No traces available\n"

        metrics = renderer.render_metrics([MetricRecord(name="CPU", value=42.0)])
        assert metrics.startswith("CPU: ")
        assert metrics.endswith(" 42\n")

    def test_render_traces_as_table(self, renderer):
        start = datetime(2025, 1, 1, tzinfo=timezone.utc)
        trace = TraceRecord.between("Query", start, start).with_metadata("status", "ok")

        text = renderer.render_traces([trace])

        assert "│ Name  │ Duration │" in text
        assert "│ Query │ 0 ms     │ 2025-01-01T00:00:00+00:00 │ ok     │" in text
