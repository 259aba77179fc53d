"""
Unit tests for the diagnostics hook.
"""

import logging

from BZ_Libs.diagnostics import DiagnosticEvent, Diagnostics


class TestDiagnostics:
    """Tests for Diagnostics."""

    def test_records_events_in_order(self):
        """Should keep events in the order they were emitted."""
        diagnostics = Diagnostics()

        diagnostics.debug("path", "normalize.verbatim", raw="blob:x")
        diagnostics.warning("editor", "zones.dropped", dropped=2)

        assert diagnostics.names() == ["normalize.verbatim", "zones.dropped"]
        assert diagnostics.last().level == logging.WARNING
        assert diagnostics.find("zones.dropped")[0].fields == {"dropped": 2}

    def test_history_is_bounded(self):
        """Should drop the oldest events once the history is full."""
        diagnostics = Diagnostics(history_size=3)

        for index in range(5):
            diagnostics.info("editor", f"event.{index}")

        assert diagnostics.names() == ["event.2", "event.3", "event.4"]

    def test_clear(self):
        """Should empty the event history."""
        diagnostics = Diagnostics()
        diagnostics.info("editor", "editor.saved")

        diagnostics.clear()

        assert diagnostics.events == []
        assert diagnostics.last() is None

    def test_forwards_to_logging(self, caplog):
        """Should forward events at or above the logger level."""
        log = logging.getLogger("tests.diagnostics")
        diagnostics = Diagnostics(log=log)

        with caplog.at_level(logging.INFO, logger="tests.diagnostics"):
            diagnostics.info("editor", "editor.saved", zones=1)
            diagnostics.debug("editor", "editor.gesture_started")

        assert "[editor] editor.saved (zones=1)" in caplog.text
        assert "gesture_started" not in caplog.text

    def test_describe(self):
        """Should render an event as a readable line."""
        event = DiagnosticEvent(logging.DEBUG, "path", "match.hit", {"strategy": "exact", "key": "/a"})

        assert event.describe() == "[path] match.hit (key='/a', strategy='exact')"
