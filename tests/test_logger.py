"""Tests for the structured logger."""

import io
import json
from pytopic.logger import Logger


class TestLogger:
    """Tests for Logger."""

    def test_json_line(self, capsys):
        """Test the fields of a log line."""
        Logger("index").info("Subscription added", subscriber="S1")
        entry = json.loads(capsys.readouterr().out)
        assert entry["level"] == "INFO"
        assert entry["component"] == "index"
        assert entry["message"] == "Subscription added"
        assert entry["subscriber"] == "S1"
        assert "timestamp" in entry

    def test_level_threshold(self, capsys):
        """Test that messages below the level are dropped."""
        logger = Logger("index", level="WARN")
        logger.debug("hidden")
        logger.info("hidden")
        logger.warn("shown")
        logger.error("shown too")
        lines = capsys.readouterr().out.strip().splitlines()
        assert [json.loads(line)["level"] for line in lines] == ["WARN", "ERROR"]

    def test_stream(self):
        """Test writing to a given stream."""
        stream = io.StringIO()
        Logger("cli", stream=stream).error("failed", subscriber=("client", 1))
        entry = json.loads(stream.getvalue())
        assert entry["component"] == "cli"
        assert entry["subscriber"] == ["client", 1]
