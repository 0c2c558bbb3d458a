import io
import json
import sys

import structlog

from quickapp_deploy.utils.logging import bind_deploy_context, setup_logging


def test_logs_follow_current_stderr(monkeypatch):
    first = io.StringIO()
    monkeypatch.setattr(sys, "stderr", first)
    setup_logging("INFO", "json")
    structlog.get_logger().info("first run")

    second = io.StringIO()
    monkeypatch.setattr(sys, "stderr", second)
    setup_logging("INFO", "json")
    structlog.get_logger().info("second run")

    assert "first run" in first.getvalue()
    assert "second run" in second.getvalue()
    assert "second run" not in first.getvalue()


def test_closed_stream_does_not_break_later_logging(monkeypatch):
    stream = io.StringIO()
    monkeypatch.setattr(sys, "stderr", stream)
    setup_logging("INFO", "json")
    structlog.get_logger().info("before close")

    monkeypatch.setattr(sys, "stderr", io.StringIO())
    stream.close()

    # Must not raise "I/O operation on closed file"
    structlog.get_logger().info("after close")


def test_json_lines_carry_context_and_redact(monkeypatch):
    stream = io.StringIO()
    monkeypatch.setattr(sys, "stderr", stream)
    setup_logging("INFO", "json")
    bind_deploy_context(package_name="demo", workspace="/opt/apps")

    structlog.get_logger().info("Querying catalog", token="abc")

    line = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert line["event"] == "Querying catalog"
    assert line["packageName"] == "demo"
    assert line["token"] == "[REDACTED]"
    assert line["level"] == "info"


def test_level_filters_debug(monkeypatch):
    stream = io.StringIO()
    monkeypatch.setattr(sys, "stderr", stream)
    setup_logging("warning", "json")
    structlog.get_logger().info("hidden")
    structlog.get_logger().warning("shown")
    assert "hidden" not in stream.getvalue()
    assert "shown" in stream.getvalue()
