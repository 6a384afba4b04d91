from court_lookup.lib.logging_config import get_logger, rotate_numbered_logs, setup_logging


def test_get_logger_returns_logger():
    log = get_logger()
    # basic logger API assertions
    assert hasattr(log, "info")
    assert hasattr(log, "debug")
    assert callable(log.info)


def test_rotate_numbered_logs_shifts_existing(tmp_path):
    (tmp_path / "lookup-1.log").write_text("first")
    (tmp_path / "lookup-2.log").write_text("second")

    new_log = rotate_numbered_logs(tmp_path, "lookup", ".log", max_index=3)

    assert new_log == tmp_path / "lookup-1.log"
    assert not new_log.exists()
    assert (tmp_path / "lookup-2.log").read_text() == "first"
    assert (tmp_path / "lookup-3.log").read_text() == "second"


def test_setup_logging_writes_numbered_file(tmp_path):
    setup_logging(log_level="DEBUG", log_file=str(tmp_path / "logs" / "court.log"))
    get_logger().info("hello from test")
    setup_logging(log_level="INFO")

    written = (tmp_path / "logs" / "court-1.log").read_text(encoding="utf-8")
    assert "hello from test" in written
