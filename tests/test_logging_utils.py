import logging
from pathlib import Path

from moodstinger import logging_utils


def test_log_dir_defaults_under_home(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("MOODSTINGER_HOME", str(tmp_path))
    monkeypatch.delenv("MOODSTINGER_LOG_DIR", raising=False)
    assert logging_utils.get_home_dir() == tmp_path
    assert logging_utils.get_log_dir() == tmp_path / "logs"
    assert logging_utils.get_log_path() == tmp_path / "logs" / "moodstinger.log"


def test_log_dir_override(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("MOODSTINGER_LOG_DIR", str(tmp_path / "elsewhere"))
    assert logging_utils.get_log_dir() == tmp_path / "elsewhere"


def test_debug_flag(monkeypatch) -> None:
    monkeypatch.delenv("MOODSTINGER_DEBUG", raising=False)
    assert not logging_utils.debug_enabled()
    monkeypatch.setenv("MOODSTINGER_DEBUG", "0")
    assert not logging_utils.debug_enabled()
    monkeypatch.setenv("MOODSTINGER_DEBUG", "1")
    assert logging_utils.debug_enabled()


def test_log_exception_writes_traceback(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("MOODSTINGER_LOG_DIR", str(tmp_path))
    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        path = logging_utils.log_exception("generate", exc)

    assert path == tmp_path / "moodstinger.log"
    content = path.read_text(encoding="utf-8")
    assert "generate failed: RuntimeError: boom" in content
    assert "Traceback" in content


def test_log_exception_never_raises(tmp_path, monkeypatch) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setenv("MOODSTINGER_LOG_DIR", str(blocker / "logs"))
    assert logging_utils.log_exception("render", ValueError("bad")) is None


def test_configure_logging_installs_one_handler(monkeypatch) -> None:
    monkeypatch.delenv("MOODSTINGER_DEBUG", raising=False)
    logger = logging.getLogger("moodstinger")
    monkeypatch.setattr(logger, "handlers", [])

    logging_utils.configure_logging()
    logging_utils.configure_logging(verbose=True)
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert isinstance(Path(logging_utils.get_log_path()), Path)
