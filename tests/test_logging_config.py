import logging

import pytest

from nudge_api.app.core.logging_config import setup_logging


@pytest.fixture
def bare_root(monkeypatch):
    """Return a function that empties the root logger's handler list.

    pytest attaches its capture handlers around each test phase, so the
    list is swapped inside the test body.
    """
    root = logging.getLogger()
    level = root.level
    pymongo_level = logging.getLogger("pymongo").level

    def _clear():
        monkeypatch.setattr(root, "handlers", [])
        return root

    yield _clear
    for handler in list(root.handlers):
        if not type(handler).__module__.startswith("_pytest"):
            handler.close()
    root.setLevel(level)
    logging.getLogger("pymongo").setLevel(pymongo_level)


def test_writes_to_log_file(bare_root, tmp_path):
    root = bare_root()
    logfile = tmp_path / "logs" / "api.log"

    setup_logging("warning", str(logfile))
    logging.getLogger("nudge_api.test").warning("disk almost full")
    for handler in root.handlers:
        handler.flush()

    assert root.level == logging.WARNING
    assert len(root.handlers) == 2
    assert "[WARNING] nudge_api.test: disk almost full" in logfile.read_text(encoding="utf-8")
    assert logging.getLogger("pymongo").level == logging.WARNING


def test_configures_once(bare_root):
    root = bare_root()
    setup_logging("INFO")
    setup_logging("DEBUG")

    assert len(root.handlers) == 1
    assert root.level == logging.INFO


def test_unknown_level_falls_back_to_info(bare_root):
    root = bare_root()
    setup_logging("chatty")
    assert root.level == logging.INFO
