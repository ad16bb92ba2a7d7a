"""Tests for logging setup and redaction."""

from __future__ import annotations

import logging
from pathlib import Path

from sui_cli_proxy.logging_setup import RedactingFilter, setup_logging

ADDRESS = "0x" + "a1b2c3d4" * 8


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


class TestRedactingFilter:
    def test_redacts_arguments(self):
        record = _record("Imported %s for %s", "suiprivkeyABC123", ADDRESS)
        assert RedactingFilter().filter(record) is True
        assert record.getMessage() == "Imported **** for 0xa1b2...c3d4"

    def test_clean_record_untouched(self):
        record = _record("Finished (exit %d)", 0)
        RedactingFilter().filter(record)
        assert record.args == (0,)
        assert record.getMessage() == "Finished (exit 0)"


class TestSetupLogging:
    def test_file_handler_redacts(self, app_config):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        root.handlers.clear()
        try:
            setup_logging(app_config, console=False)
            assert all(
                any(isinstance(f, RedactingFilter) for f in h.filters) for h in root.handlers
            )
            logging.getLogger("sui_cli_proxy.test").warning("active %s", ADDRESS)
            for handler in root.handlers:
                handler.flush()
            content = Path(app_config.logging.file).read_text()
            assert "0xa1b2...c3d4" in content
            assert ADDRESS not in content
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
