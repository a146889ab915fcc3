"""
Tests for display helpers
"""

import logging

from filesorter.config import DEFAULT_CATEGORIES
from filesorter.utils import format_default_table, format_rule_table, format_summary, setup_logging


class TestFormatting:

    def test_rule_table(self):
        table = format_rule_table({"txt": "Notes", "jpeg": "Photos"})
        lines = table.splitlines()

        assert len(lines) == 2
        assert lines[0].startswith("  .txt")
        assert lines[0].endswith("→ Notes")
        assert lines[1].endswith("→ Photos")

    def test_empty_rule_table(self):
        assert format_rule_table({}) == "No custom categories"

    def test_default_table(self):
        table = format_default_table(DEFAULT_CATEGORIES)

        assert len(table.splitlines()) == len(DEFAULT_CATEGORIES)
        assert "pdf, doc, docx" in table

    def test_summary(self):
        line = format_summary({"Images": 1, "Documents": 2}, skipped=1, failed=0)
        assert line == "Moved 3 files (Documents: 2, Images: 1), skipped 1, errors 0"

    def test_summary_nothing_moved(self):
        assert format_summary({}, 0, 2) == "Moved 0 files, skipped 0, errors 2"


class TestSetupLogging:

    def teardown_method(self):
        setup_logging()

    def test_handlers_replaced_on_each_call(self, tmp_path):
        setup_logging(log_file=str(tmp_path / "one.log"))
        logger = setup_logging(log_file=str(tmp_path / "two.log"), verbose=True)

        files = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert [h.baseFilename for h in files] == [str(tmp_path / "two.log")]
        assert logger.level == logging.DEBUG

    def test_console_quiet_by_default(self):
        logger = setup_logging()

        console = [h for h in logger.handlers if type(h) is logging.StreamHandler]
        assert len(console) == 1
        assert console[0].level == logging.WARNING
        assert logger.level == logging.INFO
