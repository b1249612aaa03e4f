import logging

import pytest

from pricer.logging_config import coerce_level, setup_logging


@pytest.mark.parametrize(
    "value, expected",
    [("info", logging.INFO), ("WARN", logging.WARNING), ("10", 10), (logging.ERROR, logging.ERROR)],
)
def test_coerce_level(value, expected):
    assert coerce_level(value) == expected


def test_unknown_level():
    with pytest.raises(ValueError, match="Unknown logging level"):
        coerce_level("loud")


def test_log_file_is_written(tmp_path):
    log_file = tmp_path / "logs" / "pricer.log"
    setup_logging("INFO", log_file=log_file)

    logging.getLogger("pricer.test").info("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello from the test" in log_file.read_text(encoding="utf-8")
