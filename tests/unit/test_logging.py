"""Tests for logging configuration."""

import logging

import pytest

from wireshape.core.logging import StructuredFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_wireshape_logger():
    """Undo handler and level changes made by configure_logging."""
    logger = logging.getLogger("wireshape")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def make_record(msg="Loaded", **extra):
    record = logging.LogRecord("wireshape.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Tests for the plain-text structured formatter."""

    def test_plain_message(self):
        assert StructuredFormatter().format(make_record()) == "[INFO] Loaded"

    def test_transformer_mode_and_context(self):
        record = make_record(
            transformer="post", mode="collection", context={"paths": "comments"}
        )
        assert (
            StructuredFormatter().format(record)
            == "[INFO] transformer=post mode=collection paths=comments Loaded"
        )


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_installs_single_handler(self):
        configure_logging(level="DEBUG")
        configure_logging(level="debug")

        logger = logging.getLogger("wireshape")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_unknown_level_defaults_to_info(self):
        configure_logging(level="CHATTY")
        assert logging.getLogger("wireshape").level == logging.INFO

    def test_transformer_name_filter(self, capsys):
        configure_logging(level="INFO", transformer_name="post")

        logging.getLogger("wireshape.core.engine").info("Rendering")
        logging.getLogger("wireshape.core.engine").info("Nested", extra={"transformer": "comment"})

        out = capsys.readouterr().out.splitlines()
        assert out == ["[INFO] transformer=post Rendering", "[INFO] transformer=comment Nested"]

    def test_json_format(self, capsys):
        pytest.importorskip("json_log_formatter")

        configure_logging(level="INFO", json_format=True)
        logging.getLogger("wireshape.core.engine").info("Rendering")

        assert '"message": "Rendering"' in capsys.readouterr().out
