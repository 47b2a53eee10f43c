import logging

from kiosk.logger import setup_logger


def test_setup_logger_adds_console_and_file_once(tmp_path):
    name = "kiosk.tests.setup"
    # Keep pytest's root capture handlers out of hasHandlers()
    logging.getLogger(name).propagate = False

    logger = setup_logger(name, logging.DEBUG, log_dir=tmp_path)
    again = setup_logger(name, log_dir=tmp_path)
    try:
        assert again is logger
        assert len(logger.handlers) == 2

        logger.warning("rent updated")
        for handler in logger.handlers:
            handler.flush()
        assert "WARNING - rent updated" in (tmp_path / "app.log").read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
