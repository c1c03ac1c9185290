import logging

import pytest
from rich.logging import RichHandler

from protogen.logging_config import get_logger, setup_logging


class TestLogging:
    def test_get_logger_prefixes_names(self):
        assert get_logger("tools").name == "protogen.tools"
        assert get_logger("protogen.codegen").name == "protogen.codegen"
        assert get_logger("protogen").name == "protogen"

    def test_setup_installs_one_rich_handler(self):
        logger = setup_logging("info")
        setup_logging(logging.DEBUG)
        handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logging("chatty")
