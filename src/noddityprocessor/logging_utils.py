import logging

# Records propagate to the application's logging configuration; nothing is
# printed unless the application configures a handler.
logger = logging.getLogger("noddityprocessor")
logger.addHandler(logging.NullHandler())
