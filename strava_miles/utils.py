import logging

from rich.logging import RichHandler

_logging_configured = False


class TokenFilter(logging.Filter):
    """Masks bearer tokens that end up in log messages."""

    def filter(self, record):
        message = record.getMessage()
        if 'Bearer ' in message:
            head, _, tail = message.partition('Bearer ')
            token, sep, rest = tail.partition(' ')
            record.msg = f"{head}Bearer {token[:4]}***{sep}{rest}"
            record.args = ()
        return True


def get_logger(name):
    """
    Creates and configures a logger.
    The root logger gets a single RichHandler the first time this is called.
    """
    global _logging_configured

    if not _logging_configured:
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        root_logger.setLevel(logging.INFO)

        handler = RichHandler(rich_tracebacks=True, show_time=True, show_path=False)
        handler.addFilter(TokenFilter())
        root_logger.addHandler(handler)
        _logging_configured = True

    return logging.getLogger(name)
