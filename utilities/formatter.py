import logging


class ConsoleFormatter(logging.Formatter):
    """Colours the level name for terminal output."""

    grey = "\x1b[38;20m"
    blue = "\x1b[34;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    fmt = "%(asctime)s | %(levelname)s | %(name)s: %(message)s"

    LEVEL_COLORS = {
        logging.DEBUG: grey,
        logging.INFO: blue,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.grey)
        colored_fmt = self.fmt.replace("%(levelname)s", f"{color}%(levelname)s{self.reset}")
        return logging.Formatter(colored_fmt, datefmt="%H:%M:%S").format(record)


class FileFormatter(logging.Formatter):
    """Plain formatter for log files, with full timestamps and source line."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)s | %(name)s (%(filename)s:%(lineno)d): %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
