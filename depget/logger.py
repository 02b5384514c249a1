from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

if TYPE_CHECKING:
    from depget.errors import PackageError

console = Console()

logger = None


class Logger:
    @staticmethod
    def get_console():
        global console
        return console

    @staticmethod
    def setup_logger(level: int = logging.INFO, ignore_if_already_setup: bool = True):
        """
        Attach a rich handler to the depget logger.
        Calling it again only adjusts the level, unless ignore_if_already_setup is False.
        """
        global logger
        if logger is not None:
            if ignore_if_already_setup:
                logger.setLevel(level)
                return
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
        logger = logging.getLogger("depget")

        verbose = level < logging.INFO

        handler = RichHandler(
            show_time=verbose,
            show_level=verbose,
            console=Logger.get_console(),
            markup=True,
        )
        handler.setFormatter(RichFormatter(fmt="%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        logger.setLevel(level)

    @staticmethod
    def print_exception_message(exception: Exception, include_exception_name=True):
        """
        Prints an exception message to the console.

        Parameters
        ----------
        exception: Exception
            The exception to print
        include_exception_name: bool
            If True, the exception name will be included in the message
        """
        if include_exception_name:
            msg = f"[bold red]{type(exception).__name__}:[/bold red] [red]{escape(str(exception))}[/red]"
        else:
            msg = f"[bold red]{escape(str(exception))}[/bold red]"
        Logger.get_console().print(msg)

    @staticmethod
    def print_package_errors(errors: list[PackageError]):
        """Print every package error with its import chain, indented below a summary line."""
        console = Logger.get_console()
        console.print(f"[bold red]{len(errors)} package(s) could not be fetched:")
        for error in errors:
            lines = str(error).splitlines() or [""]
            console.print(f"  [red]- {escape(lines[0])}")
            for line in lines[1:]:
                console.print(f"    [red]{escape(line.strip())}")


class RichFormatter(logging.Formatter):
    def __init__(self, fmt: str, datefmt: str):
        super().__init__(fmt=fmt, datefmt=datefmt)

        self.colored_formats = {
            logging.DEBUG: "[grey]" + fmt,
            logging.INFO: "[grey]" + fmt,
            logging.WARNING: "[yellow]" + fmt,
            logging.ERROR: "[red]" + fmt,
            logging.CRITICAL: "[bold red]" + fmt,
        }

        self.formatters = {
            level: logging.Formatter(colored_fmt, datefmt=datefmt)
            for level, colored_fmt in self.colored_formats.items()
        }

    def format(self, record: logging.LogRecord):
        formatter = self.formatters.get(record.levelno, self.formatters[logging.INFO])
        return formatter.format(record)
