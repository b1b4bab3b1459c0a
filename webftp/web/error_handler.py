"""Process-wide error handler for webftp.

Routes otherwise-uncaught errors to a single reporting callback and
turns them into a 500 response.
"""

import logging
import sys
import threading
from typing import Callable, Optional

from webftp.web.response import HttpResponse

logger = logging.getLogger("webftp.errors")

ReportCallback = Callable[[BaseException], None]


class ErrorHandler:
    """Installs hooks that report uncaught exceptions."""

    def __init__(self, report: ReportCallback):
        """
        Initialize the handler.

        Args:
            report: Called with every uncaught exception
        """
        if not callable(report):
            raise TypeError("report must be callable")
        self._report = report
        self._previous_excepthook: Optional[Callable] = None
        self._previous_threading_hook: Optional[Callable] = None

    @property
    def is_active(self) -> bool:
        """True between start() and restore()."""
        return self._previous_excepthook is not None

    def handle(self, error: BaseException) -> HttpResponse:
        """
        Report an uncaught error and build the 500 response for it.

        Args:
            error: The uncaught exception

        Returns:
            HttpResponse with status 500
        """
        logger.error(f"Unhandled error: {error!r}")
        self._report(error)
        return HttpResponse(b"Internal Server Error", status=500)

    def start(self) -> None:
        """Install the process and thread exception hooks."""
        if self.is_active:
            return
        self._previous_excepthook = sys.excepthook
        self._previous_threading_hook = threading.excepthook

        def excepthook(exc_type, exc_value, exc_tb):
            self.handle(exc_value)

        def threading_hook(args):
            if args.exc_value is not None:
                self.handle(args.exc_value)

        sys.excepthook = excepthook
        threading.excepthook = threading_hook

    def restore(self) -> None:
        """Put back the hooks that were active before start()."""
        if not self.is_active:
            return
        sys.excepthook = self._previous_excepthook
        threading.excepthook = self._previous_threading_hook
        self._previous_excepthook = None
        self._previous_threading_hook = None
