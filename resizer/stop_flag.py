"""Graceful shutdown between files of a resize run."""

import logging
import signal

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class StopFlag:
    """
    Set by SIGINT/SIGTERM and checked by the pipeline between files.

    The first signal lets the current file finish; FFmpeg runs in its own
    session and does not see a terminal Ctrl+C. A second signal raises
    KeyboardInterrupt and aborts the run.
    """

    def __init__(self):
        self._stop_requested = False
        self._previous_handlers = {}

    def request_stop(self):
        """Request a stop after the current file completes."""
        self._stop_requested = True
        logging.warning("Stop requested - finishing current file before exiting")

    def is_stop_requested(self) -> bool:
        return self._stop_requested

    def _handle_signal(self, signum, frame):
        if self._stop_requested:
            raise KeyboardInterrupt
        self.request_stop()

    def register_signal_handlers(self):
        """Install the stop handlers, remembering the ones they replace."""
        if self._previous_handlers:
            return
        try:
            for signum in STOP_SIGNALS:
                self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)
        except ValueError as e:
            # Only the main thread may install handlers
            logging.debug(f"Signal handlers not registered: {e}")

    def restore_signal_handlers(self):
        """Put back the handlers that were active before registration."""
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers = {}
