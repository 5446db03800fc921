"""Progress bar for the resize run."""

import sys
from typing import Optional, TextIO

from resizer.data_models import ProgressState


class ProgressBar:
    """Single-line progress bar over all discovered files."""

    WIDTH = 50

    def __init__(self, enabled: bool = True, stream: Optional[TextIO] = None):
        """
        Initialize progress bar.

        Args:
            enabled: Whether anything is drawn (False in quiet and JSON mode)
            stream: Output stream (defaults to stdout)
        """
        self.enabled = enabled
        self.stream = stream
        self._drawn = False

    def update(self, current: int, total: int) -> None:
        """
        Redraw the bar for the given position.

        Args:
            current: Number of files handled so far
            total: Number of files discovered
        """
        if not self.enabled:
            return
        self._write(f"\r{self.render(ProgressState(current, total))}")
        self._drawn = True

    def finish(self) -> None:
        """End the progress line."""
        if self.enabled and self._drawn:
            self._write("\n")
            self._drawn = False

    @classmethod
    def render(cls, state: ProgressState) -> str:
        """Render the bar text, e.g. '|=====     |  50% (1/2)'."""
        bar = "=" * state.filled(cls.WIDTH)
        return f"|{bar:<{cls.WIDTH}}| {state.percentage:3d}% ({state.current}/{state.total})"

    def _write(self, text: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(text)
        stream.flush()
