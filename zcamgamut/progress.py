"""
A plain text progress bar for the incremental gamut boundary build.
"""
from collections.abc import Iterable, Iterator
import sys
from typing import TextIO

from .color.spec import BuildStep


STAGES = ('extrema', 'samples', 'lightness', 'chroma')
# Share of the build attributed to each stage
WEIGHTS = {'extrema': 30.0, 'samples': 66.0, 'lightness': 2.0, 'chroma': 2.0}


def percent_done(step: BuildStep) -> float:
    """Determine the overall completion percentage after the build step."""
    completed = sum(WEIGHTS[s] for s in STAGES[:STAGES.index(step.stage)])
    return completed + WEIGHTS[step.stage] * step.done / max(step.total, 1)


def progress_reports(steps: Iterable[BuildStep]) -> Iterator[float]:
    """Convert build steps into overall completion percentages."""
    for step in steps:
        yield percent_done(step)


class ProgressBar:
    """
    A single-line progress bar for a build. It shows the current stage next to
    the overall percentage and redraws only when the percentage advances by a
    full point or the stage changes.
    """

    def __init__(self, stream: None | TextIO = None, width: int = 40) -> None:
        self._stream = sys.stdout if stream is None else stream
        self._width = width
        self._stage = ''
        self._percent = -1.0

    def track(self, steps: Iterable[BuildStep]) -> None:
        """Consume the build steps while rendering their progress."""
        for step in steps:
            self.render(step.stage, percent_done(step))
        self.done()

    def render(self, stage: str, percent: float) -> None:
        percent = min(percent, 100.0)
        if stage == self._stage and percent < min(self._percent + 1, 100):
            return

        self._stage, self._percent = stage, percent
        filled = round(self._width * percent / 100)
        bar = '#' * filled + '.' * (self._width - filled)
        self._stream.write(f'\r  {stage:<9} [{bar}] {percent:5.1f}%')
        self._stream.flush()

    def done(self) -> None:
        """Complete the bar and end the line."""
        self.render('done', 100.0)
        self._stream.write('\n')
        self._stream.flush()
        self._stage, self._percent = '', -1.0
