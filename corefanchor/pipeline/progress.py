from __future__ import annotations
from typing import Iterable, Literal, Optional, TypeVar, Generator
import logging
from tqdm import tqdm


logger = logging.getLogger(__name__)


class ProgressReporter:
    """Reports the progress of a pipeline over its steps, or of a
    single step over the chains or sentences of a document.
    """

    #: number of expected updates, set by :meth:`start_`
    total: Optional[int] = None

    def start_(self, total: int):
        self.total = total

    def update_progress_(self, added_progress: int):
        raise NotImplementedError

    def update_message_(self, message: str):
        pass

    def close_(self):
        pass

    def get_subreporter(self) -> ProgressReporter:
        """
        :return: the reporter given to the steps of a pipeline
        """
        raise NotImplementedError


class NoopProgressReporter(ProgressReporter):
    def update_progress_(self, added_progress: int):
        pass

    def get_subreporter(self) -> ProgressReporter:
        return self


class TQDMProgressReporter(ProgressReporter):
    """Displays progress as a tqdm bar.  Steps progress is displayed
    on a nested bar, under the pipeline bar, that is cleared when the
    step is done.
    """

    def __init__(self, depth: int = 0) -> None:
        self.depth = depth
        self.bar: Optional[tqdm] = None

    def start_(self, total: int):
        super().start_(total)
        self.close_()
        self.bar = tqdm(total=total, position=self.depth, leave=self.depth == 0)

    def update_progress_(self, added_progress: int):
        assert not self.bar is None
        self.bar.update(added_progress)

    def update_message_(self, message: str):
        if not self.bar is None:
            self.bar.set_description_str(message)

    def close_(self):
        if not self.bar is None:
            self.bar.close()
            self.bar = None

    def get_subreporter(self) -> ProgressReporter:
        return TQDMProgressReporter(depth=self.depth + 1)


T = TypeVar("T")


def progress_(
    progress_reporter: ProgressReporter,
    it: Iterable[T],
    total: Optional[int] = None,
) -> Generator[T, None, None]:
    """Iterate over ``it``, reporting one unit of progress after each
    element.

    :param total: number of elements of ``it``.  Computed with
        ``len`` if not given.
    """
    if total is None:
        total = len(it)  # type: ignore
    progress_reporter.start_(total)
    try:
        for elt in it:
            yield elt
            progress_reporter.update_progress_(1)
    finally:
        progress_reporter.close_()


def get_progress_reporter(name: Optional[Literal["tqdm"]]) -> ProgressReporter:
    if name == "tqdm":
        return TQDMProgressReporter()
    if not name is None:
        logger.warning(f"unknown progress reporter: {name}, progress won't be reported")
    return NoopProgressReporter()
