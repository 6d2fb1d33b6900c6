"""
Polling scheduler that re-runs the sorter on a fixed interval.
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from file_sorter.errors import FileSorterError, InvalidDirectoryError
from file_sorter.organization_logic.sorter import Sorter

logger = logging.getLogger(__name__)


class Scheduler:
    """Run sort passes until stopped."""

    def __init__(self, sorter: Sorter, stop_event: Optional[threading.Event] = None):
        """Initialize scheduler.

        Args:
            sorter: Sorter used for each pass
            stop_event: Event that ends the loop when set
        """
        self.sorter = sorter
        self.stop_event = stop_event or threading.Event()

    def run(
        self,
        directory: Union[str, Path],
        interval_seconds: float,
        max_passes: Optional[int] = None,
    ) -> int:
        """Sort the directory every interval_seconds until stopped.

        Failed passes are logged and retried on the next interval.

        Args:
            directory: Directory to sort
            interval_seconds: Wait between passes
            max_passes: Stop after this many passes (unbounded when None)

        Returns:
            Number of passes run
        """
        passes = 0
        logger.info(f"Watching {directory} every {interval_seconds} seconds")

        while not self.stop_event.is_set():
            self._run_pass(directory)
            passes += 1

            if max_passes is not None and passes >= max_passes:
                break

            if self.stop_event.is_set():
                break

            # Returns early when stop() is called
            self.stop_event.wait(interval_seconds)

        logger.info(f"Scheduler stopped after {passes} passes")
        return passes

    def stop(self):
        """Ask the loop to exit before its next pass."""
        self.stop_event.set()

    def _run_pass(self, directory: Union[str, Path]):
        try:
            result = self.sorter.sort(directory)
        except InvalidDirectoryError as e:
            logger.error(f"Daemon error: {e}")
        except FileSorterError as e:
            logger.error(f"Sort pass failed for {directory}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error during sort pass: {e}")
        else:
            if result.has_failures:
                logger.warning(
                    f"{result.failed_count} files could not be sorted in {directory}"
                )
