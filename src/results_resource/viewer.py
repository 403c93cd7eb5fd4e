"""Summary port backed by the ``junit-viewer`` command line tool."""

import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Optional, Union

from .errors import NoResultsFoundError, SummaryError, UnsupportedSummaryKindError
from .models import Summary

log = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "junit-viewer"
DEFAULT_TIMEOUT_SECONDS = 120

SUPPORTED_SUMMARY_TYPES = ("pass-fail", "frequent-failures", "slowest-tests")


class JunitViewer(ABC):
    """Renders a summary over the archives present in a results directory."""

    @abstractmethod
    def print_summary(self, summary: Summary, results_dir: Union[str, Path]) -> None:
        """Render *summary* over the ``.xml`` files in *results_dir*."""


class JunitViewerCLI(JunitViewer):
    """Runs ``junit-viewer -o <type> -l <limit> <files...>``.

    Output of the tool goes to *output* (stderr by default, since stdout is
    reserved for the JSON response).
    """

    def __init__(
        self,
        output: Optional[IO[str]] = None,
        executable: str = DEFAULT_EXECUTABLE,
        timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._output = output
        self._executable = executable
        self._timeout = timeout

    def print_summary(self, summary: Summary, results_dir: Union[str, Path]) -> None:
        if summary.type not in SUPPORTED_SUMMARY_TYPES:
            raise UnsupportedSummaryKindError(summary.type, SUPPORTED_SUMMARY_TYPES)

        xml_files = sorted(str(path) for path in Path(results_dir).glob("*.xml"))
        if not xml_files:
            raise NoResultsFoundError(str(results_dir))

        args = [
            self._executable,
            "-o", summary.type,
            "-l", str(summary.limit),
            *xml_files,
        ]
        log.debug("Running %s over %d file(s)", self._executable, len(xml_files))

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise SummaryError(
                f"failed to print summary: '{self._executable}' not found on PATH"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise SummaryError(
                f"failed to print summary: timed out after {self._timeout}s"
            ) from e

        output = self._output or sys.stderr
        output.write(result.stdout)
        output.write(result.stderr)
        output.flush()

        if result.returncode != 0:
            raise SummaryError(
                f"failed to print summary: {self._executable} exited with status {result.returncode}"
            )
