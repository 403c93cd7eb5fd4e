import logging

import click
from pydantic import ValidationError

from results_resource.errors import ResourceError
from results_resource.fetch import Getter
from results_resource.models import InRequest
from results_resource.storage import create_storage_client
from results_resource.viewer import DEFAULT_EXECUTABLE, DEFAULT_TIMEOUT_SECONDS, JunitViewerCLI

from ..utils import error_exit, read_request, write_response

log = logging.getLogger(__name__)


@click.command(name="in")
@click.argument("destination", type=click.Path(file_okay=False, resolve_path=True))
@click.option(
    "--viewer",
    "viewer_executable",
    envvar="JUNIT_VIEWER_PATH",
    default=DEFAULT_EXECUTABLE,
    show_default=True,
    help="junit-viewer executable used to print summaries.",
)
@click.option(
    "--summary-timeout",
    envvar="JUNIT_VIEWER_TIMEOUT",
    default=DEFAULT_TIMEOUT_SECONDS,
    type=click.FloatRange(min=0, min_open=True),
    show_default=True,
    help="Seconds each summary may run before it is aborted.",
)
def in_(destination: str, viewer_executable: str, summary_timeout: float):
    """
    Fetch the result archives ending at the version on stdin into DESTINATION.

    Prints each requested summary to stderr and writes the version plus
    ``test_suite_count`` metadata to stdout.
    """
    try:
        request = InRequest.model_validate_json(read_request())
    except ValidationError as e:
        error_exit(f"Error: failed to decode input JSON: {e}")
    request.output_dir = destination

    try:
        storage = create_storage_client(
            request.source.storage_type, request.source.storage_config
        )
        getter = Getter(storage, JunitViewerCLI(executable=viewer_executable, timeout=summary_timeout))
        response = getter.get(request)
    except (ResourceError, ImportError) as e:
        log.debug("in failed", exc_info=True)
        error_exit(f"Error: failed to get requested version: {e}")

    write_response(response.model_dump())
