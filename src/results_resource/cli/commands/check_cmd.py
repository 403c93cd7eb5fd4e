import logging

import click
from pydantic import ValidationError

from results_resource.check import Checker
from results_resource.errors import ResourceError
from results_resource.models import CheckRequest
from results_resource.storage import create_storage_client

from ..utils import error_exit, read_request, write_response

log = logging.getLogger(__name__)


@click.command(name="check")
def check():
    """
    List stored result archives at or after the version on stdin.

    Reads ``{"source": {...}, "version": {"key": ...}}`` from stdin and writes
    the versions, oldest first, to stdout.
    """
    try:
        request = CheckRequest.model_validate_json(read_request())
    except ValidationError as e:
        error_exit(f"Error: failed to decode input JSON: {e}")

    try:
        storage = create_storage_client(
            request.source.storage_type, request.source.storage_config
        )
        versions = Checker(storage).check(request.starting_version())
    except (ResourceError, ImportError) as e:
        log.debug("check failed", exc_info=True)
        error_exit(f"Error: failed to check for new versions: {e}")

    write_response([version.model_dump() for version in versions])
