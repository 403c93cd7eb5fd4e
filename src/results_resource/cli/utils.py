import json
import sys
from typing import Any, NoReturn

import click


def error_exit(message: str) -> NoReturn:
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


def read_request(stream=None) -> str:
    """Read the whole JSON request the pipeline wrote to stdin."""
    stream = stream or click.get_text_stream("stdin")
    raw = stream.read()
    if not raw.strip():
        error_exit("Error: expected a JSON request on stdin but got nothing")
    return raw


def write_response(payload: Any) -> None:
    click.echo(json.dumps(payload))
