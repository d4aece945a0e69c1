# Copyright 2018-2023 Descartes Labs.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import json
import logging

import click

from swiftbulk import version as version_module
from swiftbulk.auth import Auth
from swiftbulk.bulk import ArchiveFormat, BulkClient
from swiftbulk.config import get_settings, select_env

PACKAGE_LOGGER = "swiftbulk"


def _configure_logging(level):
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def _client(url, token, timeout):
    auth = Auth(token=token) if token else None
    kwargs = {}
    if timeout is not None:
        settings = get_settings()
        kwargs["timeout"] = (float(settings.connect_timeout), timeout)
    return BulkClient(url=url, auth=auth, **kwargs)


def _echo_outcome(outcome, output):
    if output == "json":
        click.echo(json.dumps(outcome.model_dump(mode="json")))
        return

    click.echo(str(outcome))
    for identifier, reason in outcome.errors:
        click.echo(f"  {identifier}: {reason}")


connection_options = [
    click.option("--url", type=str, default=None, help="Storage URL of the account"),
    click.option(
        "--token",
        type=str,
        default=None,
        envvar="SWIFTBULK_AUTH_TOKEN",
        help="Storage token",
    ),
    click.option(
        "--timeout", type=float, default=None, help="Read timeout in seconds"
    ),
    click.option(
        "--output",
        type=click.Choice(("summary", "json")),
        default="summary",
        help="Output format",
    ),
]


def with_connection_options(func):
    for option in reversed(connection_options):
        func = option(func)
    return func


@click.group(help="Swift bulk operations command-line interface")
@click.option(
    "--env", help="The environment to use", envvar="SWIFTBULK_ENV", default=None
)
@click.pass_context
def cli(ctx, env):
    if env:
        select_env(env)
    ctx.obj = get_settings()
    _configure_logging(ctx.obj.log_level)


@cli.command()
def version():
    """Print the version of the CLI"""
    click.echo(version_module.__version__)


@cli.command()
@click.pass_context
def env(ctx):
    """Print the selected environment"""
    click.echo(ctx.obj.env)


@cli.command()
@click.argument("paths", nargs=-1)
@click.option(
    "--from-file",
    type=click.File("r"),
    default=None,
    help="File with one path per line, '-' for stdin",
)
@with_connection_options
@click.pass_context
def delete(ctx, paths, from_file, url, token, timeout, output):
    """Delete containers and objects in a single request.

    PATHS are of the form CONTAINER or CONTAINER/OBJECT.
    """
    paths = list(paths)
    if from_file is not None:
        paths.extend(line.rstrip("\r\n") for line in from_file if line.strip())

    if not paths:
        raise click.UsageError("No paths given")

    outcome = _client(url, token, timeout).bulk_delete(paths)
    _echo_outcome(outcome, output)

    if not outcome.succeeded:
        ctx.exit(1)


@cli.command()
@click.argument("archive", type=click.File("rb"))
@click.option("--path", type=str, default="", help="Container or prefix to extract to")
@click.option(
    "--format",
    "archive_format",
    type=click.Choice([f.value for f in ArchiveFormat]),
    default=None,
    help="Archive format, derived from the file name if omitted",
)
@click.option(
    "--content-type", type=str, default=None, help="Content type of every object"
)
@click.option(
    "--detect-content-type",
    is_flag=True,
    help="Derive the content type of every object from its extension",
)
@with_connection_options
@click.pass_context
def extract(
    ctx,
    archive,
    path,
    archive_format,
    content_type,
    detect_content_type,
    url,
    token,
    timeout,
    output,
):
    """Upload ARCHIVE and extract it into objects."""
    if archive_format is None:
        archive_format = ArchiveFormat.from_filename(archive.name)
        if archive_format is None:
            raise click.BadParameter(
                f"can't derive the format of {archive.name}", param_hint="--format"
            )

    outcome = _client(url, token, timeout).extract_archive(
        path,
        archive,
        format=archive_format,
        content_type=content_type,
        detect_content_type=detect_content_type,
    )
    _echo_outcome(outcome, output)

    if not outcome.succeeded:
        ctx.exit(1)
