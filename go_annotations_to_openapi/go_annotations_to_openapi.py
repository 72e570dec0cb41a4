import json
import logging
import sys
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .config import GeneratorConfig, OutputFormat
from .document import DocumentWriter
from .errors import OutputError, SourceEnumerationError
from .generator import OpenAPIGenerator

logger = logging.getLogger(__name__)


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--title", "-t", default=None, type=str, help="Document title")
@click.option("--version", "-v", "api_version", default=None, type=str, help="Document version")
@click.option("--description", "-d", default=None, type=str, help="Document description")
@click.option("--server", "-s", "servers", multiple=True, help="Server URL (repeatable)")
@click.option("--indent", default=None, type=int, help="Indentation width of the output")
@click.option("--format", "output_format", default=None, type=click.Choice(["yaml", "json"]))
@click.option("--verbose", is_flag=True, default=False, help="Log debug messages")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, resolve_path=True))
@click.argument("output", required=False, default=None, type=click.Path(dir_okay=False, resolve_path=True))
def go_annotations_to_openapi(config, title, api_version, description, servers, indent, output_format, verbose, path, output):
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )

    if config is not None:
        with open(config) as f:
            config = GeneratorConfig.from_dict(json.load(f))
    else:
        config = GeneratorConfig()

    # Command line flags override the config file
    if title is not None:
        config.title = title
    if api_version is not None:
        config.version = api_version
    if description is not None:
        config.description = description
    if servers:
        config.servers = list(servers)
    if indent is not None:
        config.indent = indent
    if output_format is not None:
        config.output_format = OutputFormat(output_format)

    try:
        result = OpenAPIGenerator(config).generate(path)
    except SourceEnumerationError as e:
        raise click.ClickException(str(e)) from e
    for failure in result.failures:
        logger.error("%s", failure)

    writer = DocumentWriter(config)
    out = writer.render(result.document, reconstruct_command_line(go_annotations_to_openapi))
    if output is None:
        click.echo(out, nl=False)
    else:
        try:
            writer.write(Path(output), out)
        except (OutputError, OSError) as e:
            raise click.ClickException(str(e)) from e
        logger.info("Wrote %s", output)

    if not result.ok:
        sys.exit(1)
