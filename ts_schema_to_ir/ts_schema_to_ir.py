import json
import logging
from pathlib import Path

import click

from .pipeline import ExtractorConfig, SchemaExtractionError, SchemaExtractor


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Source path recorded in the document")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--indent", "-i", default=2, type=int, help="JSON indentation of the output document")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log extraction passes to stderr")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def ts_schema_to_ir(name, config, indent, verbose, path, output):
    """Extract the canonical schema from a typescript-estree JSON dump."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    with open(path) as f:
        program = json.load(f)

    if config is not None:
        with open(config) as f:
            config = json.load(f)
            config = ExtractorConfig.from_dict(config)
    else:
        config = ExtractorConfig()

    if name is None:
        name = Path(path).name

    extractor = SchemaExtractor(config)
    try:
        document = extractor.extract_estree(program, name)
    except SchemaExtractionError as e:
        raise click.ClickException(str(e)) from e

    with open(output, "w") as f:
        json.dump(document.to_dict(), f, indent=indent)
        f.write("\n")

    if verbose:
        click.echo(f"Wrote {len(document.declarations)} declarations to {output}", err=True)
