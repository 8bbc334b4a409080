"""CLI interface for field extraction from saved analysis responses"""
import click
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List
from pydantic import ValidationError
from .blocks import BlockGraph
from .config import LOG_FORMAT, LOG_LEVEL, SCHEMA_FILE
from .extractor import FieldExtractor, NothingExtracted, SchemaNotFound
from .schema import SchemaLoadError, load_schemas


def configure_logging(level: str) -> None:
    """Send log records to stderr at the given level"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format=LOG_FORMAT, stream=sys.stderr)


def collect_response_files(response_path: Path) -> List[Path]:
    """A single JSON file, or every *.json file in a folder"""
    if response_path.is_dir():
        return sorted(response_path.glob('*.json'))
    return [response_path]


def process_response_file(extractor: FieldExtractor,
                          response_path: Path,
                          doc_type: str,
                          output_dir: Path = None,
                          dump_blocks: bool = False) -> Dict[str, str]:
    """
    Extract fields from one saved analysis response

    Returns:
        Extracted fields; empty when nothing could be extracted

    Raises:
        SchemaNotFound: if doc_type has no schema (aborts the whole run)
    """
    click.echo(f"Processing: {response_path.name} (type: {doc_type})")

    try:
        with open(response_path, 'rb') as f:
            graph = BlockGraph.from_json(f.read())
    except (OSError, ValueError, ValidationError) as e:
        click.echo(f"  Error reading {response_path.name}: {e}", err=True)
        return {}

    try:
        results = extractor.extract(doc_type, graph)
    except NothingExtracted as e:
        click.echo(f"  {e}", err=True)
        if dump_blocks:
            for block_type, text in e.graph.dump_lines():
                click.echo(f"    BlockType: {block_type}, Text: {text}", err=True)
        return {}

    if output_dir:
        output_path = output_dir / f"{response_path.stem}_results.json"
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, ensure_ascii=False)
        click.echo(f"  Results saved to: {output_path}")

    return results


@click.command()
@click.argument('response_path', type=click.Path(exists=True, path_type=Path))
@click.option('--doc-type', '-t', required=True,
              help='Document type whose schema is applied')
@click.option('--schema-file', '-s',
              type=click.Path(dir_okay=False, path_type=Path),
              default=SCHEMA_FILE, show_default=True,
              help='JSON file mapping document types to field schemas')
@click.option('--output-dir', '-o',
              type=click.Path(file_okay=False, path_type=Path),
              help='Directory to save extraction results')
@click.option('--dump-blocks', is_flag=True,
              help='Print the text blocks of documents where nothing was extracted')
@click.option('--verbose', '-v', is_flag=True,
              help='Trace every field lookup')
def main(response_path: Path, doc_type: str, schema_file: Path,
         output_dir: Path, dump_blocks: bool, verbose: bool):
    """
    Extract schema fields from saved document analysis responses.

    RESPONSE_PATH: analysis response JSON file, or a folder of them

    Examples:

    \b
    field-extract responses/receipt.json --doc-type receipt
    field-extract responses/ -t invoice -s config/schema.json -o results
    """
    configure_logging("DEBUG" if verbose else LOG_LEVEL)

    try:
        registry = load_schemas(schema_file)
    except SchemaLoadError as e:
        click.echo(f"Error loading schema file: {e}", err=True)
        sys.exit(2)
    click.echo(f"Loaded {len(registry)} schema(s) from {schema_file}")

    extractor = FieldExtractor(registry, trace=verbose)

    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    response_files = collect_response_files(response_path)
    if not response_files:
        click.echo(f"No JSON files found in {response_path}", err=True)
        sys.exit(1)

    all_results = {}
    failed = 0
    for response_file in response_files:
        try:
            results = process_response_file(
                extractor, response_file, doc_type, output_dir, dump_blocks
            )
        except SchemaNotFound as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(2)

        all_results[response_file.name] = results
        if not results:
            failed += 1
            continue
        for field, value in results.items():
            click.echo(f"    {field}: {value}")

    click.echo(f"\nProcessed {len(all_results)} document(s), {failed} without results")

    if output_dir and all_results:
        combined_path = output_dir / "all_results.json"
        with open(combined_path, 'w', encoding='utf-8') as f:
            json.dump(all_results, f, indent=2, ensure_ascii=False)
        click.echo(f"Combined results saved to: {combined_path}")

    if failed:
        sys.exit(1)


@click.command()
@click.option('--schema-file', '-s',
              type=click.Path(dir_okay=False, path_type=Path),
              default=SCHEMA_FILE, show_default=True,
              help='JSON file mapping document types to field schemas')
def list_schemas(schema_file: Path):
    """List the document types and fields declared in a schema file."""
    try:
        registry = load_schemas(schema_file)
    except SchemaLoadError as e:
        click.echo(f"Error loading schema file: {e}", err=True)
        sys.exit(2)

    for document_type, schema in registry.items():
        click.echo(f"{document_type}:")
        for field_name, field_strategy in schema.fields.items():
            click.echo(f"  {field_name}: key={field_strategy.key!r} strategy={field_strategy.strategy}")


if __name__ == '__main__':
    main()
