"""
Main CLI entry point for the Character Catalog.

Provides commands to initialise the database and to list, inspect, search,
create and delete characters directly against the configured stores.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import click
import yaml

from .. import __version__
from ..characters import (
    STAT_FIELDS,
    CharacterCatalog,
    CharacterRead,
    FilterSpec,
    create_catalog,
)
from ..core.config import Config
from ..core.exceptions import CatalogError
from ..core.logging import configure_logging
from .config import config_commands

OUTPUT_FORMATS = click.Choice(["table", "json", "yaml"])

# Short column headers for the table output
_STAT_HEADERS = {
    "base_health": "HP",
    "base_attack": "ATK",
    "base_magic": "MAG",
    "base_physical_defense": "PDEF",
    "base_magical_defense": "MDEF",
    "base_speed": "SPD",
}


def _catalog(ctx: click.Context) -> CharacterCatalog:
    if "catalog" not in ctx.obj:
        ctx.obj["catalog"] = create_catalog(ctx.obj["config"])
        ctx.call_on_close(ctx.obj["catalog"].store.close)
    return ctx.obj["catalog"]  # type: ignore[no-any-return]


def _plain(character: CharacterRead) -> Dict[str, Any]:
    return character.model_dump(mode="json")


def _echo_characters(characters: List[CharacterRead], format: str) -> None:
    if format == "json":
        click.echo(json.dumps([_plain(c) for c in characters], indent=2))
        return
    if format == "yaml":
        click.echo(yaml.safe_dump([_plain(c) for c in characters], sort_keys=False))
        return

    header = f"{'ID':>5}  {'NAME':<20} {'TYPE':<8} {'CLASS':<10}" + "".join(
        f"{_STAT_HEADERS[s]:>6}" for s in STAT_FIELDS
    )
    click.echo(header)
    click.echo("-" * len(header))
    for c in characters:
        classification = c.classification.value if c.classification else "-"
        click.echo(
            f"{c.id:>5}  {c.name[:20]:<20} {c.type.value:<8} {classification:<10}"
            + "".join(f"{getattr(c, s):>6}" for s in STAT_FIELDS)
        )


def _echo_character(character: CharacterRead, format: str) -> None:
    data = _plain(character)
    if format == "json":
        click.echo(json.dumps(data, indent=2))
    elif format == "yaml":
        click.echo(yaml.safe_dump(data, sort_keys=False))
    else:
        for key, value in data.items():
            click.echo(f"{key}: {value if value is not None else '-'}")


def _stat_options(pairs: Tuple[Tuple[str, int], ...], prefix: str) -> Dict[str, int]:
    values = {}
    for stat, value in pairs:
        if stat not in STAT_FIELDS:
            raise click.BadParameter(
                f"{stat} is not one of {', '.join(STAT_FIELDS)}",
                param_hint=f"--{prefix}",
            )
        values[stat] = value
    return values


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="YAML configuration file (defaults to env / configs/catalog.yaml)",
)
@click.option("--debug", "-d", is_flag=True, help="Enable debug output")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], debug: bool) -> None:
    """
    Character Catalog CLI

    Manage the game character catalog from the command line.
    """
    ctx.ensure_object(dict)

    try:
        config = Config.load(config_path)
    except CatalogError as e:
        raise click.ClickException(str(e))

    configure_logging(
        "DEBUG" if debug else "WARNING", json_format=config.monitoring.json_logs
    )
    ctx.obj["config"] = config


cli.add_command(config_commands, name="config")


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the character database and upload directory if missing."""
    try:
        catalog = _catalog(ctx)
        count = catalog.store.count_visible()
    except CatalogError as e:
        raise click.ClickException(str(e))

    config: Config = ctx.obj["config"]
    click.echo(f"Database ready at {config.database.path} ({count} characters)")
    click.echo(f"Uploads stored in {config.storage.upload_dir}")


@cli.command("list")
@click.option("--page", type=int, default=None, help="Page index (lists all when omitted)")
@click.option("--size", type=int, default=None, help="Page size")
@click.option("--sort-by", default="id", show_default=True)
@click.option("--sort-direction", default="asc", show_default=True)
@click.option("--format", type=OUTPUT_FORMATS, default="table", help="Output format")
@click.pass_context
def list_characters(
    ctx: click.Context,
    page: Optional[int],
    size: Optional[int],
    sort_by: str,
    sort_direction: str,
    format: str,
) -> None:
    """List visible characters."""
    config: Config = ctx.obj["config"]
    try:
        catalog = _catalog(ctx)
        if page is None and size is None:
            _echo_characters(catalog.get_all(), format)
            return
        result = catalog.get_page(
            page=page or 0,
            size=size or config.api.default_page_size,
            sort_by=sort_by,
            sort_direction=sort_direction,
        )
    except CatalogError as e:
        raise click.ClickException(str(e))

    _echo_characters(result.items, format)
    if format == "table":
        click.echo(
            f"\nPage {result.page + 1} of {max(result.total_pages, 1)}"
            f" ({result.total_elements} characters)"
        )


@cli.command()
@click.argument("character_id", type=int)
@click.option("--format", type=OUTPUT_FORMATS, default="table", help="Output format")
@click.pass_context
def show(ctx: click.Context, character_id: int, format: str) -> None:
    """Show one character."""
    try:
        character = _catalog(ctx).get_by_id(character_id)
    except CatalogError as e:
        raise click.ClickException(str(e))
    _echo_character(character, format)


@cli.command()
@click.argument("search_term", required=False)
@click.option("--name", help="Additional case-insensitive name fragment")
@click.option("--type", "type_", help="HERO, VILLAIN or NPC")
@click.option("--classification", help="Human, Elf, Dwarf, ...")
@click.option(
    "--min", "minimums", type=(str, int), multiple=True, help="STAT VALUE lower bound"
)
@click.option(
    "--max", "maximums", type=(str, int), multiple=True, help="STAT VALUE upper bound"
)
@click.option("--page", type=int, default=0, show_default=True)
@click.option("--size", type=int, default=None, help="Page size")
@click.option("--sort-by", default="id", show_default=True)
@click.option("--sort-direction", default="asc", show_default=True)
@click.option("--format", type=OUTPUT_FORMATS, default="table", help="Output format")
@click.pass_context
def search(
    ctx: click.Context,
    search_term: Optional[str],
    name: Optional[str],
    type_: Optional[str],
    classification: Optional[str],
    minimums: Tuple[Tuple[str, int], ...],
    maximums: Tuple[Tuple[str, int], ...],
    page: int,
    size: Optional[int],
    sort_by: str,
    sort_direction: str,
    format: str,
) -> None:
    """Search characters by name and attribute criteria.

    Example: search thor --type HERO --min base_attack 20
    """
    config: Config = ctx.obj["config"]
    criteria: Dict[str, Any] = {
        "name": name,
        "type": type_,
        "classification": classification,
    }
    criteria.update(
        {f"min_{k}": v for k, v in _stat_options(minimums, "min").items()}
    )
    criteria.update(
        {f"max_{k}": v for k, v in _stat_options(maximums, "max").items()}
    )

    try:
        result = _catalog(ctx).search(
            search_term=search_term,
            filter_spec=FilterSpec.from_dict(criteria),
            page=page,
            size=size or config.api.search_page_size,
            sort_by=sort_by,
            sort_direction=sort_direction,
        )
    except CatalogError as e:
        raise click.ClickException(str(e))

    _echo_characters(result.items, format)
    if format == "table":
        click.echo(f"\n{result.total_elements} matching characters")


@cli.command()
@click.option("--name", required=True, help="Character name")
@click.option("--type", "type_", help="HERO, VILLAIN or NPC (default NPC)")
@click.option("--classification", help="Human, Elf, Dwarf, ...")
@click.option("--description", help="Free-form description")
@click.option(
    "--stat", "stats", type=(str, int), multiple=True, help="STAT VALUE base stat"
)
@click.option("--format", type=OUTPUT_FORMATS, default="table", help="Output format")
@click.pass_context
def create(
    ctx: click.Context,
    name: str,
    type_: Optional[str],
    classification: Optional[str],
    description: Optional[str],
    stats: Tuple[Tuple[str, int], ...],
    format: str,
) -> None:
    """Create a character; unspecified stats get their defaults."""
    payload: Dict[str, Any] = {"name": name, "description": description}
    if type_:
        payload["type"] = type_
    if classification:
        payload["classification"] = classification
    payload.update(_stat_options(stats, "stat"))

    try:
        character = _catalog(ctx).create(payload)
    except CatalogError as e:
        raise click.ClickException(str(e))

    if format == "table":
        click.echo(f"Created character {character.id}")
    _echo_character(character, format)


@cli.command()
@click.argument("character_id", type=int)
@click.option("--hard", is_flag=True, help="Remove the row instead of hiding it")
@click.pass_context
def delete(ctx: click.Context, character_id: int, hard: bool) -> None:
    """Soft-delete (or with --hard, permanently delete) a character."""
    try:
        catalog = _catalog(ctx)
        if hard:
            catalog.hard_delete(character_id)
        else:
            catalog.soft_delete(character_id)
    except CatalogError as e:
        raise click.ClickException(str(e))

    click.echo(
        f"Character {character_id} {'permanently deleted' if hard else 'deleted'}"
    )


if __name__ == "__main__":
    cli()
