"""
Configuration commands for the Character Catalog CLI.
"""

import json
from typing import Optional

import click
import yaml

from ..core.config import Config


@click.group()
def config_commands() -> None:
    """Configuration management commands."""
    pass


@config_commands.command()
@click.option(
    "--format",
    type=click.Choice(["json", "yaml", "table"]),
    default="table",
    help="Output format",
)
@click.option("--section", help="Show specific configuration section")
@click.pass_context
def show(ctx: click.Context, format: str, section: Optional[str]) -> None:
    """Show current configuration."""
    config: Config = ctx.obj["config"]
    data = config.to_dict()

    if section:
        if section not in data or not isinstance(data[section], dict):
            click.echo(f"Unknown section: {section}", err=True)
            raise click.Abort()
        data = data[section]

    if format == "json":
        click.echo(json.dumps(data, indent=2, default=str))
    elif format == "yaml":
        click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    else:
        click.echo(f"{(section or 'Character Catalog').title()} Configuration:")
        click.echo("=" * 40)
        for key, value in data.items():
            if isinstance(value, dict):
                click.echo(f"\n{key.title()}:")
                for sub_key, sub_value in value.items():
                    click.echo(f"  {sub_key}: {sub_value}")
            else:
                click.echo(f"{key}: {value}")
