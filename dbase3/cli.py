"""Click CLI for inspecting and exporting dBASE III tables."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from dbase3.config import DEFAULT_RECORD_LIMIT, configure_logging, derive_memo_path
from dbase3.dbf.constants import TEXT_DECODINGS
from dbase3.dbf.errors import DbaseError
from dbase3.profiles import (
    DecodeOptions,
    Profile,
    find_tables,
    load_config,
    profile_name_for,
    resolve_dbf,
    save_config,
    validate_profile_name,
)


class Context:
    """Holds the resolved table path and decode options from --dbf / --profile / config."""

    def __init__(self, dbf: Path | None = None, profile: str | None = None):
        self._explicit_dbf = dbf
        self._profile_name = profile
        self._resolved_dbf: Path | None = None
        self._resolved = False
        self._decode: DecodeOptions | None = None

    def _resolve(self):
        if not self._resolved:
            self._resolved_dbf = resolve_dbf(self._explicit_dbf, self._profile_name)
            self._resolved = True

    @property
    def dbf(self) -> Path:
        self._resolve()
        return self._resolved_dbf  # type: ignore[return-value]

    @property
    def decode(self) -> DecodeOptions:
        if self._decode is None:
            self._decode = load_config().decode
        return self._decode


pass_ctx = click.make_pass_decorator(Context)


def _load_table(ctx: Context):
    from dbase3.dbf.reader import parse_table

    try:
        return parse_table(
            ctx.dbf,
            text_decoding=ctx.decode.text_decoding,
            skip_deleted=ctx.decode.skip_deleted,
        )
    except DbaseError as e:
        raise click.ClickException(f"{ctx.dbf.name}: {e}") from e


def _display(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return str(value)


@click.group()
@click.option(
    "--dbf", required=False, default=None,
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    help="Path to a .dbf table (optional if profiles configured)",
)
@click.option(
    "--profile", "-p", default=None, type=str,
    help="Named profile to use (from dbf3 init)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log decoder progress to stderr")
@click.version_option(package_name="dbase3")
@click.pass_context
def cli(ctx, dbf: Optional[Path], profile: Optional[str], verbose: bool):
    """dbf3 - dBASE III table reader.

    Decode .dbf files into their header, field schema and typed records,
    and export them as CSV or JSON.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj = Context(dbf=dbf, profile=profile)


@cli.command()
@click.argument("source", type=click.Path(exists=True, path_type=Path))
@click.option("--name", default=None, help="Profile name for a single table (default: derived from the file name)")
@click.option("--text-decoding", type=click.Choice(TEXT_DECODINGS), default=None,
              help="Text decoding for C/N/M fields")
@click.option("--skip-deleted/--keep-deleted", default=None,
              help="Drop or keep records flagged as deleted")
@click.option("--default", "make_default", is_flag=True, help="Make the first registered table the default")
def init(source: Path, name: Optional[str], text_decoding: Optional[str],
         skip_deleted: Optional[bool], make_default: bool):
    """Register a table, or every table in a folder, as config profiles.

    Each table's schema is read first; unreadable tables are reported and
    not registered. Decode options are stored in the [decode] table.
    """
    from dbase3.dbf.reader import parse_schema

    tables = find_tables(source) if source.is_dir() else [source]
    if not tables:
        raise click.UsageError(f"No .dbf tables found in {source}")
    if name is not None:
        if len(tables) > 1:
            raise click.UsageError("--name can only be used when registering a single table.")
        if not validate_profile_name(name):
            raise click.UsageError(f"Invalid profile name '{name}'. Use letters, digits, hyphens, underscores.")

    config = load_config()
    added = []
    for dbf in tables:
        try:
            schema = parse_schema(dbf)
        except DbaseError as e:
            click.echo(f"  skipped {dbf.name}: {e}")
            continue
        profile = name or profile_name_for(dbf)
        config.profiles[profile] = Profile(name=profile, dbf=dbf.resolve())
        added.append(profile)
        click.echo(
            f"  {profile}: {dbf.name} ({len(schema.fields)} fields, "
            f"{schema.header.record_count:,} records)"
        )

    if not added:
        raise click.ClickException("No readable tables to register.")

    if make_default or config.default_profile not in config.profiles:
        config.default_profile = added[0]
    if text_decoding is not None:
        config.decode.text_decoding = text_decoding
    if skip_deleted is not None:
        config.decode.skip_deleted = skip_deleted

    saved_path = save_config(config)
    click.echo(f"\nConfig saved to {saved_path}")
    click.echo(
        f"Default profile: {config.default_profile}  "
        f"text decoding: {config.decode.text_decoding}  "
        f"skip deleted: {'yes' if config.decode.skip_deleted else 'no'}"
    )


@cli.command()
@pass_ctx
def info(ctx: Context):
    """Show header metadata and the field schema."""
    from dbase3.dbf.reader import parse_schema

    dbf = ctx.dbf
    try:
        schema = parse_schema(dbf)
    except DbaseError as e:
        raise click.ClickException(f"{dbf.name}: {e}") from e

    h = schema.header
    click.echo(f"Table:         {dbf}")
    click.echo(f"Version:       {h.version_name}")
    if h.last_update:
        updated = h.last_update.isoformat()
    else:
        updated = "(invalid: yy={} mm={} dd={})".format(*h.last_update_raw)
    click.echo(f"Last update:   {updated}")
    click.echo(f"Records:       {h.record_count:,}")
    click.echo(f"Header length: {h.header_length}")
    click.echo(f"Record length: {h.record_length}")
    if h.has_memo:
        memo = derive_memo_path(dbf)
        click.echo(f"Memo file:     {memo if memo else '(missing)'}")

    click.echo(f"\n{'Name':<11}  {'Type':<10}  {'Len':>4}  {'Dec':>3}  {'Offset':>6}")
    click.echo("-" * 42)
    for fd in schema.fields:
        click.echo(
            f"{fd.name:<11}  {fd.field_type} {fd.type_name:<8}  {fd.length:>4}  "
            f"{fd.precision:>3}  {fd.offset:>6}"
        )


@cli.command()
@click.option("--limit", "-n", type=int, default=DEFAULT_RECORD_LIMIT,
              help="Number of records to show (0 for all)")
@click.option("--named", is_flag=True, help="Show records keyed by field name")
@pass_ctx
def records(ctx: Context, limit: int, named: bool):
    """Print decoded records."""
    from dbase3.dbf.reader import attach_field_names

    table = _load_table(ctx)
    shown = table.records if limit <= 0 else table.records[:limit]

    if named:
        enriched = attach_field_names(table).records[:len(shown)]
        for rec, row in zip(shown, enriched):
            marker = "*" if rec.deleted else " "
            pairs = ", ".join(f"{k}={_display(v)}" for k, v in row.items())
            click.echo(f"{marker} {pairs}")
    else:
        click.echo("  " + " | ".join(table.field_names))
        for rec in shown:
            marker = "*" if rec.deleted else " "
            click.echo(f"{marker} " + " | ".join(_display(v) for v in rec.values))

    if len(shown) < len(table.records):
        click.echo(f"... and {len(table.records) - len(shown):,} more")


@cli.command()
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), required=True)
@click.option("--typed", is_flag=True, help="Convert N/D/L/M values to numbers, dates and booleans")
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@pass_ctx
def export(ctx: Context, fmt: str, typed: bool, output: Optional[str]):
    """Export records as CSV or JSON."""
    table = _load_table(ctx)

    if typed:
        from dbase3.dbf.convert import coerce_table
        try:
            table = coerce_table(table)
        except DbaseError as e:
            raise click.ClickException(str(e)) from e

    if fmt == "csv":
        from dbase3.export.csv_export import export_csv
        data = export_csv(table)
    else:
        from dbase3.export.json_export import export_json
        data = export_json(table)

    if output:
        Path(output).write_text(data, encoding="utf-8")
        click.echo(f"Exported {len(table.records):,} records to {output}")
    else:
        click.echo(data)
