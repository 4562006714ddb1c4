"""Config profiles for storing table paths and decode options."""
from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

import click

from dbase3.config import DEFAULT_SKIP_DELETED, DEFAULT_TEXT_DECODING
from dbase3.dbf.constants import TEXT_DECODINGS

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

_PROFILE_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


@dataclass
class Profile:
    name: str
    dbf: Path


@dataclass
class DecodeOptions:
    text_decoding: str = DEFAULT_TEXT_DECODING
    skip_deleted: bool = DEFAULT_SKIP_DELETED


@dataclass
class Config:
    default_profile: str | None = None
    profiles: dict[str, Profile] = field(default_factory=dict)
    decode: DecodeOptions = field(default_factory=DecodeOptions)


def get_config_path() -> Path:
    """Return the TOML config file path via click.get_app_dir."""
    return Path(click.get_app_dir("dbase3")) / "config.toml"


def load_config() -> Config:
    """Read TOML config. Returns empty Config if file missing."""
    path = get_config_path()
    if not path.exists():
        return Config()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = Config(default_profile=data.get("default_profile"))
    for name, info in data.get("profiles", {}).items():
        config.profiles[name] = Profile(name=name, dbf=Path(info["dbf"]))

    decode = data.get("decode", {})
    text_decoding = decode.get("text_decoding", DEFAULT_TEXT_DECODING)
    if text_decoding not in TEXT_DECODINGS:
        raise click.UsageError(
            f"Invalid text_decoding '{text_decoding}' in {path}. "
            f"Use one of: {', '.join(TEXT_DECODINGS)}"
        )
    config.decode = DecodeOptions(
        text_decoding=text_decoding,
        skip_deleted=bool(decode.get("skip_deleted", DEFAULT_SKIP_DELETED)),
    )
    return config


def save_config(config: Config) -> Path:
    """Write config to TOML using literal strings for paths."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    if config.default_profile:
        lines.append(f"default_profile = \"{config.default_profile}\"")
    lines.append("")

    lines.append("[decode]")
    lines.append(f"text_decoding = \"{config.decode.text_decoding}\"")
    lines.append(f"skip_deleted = {'true' if config.decode.skip_deleted else 'false'}")
    lines.append("")

    for name, profile in config.profiles.items():
        lines.append(f"[profiles.{name}]")
        # Use TOML literal strings (single quotes) so backslashes aren't escapes
        lines.append(f"dbf = '{profile.dbf}'")
        lines.append("")

    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def validate_profile_name(name: str) -> bool:
    """Check that a profile name is a valid TOML bare key."""
    return bool(_PROFILE_NAME_RE.match(name))


def find_tables(folder: Path) -> list[Path]:
    """List .dbf tables directly inside a folder, sorted by name."""
    return sorted(p for p in folder.iterdir() if p.is_file() and p.suffix.lower() == ".dbf")


def profile_name_for(dbf: Path) -> str:
    """Derive a profile name from a table file name (ORDERS.DBF -> orders)."""
    name = re.sub(r"[^a-zA-Z0-9_-]+", "_", dbf.stem).strip("_").lower()
    return name or "table"


def _require_table(path: Path, source: str) -> Path:
    if not path.is_file():
        raise click.UsageError(f"Table file not found ({source}): {path}")
    return path


def resolve_dbf(dbf: Path | None, profile_name: str | None) -> Path:
    """Resolve table path: --dbf > --profile > default profile.

    Raises click.UsageError naming where the path came from when it does
    not point at a file.
    """
    if dbf is not None:
        return _require_table(dbf, "--dbf")

    config = load_config()
    name = profile_name or config.default_profile
    if name is None:
        raise click.UsageError(
            "No table selected. Pass --dbf <table.dbf>, or run 'dbf3 init' "
            "to register tables and use --profile <name>."
        )

    profile = config.profiles.get(name)
    if profile is None:
        available = ", ".join(sorted(config.profiles)) or "(none)"
        raise click.UsageError(f"No table profile '{name}'. Available profiles: {available}")

    return _require_table(profile.dbf, f"profile '{name}'")
