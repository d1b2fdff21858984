"""
ABOUTME: Command-line interface for validating the environment against a schema file
ABOUTME: Handles argument parsing, logging setup and rendering of validation reports
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import DEFAULT_DOTENV_PATH, get_env_bool, get_env_choice, get_env_var
from .exceptions import EnvGuardianError
from .schema import load_schema_file
from .validator import EnvGuardian, ValidationResult

console = Console()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def cli() -> argparse.Namespace:
    """
    Parse and return command-line arguments for the env-guardian CLI tool.

    Returns:
        argparse.Namespace: Parsed arguments controlling the schema file, env-file loading, error mode, output format and log level.
    """
    p = argparse.ArgumentParser(
        description="Validate environment variables against a JSON schema"
    )
    p.add_argument(
        "--schema",
        type=Path,
        required=True,
        help="JSON file mapping variable names to field specs",
    )
    p.add_argument(
        "--env-file",
        type=Path,
        default=Path(get_env_var("ENV_GUARDIAN_DOTENV_PATH", DEFAULT_DOTENV_PATH)),
        help="Env file to load before validating",
    )
    p.add_argument(
        "--no-dotenv", action="store_true", help="Do not load an env file"
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first invalid variable (also ENV_GUARDIAN_STRICT)",
    )
    p.add_argument(
        "--json",
        action="store_true",
        help="Output results in JSON format instead of a rich console table",
    )
    p.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="Log level (default: ENV_GUARDIAN_LOG_LEVEL or WARNING)",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"env-guardian {__version__}",
    )
    return p.parse_args()


def render_json(result: ValidationResult) -> str:
    """Serialize a validation result as a JSON document."""
    return json.dumps(
        {
            "valid": result.is_valid,
            "values": result.values,
            "errors": [
                {
                    "variable": e.variable,
                    "type": type(e).__name__,
                    "message": e.message,
                }
                for e in result.errors
            ],
        },
        indent=2,
        default=str,
    )


def render_table(result: ValidationResult) -> Table:
    """Build a rich table with one row per schema field."""
    errors = {e.variable: e for e in result.errors}
    table = Table(title="Environment Validation", show_header=True, header_style="bold magenta")
    table.add_column("Variable", style="cyan")
    table.add_column("Status")
    table.add_column("Value / Error")

    for key, value in result.values.items():
        if key in errors:
            table.add_row(key, "[red]invalid[/red]", escape(errors[key].message))
        elif value is None:
            table.add_row(key, "[yellow]unset[/yellow]", "")
        else:
            table.add_row(key, "[green]ok[/green]", escape(repr(value)))
    return table


def main():
    """
    Execute the main entry point for the env-guardian CLI tool.

    Loads the schema file, validates the environment and prints a report. Exits with status 0 when every variable is valid and 1 otherwise, including on schema errors and strict-mode failures.
    """
    a = cli()

    try:
        log_level = a.log_level or get_env_choice("ENV_GUARDIAN_LOG_LEVEL", "WARNING", LOG_LEVELS)
        logging.basicConfig(
            level=getattr(logging, log_level),
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        )
        strict = a.strict or get_env_bool("ENV_GUARDIAN_STRICT", False)
        schema = load_schema_file(a.schema)
        guardian = EnvGuardian(
            load_dotenv=not a.no_dotenv, dotenv_path=a.env_file, strict=strict
        )
        result = guardian.validate(schema)
    except OSError as e:
        console.print(Panel(escape(f"❌ Cannot read schema: {e}"), style="bold red"))
        sys.exit(1)
    except EnvGuardianError as e:
        console.print(Panel(escape(f"❌ {type(e).__name__}: {e}"), style="bold red"))
        sys.exit(1)

    if a.json:
        print(render_json(result))
    else:
        console.print(render_table(result))
        if result.is_valid:
            console.print(f"✅ {len(result.values)} variable(s) valid")
        else:
            console.print(f"❌ {len(result.errors)} invalid variable(s)")

    sys.exit(0 if result.is_valid else 1)


if __name__ == "__main__":
    main()
