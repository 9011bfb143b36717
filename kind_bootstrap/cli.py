# /*
# Copyright 2026 The Grove Authors.
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
# */

"""Command-line entry point."""

from __future__ import annotations

import logging
import sys

import click
import sh
import typer

from kind_bootstrap import console
from kind_bootstrap.config import BootstrapConfig, display_config
from kind_bootstrap.orchestrator import run

app = typer.Typer(
    help="Bootstrap a local Kind cluster with Cilium and Hubble.",
    add_completion=False,
)


@app.command()
def bootstrap(
    update: bool = typer.Option(
        False, "--update", help="Update kind, helm, and kubectl to their latest releases"),
) -> None:
    """Recreate the Kind cluster and install Cilium and Hubble.

    kind, helm, and kubectl are installed when missing. With --update they are
    replaced by their latest releases. All other settings come from
    KIND_BOOTSTRAP_* environment variables.
    """
    config = BootstrapConfig()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    display_config(config, update)
    run(update, config)


def main(argv: list[str] | None = None) -> None:
    """Run the CLI and translate failures into process exit codes.

    Usage errors and bootstrap failures exit with status 1; a failing external
    command exits with that command's status.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.
    """
    try:
        app(args=argv, standalone_mode=False)
    except click.UsageError as e:
        console.print(f"[red]\u274c {e.format_message()}[/red]")
        sys.exit(1)
    except (click.Abort, KeyboardInterrupt):
        console.print("[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except sh.ErrorReturnCode as e:
        console.print(f"[red]\u274c Command failed with exit code {e.exit_code}: {e.full_cmd}[/red]")
        sys.exit(e.exit_code if e.exit_code > 0 else 1)
    except Exception as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(1)
