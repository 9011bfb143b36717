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

"""Kind cluster lifecycle."""

from __future__ import annotations

import sh
from rich.panel import Panel

from kind_bootstrap import ClusterError, console
from kind_bootstrap.config import BootstrapConfig


def delete_cluster(config: BootstrapConfig) -> None:
    """Delete the Kind cluster, ignoring a cluster that does not exist.

    Args:
        config: Bootstrap configuration with the cluster name.
    """
    console.print(f"[yellow]\u2139\ufe0f  Deleting existing Kind cluster '{config.cluster_name}'...[/yellow]")
    try:
        sh.kind("delete", "cluster", "--name", config.cluster_name)
        console.print(f"[green]\u2705 Cluster '{config.cluster_name}' deleted[/green]")
    except sh.ErrorReturnCode:
        console.print(f"[yellow]\u26a0\ufe0f  Cluster '{config.cluster_name}' not found or already deleted[/yellow]")


def create_cluster(config: BootstrapConfig) -> None:
    """Create the Kind cluster from the static config file.

    Args:
        config: Bootstrap configuration with the cluster name and config path.

    Raises:
        ClusterError: If the Kind config file does not exist.
        sh.ErrorReturnCode: If ``kind create cluster`` fails.
    """
    console.print(Panel.fit("Creating Kind cluster", style="bold blue"))
    if not config.kind_config.is_file():
        raise ClusterError(f"Kind config file not found: {config.kind_config}")
    sh.kind(
        "create", "cluster",
        "--name", config.cluster_name,
        "--config", str(config.kind_config),
    )
    console.print(f"[green]\u2705 Cluster '{config.cluster_name}' created successfully[/green]")


def recreate_cluster(config: BootstrapConfig) -> None:
    """Delete any existing cluster with the configured name and create a fresh one."""
    delete_cluster(config)
    create_cluster(config)
