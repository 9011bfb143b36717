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

"""Configuration classes and version models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from kind_bootstrap import console
from kind_bootstrap.constants import (
    CILIUM_MAX_RETRIES,
    CILIUM_RETRY_BACKOFF_SECONDS,
    DEFAULT_CLUSTER_NAME,
    DEFAULT_INSTALL_DIR,
    DEFAULT_KIND_CONFIG,
    DEFAULT_PLATFORM_ARCH,
    DEFAULT_PLATFORM_OS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    HUBBLE_WAIT_TIMEOUT_SECONDS,
    NS_KUBE_SYSTEM,
)


# ============================================================================
# Configuration classes
# ============================================================================

class BootstrapConfig(BaseSettings):
    """Bootstrap configuration, auto-loaded from KIND_BOOTSTRAP_* env vars.

    Attributes:
        cluster_name: Name of the Kind cluster.
        kind_config: Path to the Kind cluster configuration file.
        cilium_namespace: Namespace Cilium and Hubble are installed into.
        max_retries: Maximum Cilium status checks after the Helm install.
        retry_backoff_seconds: Back-off step; attempt N waits N times this value.
        hubble_timeout_seconds: Timeout for the Hubble relay pod readiness wait.
        install_dir: Directory downloaded binaries are installed into.
        use_sudo: Whether to install binaries through sudo.
        platform_os: Operating system component of download URLs.
        platform_arch: Architecture component of download URLs.
        request_timeout: Timeout in seconds for HTTP requests.
        log_level: Level for the ``kind_bootstrap`` logger.
    """

    model_config = SettingsConfigDict(env_prefix="KIND_BOOTSTRAP_", extra="ignore")

    cluster_name: str = DEFAULT_CLUSTER_NAME
    kind_config: Path = Path(DEFAULT_KIND_CONFIG)
    cilium_namespace: str = NS_KUBE_SYSTEM
    max_retries: int = Field(default=CILIUM_MAX_RETRIES, ge=1)
    retry_backoff_seconds: float = Field(default=CILIUM_RETRY_BACKOFF_SECONDS, ge=0)
    hubble_timeout_seconds: int = Field(default=HUBBLE_WAIT_TIMEOUT_SECONDS, ge=1)
    install_dir: Path = Path(DEFAULT_INSTALL_DIR)
    use_sudo: bool = True
    platform_os: str = DEFAULT_PLATFORM_OS
    platform_arch: str = DEFAULT_PLATFORM_ARCH
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


# ============================================================================
# Version models
# ============================================================================

@dataclass(frozen=True)
class ResolvedVersions:
    """Latest (or fallback) versions resolved from the release endpoints.

    Attributes:
        kind: Kind release tag.
        helm: Helm release tag.
        kubectl: Stable kubectl release.
        cilium: Cilium Helm chart version.
        hubble: Hubble release tag.
    """

    kind: str
    helm: str
    kubectl: str
    cilium: str
    hubble: str


@dataclass(frozen=True)
class InstalledTools:
    """Tool versions in use once the installers have run."""

    kind: str
    helm: str
    kubectl: str


def display_config(config: BootstrapConfig, update: bool) -> None:
    """Print the effective configuration.

    Args:
        config: Bootstrap configuration.
        update: Whether CLI tools will be updated to their latest release.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print(f"  cluster_name    : {config.cluster_name}")
    console.print(f"  kind_config     : {config.kind_config}")
    console.print(f"  namespace       : {config.cilium_namespace}")
    console.print(f"  max_retries     : {config.max_retries}")
    console.print(f"  install_dir     : {config.install_dir}")
    console.print(f"  platform        : {config.platform_os}/{config.platform_arch}")
    console.print(f"  update          : {update}")


def display_summary(versions: ResolvedVersions, tools: InstalledTools) -> None:
    """Print the final version summary.

    Args:
        versions: Resolved component versions.
        tools: Versions of the installed CLI tools.
    """
    console.print("[green]\u2705 Installation complete![/green]")
    console.print(
        f"Kind ({tools.kind}), kubectl ({tools.kubectl}), Helm ({tools.helm}), "
        f"Cilium ({versions.cilium}), and Hubble ({versions.hubble})"
    )
