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

"""Kind, Helm, and kubectl CLI installation."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from pathlib import Path

import requests
import sh
from rich.panel import Panel

from kind_bootstrap import BootstrapError, ToolInstallError, console, logger
from kind_bootstrap.config import BootstrapConfig, ResolvedVersions
from kind_bootstrap.constants import (
    DOWNLOAD_CHUNK_SIZE,
    HELM_INSTALL_SCRIPT_URL,
    KIND_CHECKSUM_SUFFIX,
    KIND_DOWNLOAD_URL,
    KUBECTL_CHECKSUM_SUFFIX,
    KUBECTL_DOWNLOAD_URL,
    TOOL_HELM,
    TOOL_KIND,
    TOOL_KUBECTL,
    TOOL_LABELS,
)
from kind_bootstrap.versions import default_version


# ============================================================================
# Detection
# ============================================================================

def is_installed(tool: str) -> bool:
    """Check whether a command is available on the system PATH.

    Args:
        tool: Name of the CLI command.

    Returns:
        True if the command resolves on PATH.
    """
    try:
        sh.which(tool)
    except (sh.ErrorReturnCode, sh.CommandNotFound):
        return False
    return True


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        BootstrapError: If the command is not found.
    """
    if not is_installed(cmd):
        raise BootstrapError(f"Required command '{cmd}' not found. Please install it first.")


def installed_kind_version() -> str:
    """Return the version reported by ``kind version``."""
    fields = str(sh.kind("version")).split()
    return fields[1] if len(fields) > 1 else ""


def installed_helm_version() -> str:
    """Return the version reported by ``helm version --short`` without the build suffix."""
    return str(sh.helm("version", "--short")).strip().split("+")[0]


def installed_kubectl_version() -> str:
    """Return the client version reported by kubectl."""
    output = json.loads(str(sh.kubectl("version", "--client", "-o", "json")))
    return output.get("clientVersion", {}).get("gitVersion", "")


def _skip_install(tool: str, update: bool) -> bool:
    """Whether the installer for *tool* can be skipped.

    Args:
        tool: Name of the CLI command.
        update: Whether the --update flag was provided.

    Returns:
        True if the tool is present and no update was requested.
    """
    if update or not is_installed(tool):
        return False
    console.print(
        f"[yellow]\u2139\ufe0f  {TOOL_LABELS[tool]} is already installed and --update flag "
        f"is not provided. Skipping update.[/yellow]"
    )
    return True


# ============================================================================
# Download and install
# ============================================================================

def _download(url: str, dest: Path, timeout: float) -> str:
    """Stream *url* into *dest* and return its SHA-256 hex digest.

    Raises:
        requests.RequestException: On connection errors or non-2xx responses.
    """
    logger.debug("Downloading %s", url)
    digest = hashlib.sha256()
    with requests.get(url, stream=True, timeout=timeout) as resp:
        resp.raise_for_status()
        with open(dest, "wb") as f:
            for chunk in resp.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                f.write(chunk)
                digest.update(chunk)
    return digest.hexdigest()


def _fetch_checksum(url: str, timeout: float) -> str:
    """Fetch a published checksum file and return the hex digest it contains."""
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    fields = resp.text.split()
    if not fields:
        raise ToolInstallError(f"Empty checksum file at {url}")
    return fields[0].lower()


def _place_binary(src: Path, name: str, config: BootstrapConfig) -> Path:
    """Install *src* into the install directory as an executable.

    ``install`` writes the new file before touching the existing one, so a
    failure here leaves the previously installed binary in place.
    """
    dest = config.install_dir / name
    args = ["-m", "0755", str(src), str(dest)]
    if config.use_sudo:
        sh.sudo("install", *args)
    else:
        sh.install(*args)
    return dest


def install_binary(name: str, url: str, checksum_url: str, config: BootstrapConfig) -> Path:
    """Download a binary, verify its checksum, and install it.

    Args:
        name: File name to install the binary as.
        url: Download URL of the binary.
        checksum_url: URL of the published SHA-256 checksum.
        config: Bootstrap configuration with install directory and timeout.

    Returns:
        Path of the installed binary.

    Raises:
        ToolInstallError: If the download, verification, or install fails.
    """
    with tempfile.TemporaryDirectory(prefix="kind-bootstrap-") as tmp:
        tmp_path = Path(tmp) / name
        try:
            actual = _download(url, tmp_path, config.request_timeout)
            expected = _fetch_checksum(checksum_url, config.request_timeout)
        except requests.RequestException as exc:
            raise ToolInstallError(f"Failed to download {name} from {url}: {exc}") from exc

        if actual != expected:
            raise ToolInstallError(
                f"Checksum mismatch for {name}: expected {expected}, got {actual}"
            )

        try:
            return _place_binary(tmp_path, name, config)
        except sh.ErrorReturnCode as exc:
            raise ToolInstallError(
                f"Failed to install {name} into {config.install_dir}: exit code {exc.exit_code}"
            ) from exc


# ============================================================================
# Installers
# ============================================================================

def install_kind(versions: ResolvedVersions, update: bool, config: BootstrapConfig) -> str:
    """Install or update Kind.

    Uses the pinned default version unless *update* is set, in which case the
    latest release is installed.

    Args:
        versions: Resolved latest versions.
        update: Whether the --update flag was provided.
        config: Bootstrap configuration.

    Returns:
        The Kind version in use.
    """
    console.print(Panel.fit("Installing Kind", style="bold blue"))
    if _skip_install(TOOL_KIND, update):
        return installed_kind_version()

    version = versions.kind if update else default_version(TOOL_KIND)
    console.print(f"[yellow]\u2139\ufe0f  Installing/updating Kind to version {version}...[/yellow]")
    url = KIND_DOWNLOAD_URL.format(version=version, os=config.platform_os, arch=config.platform_arch)
    install_binary(TOOL_KIND, url, url + KIND_CHECKSUM_SUFFIX, config)
    console.print(f"[green]\u2705 Kind {version} installed[/green]")
    return version


def install_helm(versions: ResolvedVersions, update: bool, config: BootstrapConfig) -> str:
    """Install or update Helm through the upstream installer script.

    The script verifies the release checksum itself.

    Args:
        versions: Resolved latest versions.
        update: Whether the --update flag was provided.
        config: Bootstrap configuration.

    Returns:
        The Helm version in use.

    Raises:
        ToolInstallError: If the installer script cannot be downloaded.
    """
    console.print(Panel.fit("Installing Helm", style="bold blue"))
    if _skip_install(TOOL_HELM, update):
        return installed_helm_version()

    version = versions.helm if update else default_version(TOOL_HELM)
    console.print(f"[yellow]\u2139\ufe0f  Installing/updating Helm to version {version}...[/yellow]")
    with tempfile.TemporaryDirectory(prefix="kind-bootstrap-") as tmp:
        script = Path(tmp) / "get_helm.sh"
        try:
            _download(HELM_INSTALL_SCRIPT_URL, script, config.request_timeout)
        except requests.RequestException as exc:
            raise ToolInstallError(f"Failed to download the Helm installer: {exc}") from exc
        env = {
            **os.environ,
            "HELM_INSTALL_DIR": str(config.install_dir),
            "USE_SUDO": "true" if config.use_sudo else "false",
        }
        sh.bash(str(script), "--version", version, _env=env)
    console.print(f"[green]\u2705 Helm {version} installed[/green]")
    return version


def install_kubectl(versions: ResolvedVersions, update: bool, config: BootstrapConfig) -> str:
    """Install or update kubectl to the resolved stable release.

    Args:
        versions: Resolved latest versions.
        update: Whether the --update flag was provided.
        config: Bootstrap configuration.

    Returns:
        The kubectl version in use.
    """
    console.print(Panel.fit("Installing kubectl", style="bold blue"))
    if _skip_install(TOOL_KUBECTL, update):
        version = installed_kubectl_version()
    else:
        version = versions.kubectl
        console.print(f"[yellow]\u2139\ufe0f  Installing/updating kubectl to version {version}...[/yellow]")
        url = KUBECTL_DOWNLOAD_URL.format(version=version, os=config.platform_os, arch=config.platform_arch)
        install_binary(TOOL_KUBECTL, url, url + KUBECTL_CHECKSUM_SUFFIX, config)
    console.print(f"[green]\u2705 kubectl version is set to {version}[/green]")
    return version
