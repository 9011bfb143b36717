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

"""Latest release lookup with fallback to pinned defaults."""

from __future__ import annotations

import requests
from rich.panel import Panel

from kind_bootstrap import console, logger
from kind_bootstrap.config import BootstrapConfig, ResolvedVersions
from kind_bootstrap.constants import (
    TOOL_KUBECTL,
    TOOL_LABELS,
    TOOLS,
    dep_value,
)


def default_version(tool: str) -> str:
    """Return the pinned default version for a tool.

    Args:
        tool: Tool key (e.g. ``kind``).

    Returns:
        Version string from dependencies.yaml.

    Raises:
        KeyError: If the tool has no pinned default.
    """
    version = dep_value(tool, "version")
    if not version:
        raise KeyError(f"No default version pinned for '{tool}'")
    return version


def fetch_latest_version(tool: str, timeout: float) -> str:
    """Query the release endpoint for a tool and return the raw version string.

    GitHub endpoints return JSON with a ``tag_name`` field; the kubectl
    endpoint returns the version as plain text.

    Args:
        tool: Tool key (e.g. ``kind``).
        timeout: HTTP request timeout in seconds.

    Returns:
        The version string, possibly empty.

    Raises:
        requests.RequestException: On connection errors or non-2xx responses.
        ValueError: If a JSON response cannot be decoded.
    """
    url = dep_value(tool, "latest")
    logger.debug("Fetching latest %s version from %s", tool, url)
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    if tool == TOOL_KUBECTL:
        return resp.text.strip()
    return (resp.json().get("tag_name") or "").strip()


def resolve_version(tool: str, config: BootstrapConfig) -> str:
    """Resolve the latest version for a tool, falling back to the default.

    Args:
        tool: Tool key (e.g. ``kind``).
        config: Bootstrap configuration with the request timeout.

    Returns:
        The latest version, or the pinned default when the lookup fails.
    """
    try:
        version = fetch_latest_version(tool, config.request_timeout)
    except (requests.RequestException, ValueError, AttributeError) as exc:
        logger.debug("Latest %s version lookup failed: %s", tool, exc)
        version = ""
    if not version:
        console.print(
            f"[yellow]\u26a0\ufe0f  Failed to fetch the latest {TOOL_LABELS[tool]} version. "
            f"Using default version.[/yellow]"
        )
        return default_version(tool)
    return version


def resolve_versions(config: BootstrapConfig) -> ResolvedVersions:
    """Resolve the latest versions of every tool and component.

    Args:
        config: Bootstrap configuration with the request timeout.

    Returns:
        Resolved versions, each falling back to its default independently.
    """
    console.print(Panel.fit("Resolving latest versions", style="bold blue"))
    resolved = {tool: resolve_version(tool, config) for tool in TOOLS}
    for tool, version in resolved.items():
        console.print(f"  {TOOL_LABELS[tool]:<8}: {version}")
    return ResolvedVersions(**resolved)
