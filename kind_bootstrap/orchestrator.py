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

"""Orchestration of the bootstrap workflow."""

from __future__ import annotations

import time
from collections.abc import Callable

from kind_bootstrap.cluster import recreate_cluster
from kind_bootstrap.components import install_cilium, install_hubble
from kind_bootstrap.config import BootstrapConfig, InstalledTools, display_summary
from kind_bootstrap.constants import TOOL_CILIUM
from kind_bootstrap.tools import install_helm, install_kind, install_kubectl, require_command
from kind_bootstrap.versions import resolve_versions


def run(
    update: bool,
    config: BootstrapConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> InstalledTools:
    """Run the bootstrap workflow: tools, cluster, Cilium, Hubble.

    Args:
        update: Whether to update kind, helm, and kubectl to their latest releases.
        config: Bootstrap configuration.
        sleep: Sleep function used by the Cilium readiness loop.

    Returns:
        Versions of the CLI tools in use.

    Raises:
        BootstrapError: If a step fails in a way the workflow recognizes.
        sh.ErrorReturnCode: If an external command fails.
    """
    require_command(TOOL_CILIUM)
    versions = resolve_versions(config)

    tools = InstalledTools(
        kind=install_kind(versions, update, config),
        helm=install_helm(versions, update, config),
        kubectl=install_kubectl(versions, update, config),
    )

    recreate_cluster(config)
    install_cilium(versions.cilium, config, sleep=sleep)
    install_hubble(versions.hubble, config)

    display_summary(versions, tools)
    return tools
