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

"""Constants, dependency loading, and dep_value helper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

# -- Resolved paths --
PACKAGE_DIR = Path(__file__).resolve().parent


def load_dependencies() -> dict:
    """Load default tool versions and release endpoints from dependencies.yaml.

    Returns:
        Parsed YAML content as a nested dictionary.
    """
    deps_file = PACKAGE_DIR / "dependencies.yaml"
    with open(deps_file) as f:
        return yaml.safe_load(f)


DEPENDENCIES = load_dependencies()


def dep_value(*keys: str, default: Any = None) -> Any:
    """Safely traverse the DEPENDENCIES dict by key path.

    Args:
        *keys: Sequence of dictionary keys to traverse.
        default: Value to return if any key is missing.

    Returns:
        The value at the nested key path, or *default* if not found.
    """
    node = DEPENDENCIES
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


# -- Tools --
TOOL_KIND = "kind"
TOOL_HELM = "helm"
TOOL_KUBECTL = "kubectl"
TOOL_CILIUM = "cilium"
TOOL_HUBBLE = "hubble"
# Order in which latest versions are looked up.
TOOLS = (TOOL_CILIUM, TOOL_HUBBLE, TOOL_KIND, TOOL_HELM, TOOL_KUBECTL)

# Display names used in progress messages.
TOOL_LABELS = {
    TOOL_KIND: "Kind",
    TOOL_HELM: "Helm",
    TOOL_KUBECTL: "kubectl",
    TOOL_CILIUM: "Cilium",
    TOOL_HUBBLE: "Hubble",
}

# -- Download locations --
KIND_DOWNLOAD_URL = "https://kind.sigs.k8s.io/dl/{version}/kind-{os}-{arch}"
KIND_CHECKSUM_SUFFIX = ".sha256sum"
KUBECTL_DOWNLOAD_URL = "https://dl.k8s.io/release/{version}/bin/{os}/{arch}/kubectl"
KUBECTL_CHECKSUM_SUFFIX = ".sha256"
HELM_INSTALL_SCRIPT_URL = "https://raw.githubusercontent.com/helm/helm/main/scripts/get-helm-3"
DOWNLOAD_CHUNK_SIZE = 1 << 16

# -- Cluster defaults --
DEFAULT_CLUSTER_NAME = "cilium-demo"
DEFAULT_KIND_CONFIG = "configs/kind-config.yaml"
DEFAULT_INSTALL_DIR = "/usr/local/bin"
DEFAULT_PLATFORM_OS = "linux"
DEFAULT_PLATFORM_ARCH = "amd64"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10

# -- Namespaces --
NS_KUBE_SYSTEM = "kube-system"

# -- Cilium --
HELM_REPO_CILIUM = "cilium"
HELM_REPO_CILIUM_URL = "https://helm.cilium.io/"
HELM_RELEASE_CILIUM = "cilium"
HELM_CHART_CILIUM = "cilium/cilium"
CILIUM_MAX_RETRIES = 10
CILIUM_RETRY_BACKOFF_SECONDS = 20

CILIUM_HELM_VALUES = {
    "global.kubeProxyReplacement": "disabled",
    "global.hostServices.enabled": "false",
    "global.externalIPs.enabled": "true",
    "global.nodePort.enabled": "true",
    "global.bpf.masquerade": "true",
    "global.tunnel": "disabled",
    "global.autoDirectNodeRoutes": "true",
    "global.ipam.mode": "kubernetes",
}

# -- Hubble --
HUBBLE_RELAY_SELECTOR = "k8s-app=hubble-relay"
HUBBLE_WAIT_TIMEOUT_SECONDS = 300
