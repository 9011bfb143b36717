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

"""kind_bootstrap - local Kind cluster bootstrap with Cilium and Hubble."""

from __future__ import annotations

import logging

from rich.console import Console

console = Console()
logger = logging.getLogger("kind_bootstrap")


class BootstrapError(Exception):
    """Base class for fatal bootstrap failures."""


class ToolInstallError(BootstrapError):
    """Raised when a CLI tool cannot be downloaded or installed."""


class ClusterError(BootstrapError):
    """Raised when the Kind cluster cannot be (re)created."""


class CiliumInstallError(BootstrapError):
    """Raised when Cilium does not become ready within the retry budget."""


class HubbleInstallError(BootstrapError):
    """Raised when Hubble cannot be enabled."""
