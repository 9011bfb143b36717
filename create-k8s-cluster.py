#!/usr/bin/env python3
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

"""
create-k8s-cluster.py - Local Kind cluster with Cilium and Hubble.

Installs kind, helm, and kubectl when they are missing, recreates the Kind
cluster from configs/kind-config.yaml, installs Cilium via Helm, waits for it
to become ready, then enables Hubble.

Environment Variables:
    All settings can be overridden via KIND_BOOTSTRAP_* environment variables:
    - KIND_BOOTSTRAP_CLUSTER_NAME (default: cilium-demo)
    - KIND_BOOTSTRAP_KIND_CONFIG (default: configs/kind-config.yaml)
    - KIND_BOOTSTRAP_MAX_RETRIES (default: 10)
    - KIND_BOOTSTRAP_RETRY_BACKOFF_SECONDS (default: 20)
    - KIND_BOOTSTRAP_INSTALL_DIR (default: /usr/local/bin)
    - And more (see BootstrapConfig for full list)

Examples:
    # Bootstrap, installing only missing tools
    ./create-k8s-cluster.py

    # Bootstrap and update kind, helm, and kubectl to their latest releases
    ./create-k8s-cluster.py --update
"""

from __future__ import annotations

from kind_bootstrap.cli import main

if __name__ == "__main__":
    main()
