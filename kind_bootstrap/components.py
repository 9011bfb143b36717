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

"""Cilium and Hubble installation."""

from __future__ import annotations

import time
from collections.abc import Callable

import sh
from rich.panel import Panel
from tenacity import RetryCallState, RetryError, Retrying, retry_if_result, stop_after_attempt, wait_incrementing

from kind_bootstrap import CiliumInstallError, HubbleInstallError, console
from kind_bootstrap.config import BootstrapConfig
from kind_bootstrap.constants import (
    CILIUM_HELM_VALUES,
    HELM_CHART_CILIUM,
    HELM_RELEASE_CILIUM,
    HELM_REPO_CILIUM,
    HELM_REPO_CILIUM_URL,
    HUBBLE_RELAY_SELECTOR,
)


# ============================================================================
# Cilium
# ============================================================================

def check_cilium_status() -> bool:
    """Run ``cilium status --wait`` and report whether Cilium is running.

    Returns:
        True if the status command exits successfully.
    """
    console.print("[yellow]\u2139\ufe0f  Checking Cilium status...[/yellow]")
    try:
        sh.cilium("status", "--wait")
    except sh.ErrorReturnCode:
        console.print("[yellow]\u26a0\ufe0f  Cilium is not running.[/yellow]")
        return False
    console.print("[green]\u2705 Cilium is running.[/green]")
    return True


def cilium_helm_args(version: str, namespace: str) -> list[str]:
    """Build the ``helm install`` arguments for the Cilium chart.

    Args:
        version: Cilium chart version.
        namespace: Namespace to install into.

    Returns:
        Argument list for ``helm``.
    """
    set_args = [item for key, value in CILIUM_HELM_VALUES.items() for item in ("--set", f"{key}={value}")]
    return [
        "install", HELM_RELEASE_CILIUM, HELM_CHART_CILIUM,
        "--version", version,
        "--namespace", namespace,
        *set_args,
    ]


def wait_for_cilium(config: BootstrapConfig, sleep: Callable[[float], None] = time.sleep) -> None:
    """Poll Cilium status with linear back-off.

    Attempt N that fails is followed by a wait of N times the back-off step,
    including the last attempt before giving up.

    Args:
        config: Bootstrap configuration with retry count and back-off step.
        sleep: Sleep function used between attempts.

    Raises:
        CiliumInstallError: If Cilium is not running after all attempts.
    """
    def _before(retry_state: RetryCallState) -> None:
        console.print(
            f"[yellow]\u2139\ufe0f  Checking Cilium status, attempt "
            f"{retry_state.attempt_number}/{config.max_retries}[/yellow]"
        )

    def _before_sleep(retry_state: RetryCallState) -> None:
        console.print(
            f"[yellow]\u26a0\ufe0f  Cilium installation attempt {retry_state.attempt_number} failed. Retrying...[/yellow]"
        )

    retrying = Retrying(
        stop=stop_after_attempt(config.max_retries),
        wait=wait_incrementing(start=config.retry_backoff_seconds, increment=config.retry_backoff_seconds),
        retry=retry_if_result(lambda ok: not ok),
        before=_before,
        before_sleep=_before_sleep,
        sleep=sleep,
    )
    try:
        retrying(check_cilium_status)
    except RetryError as err:
        # Retrying does not wait after the last attempt; the final back-off still applies.
        console.print(f"[yellow]\u26a0\ufe0f  Cilium installation attempt {config.max_retries} failed.[/yellow]")
        sleep(config.max_retries * config.retry_backoff_seconds)
        raise CiliumInstallError(
            f"Failed to install Cilium after {config.max_retries} attempts."
        ) from err
    console.print("[green]\u2705 Cilium installed successfully.[/green]")


def install_cilium(
    version: str,
    config: BootstrapConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Install Cilium via Helm and wait for it to become ready.

    Args:
        version: Cilium chart version.
        config: Bootstrap configuration.
        sleep: Sleep function used between status checks.

    Raises:
        CiliumInstallError: If Cilium does not become ready.
        sh.ErrorReturnCode: If a Helm command fails.
    """
    console.print(Panel.fit(f"Installing Cilium {version}", style="bold blue"))
    sh.helm("repo", "add", HELM_REPO_CILIUM, HELM_REPO_CILIUM_URL)
    sh.helm("repo", "update")
    sh.helm(*cilium_helm_args(version, config.cilium_namespace))
    wait_for_cilium(config, sleep=sleep)


# ============================================================================
# Hubble
# ============================================================================

def install_hubble(version: str, config: BootstrapConfig) -> None:
    """Enable Hubble once Cilium is confirmed healthy.

    Args:
        version: Hubble version, used for reporting.
        config: Bootstrap configuration with namespace and wait timeout.

    Raises:
        HubbleInstallError: If Cilium is not running.
        sh.ErrorReturnCode: If enabling Hubble or the relay wait fails.
    """
    console.print(Panel.fit(f"Installing Hubble {version}", style="bold blue"))
    if not check_cilium_status():
        console.print("[yellow]\u26a0\ufe0f  Cilium is not ready. Skipping Hubble installation.[/yellow]")
        raise HubbleInstallError("Cilium is not ready; Hubble was not installed.")

    sh.cilium("hubble", "enable")
    console.print("[yellow]\u2139\ufe0f  Waiting for Hubble relay pods to be ready...[/yellow]")
    sh.kubectl(
        "wait", "--for=condition=ready", "pod",
        "-l", HUBBLE_RELAY_SELECTOR,
        "-n", config.cilium_namespace,
        f"--timeout={config.hubble_timeout_seconds}s",
    )
    console.print("[green]\u2705 Hubble installed successfully.[/green]")
