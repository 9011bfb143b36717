from __future__ import annotations

import hashlib
import json

import pytest
from conftest import FakeResponse, command_error

from kind_bootstrap import BootstrapError, ToolInstallError
from kind_bootstrap.config import ResolvedVersions
from kind_bootstrap.constants import HELM_INSTALL_SCRIPT_URL
from kind_bootstrap.tools import (
    install_binary,
    install_helm,
    install_kind,
    install_kubectl,
    is_installed,
    require_command,
)

LATEST = ResolvedVersions(
    kind="v0.27.0",
    helm="v3.18.0",
    kubectl="v1.33.1",
    cilium="v1.17.4",
    hubble="v1.17.3",
)

BINARY = b"\x7fELF fake binary"
BINARY_SHA = hashlib.sha256(BINARY).hexdigest()

KIND_DEFAULT_URL = "https://kind.sigs.k8s.io/dl/v0.22.0/kind-linux-amd64"
KIND_LATEST_URL = "https://kind.sigs.k8s.io/dl/v0.27.0/kind-linux-amd64"
KUBECTL_URL = "https://dl.k8s.io/release/v1.33.1/bin/linux/amd64/kubectl"


def _serve_binary(fake_http, url: str, checksum_suffix: str, checksum: str = BINARY_SHA) -> None:
    fake_http.routes[url] = FakeResponse(content=BINARY)
    fake_http.routes[url + checksum_suffix] = FakeResponse(text=f"{checksum}  binary\n")


# ============================================================================
# Detection
# ============================================================================

def test_is_installed(fake_sh):
    fake_sh.missing.add("kind")
    assert is_installed("helm")
    assert not is_installed("kind")


def test_require_command_missing(fake_sh):
    fake_sh.missing.add("cilium")
    with pytest.raises(BootstrapError, match="cilium"):
        require_command("cilium")


# ============================================================================
# Installed tools without --update
# ============================================================================

def test_present_kind_without_update_skips_download(fake_sh, fake_http, config):
    fake_sh.results["kind"] = "kind v0.20.0 go1.20.4 linux/amd64\n"

    assert install_kind(LATEST, False, config) == "v0.20.0"

    assert fake_http.requested == []
    assert fake_sh.called("install") == []


def test_present_helm_without_update_skips_download(fake_sh, fake_http, config):
    fake_sh.results["helm"] = "v3.14.2+gc309b6f\n"

    assert install_helm(LATEST, False, config) == "v3.14.2"

    assert fake_http.requested == []
    assert fake_sh.called("bash") == []


def test_present_kubectl_without_update_skips_download(fake_sh, fake_http, config):
    fake_sh.results["kubectl"] = json.dumps({"clientVersion": {"gitVersion": "v1.30.0"}})

    assert install_kubectl(LATEST, False, config) == "v1.30.0"

    assert fake_http.requested == []
    assert fake_sh.called("install") == []


# ============================================================================
# Downloads
# ============================================================================

def test_missing_kind_installs_pinned_default(fake_sh, fake_http, config):
    fake_sh.missing.add("kind")
    _serve_binary(fake_http, KIND_DEFAULT_URL, ".sha256sum")

    assert install_kind(LATEST, False, config) == "v0.22.0"

    (args,) = fake_sh.called("install")
    assert args[:2] == ("-m", "0755")
    assert args[-1] == str(config.install_dir / "kind")


def test_update_installs_latest_kind_even_when_present(fake_sh, fake_http, config):
    _serve_binary(fake_http, KIND_LATEST_URL, ".sha256sum")

    assert install_kind(LATEST, True, config) == "v0.27.0"

    assert KIND_LATEST_URL in fake_http.requested
    assert len(fake_sh.called("install")) == 1


def test_missing_kubectl_installs_resolved_stable(fake_sh, fake_http, config):
    fake_sh.missing.add("kubectl")
    _serve_binary(fake_http, KUBECTL_URL, ".sha256")

    assert install_kubectl(LATEST, False, config) == "v1.33.1"

    (args,) = fake_sh.called("install")
    assert args[-1] == str(config.install_dir / "kubectl")


def test_install_uses_sudo_when_configured(fake_sh, fake_http, config):
    config = config.model_copy(update={"use_sudo": True})
    _serve_binary(fake_http, KUBECTL_URL, ".sha256")

    install_kubectl(LATEST, True, config)

    (args,) = fake_sh.called("sudo")
    assert args[0] == "install"
    assert fake_sh.called("install") == []


def test_missing_helm_runs_installer_script(fake_sh, fake_http, config):
    fake_sh.missing.add("helm")
    fake_http.routes[HELM_INSTALL_SCRIPT_URL] = FakeResponse(content=b"#!/usr/bin/env bash\n")

    assert install_helm(LATEST, False, config) == "v3.17.1"

    (args,) = fake_sh.called("bash")
    assert args[0].endswith("get_helm.sh")
    assert args[1:] == ("--version", "v3.17.1")


def test_helm_script_download_failure(fake_sh, fake_http, config):
    fake_sh.missing.add("helm")

    with pytest.raises(ToolInstallError, match="Helm installer"):
        install_helm(LATEST, False, config)

    assert fake_sh.called("bash") == []


# ============================================================================
# Hardening
# ============================================================================

def test_checksum_mismatch_leaves_existing_binary(fake_sh, fake_http, config):
    _serve_binary(fake_http, KIND_LATEST_URL, ".sha256sum", checksum="0" * 64)

    with pytest.raises(ToolInstallError, match="Checksum mismatch"):
        install_kind(LATEST, True, config)

    assert fake_sh.called("install") == []


def test_download_failure_leaves_existing_binary(fake_sh, fake_http, config):
    with pytest.raises(ToolInstallError, match="Failed to download kind"):
        install_kind(LATEST, True, config)

    assert fake_sh.called("install") == []


def test_install_step_failure_is_reported(fake_sh, fake_http, config):
    _serve_binary(fake_http, KUBECTL_URL, ".sha256")
    fake_sh.results["install"] = command_error("install")

    with pytest.raises(ToolInstallError, match="exit code 1"):
        install_binary("kubectl", KUBECTL_URL, KUBECTL_URL + ".sha256", config)
