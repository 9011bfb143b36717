from __future__ import annotations

import os

import pytest
import requests
import sh

from kind_bootstrap import cluster, components, tools
from kind_bootstrap.config import BootstrapConfig


def command_error(cmd: str = "cmd", code: int = 1) -> sh.ErrorReturnCode:
    """Build the exception sh raises for a command exiting with *code*."""
    exc_cls = getattr(sh, f"ErrorReturnCode_{code}")
    return exc_cls(cmd, b"", b"command failed")


class FakeSh:
    """Stand-in for the ``sh`` command namespace.

    Each command call is recorded in ``calls`` as ``(name, args)``. Results are
    looked up in ``results`` by command name; a result may be a string, an
    exception to raise, a list consumed one item per call, or a callable
    receiving the call arguments.
    """

    ErrorReturnCode = sh.ErrorReturnCode
    CommandNotFound = sh.CommandNotFound

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple]] = []
        self.results: dict[str, object] = {}
        self.missing: set[str] = set()

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        if name.startswith("ErrorReturnCode_"):
            return getattr(sh, name)

        def _command(*args, **kwargs):
            self.calls.append((name, args))
            if name == "which" and args and args[0] in self.missing:
                raise command_error(f"which {args[0]}")
            result = self.results.get(name, "")
            if isinstance(result, list):
                result = result.pop(0)
            if callable(result):
                result = result(*args)
            if isinstance(result, BaseException):
                raise result
            return result

        return _command

    def called(self, name: str) -> list[tuple]:
        return [args for cmd, args in self.calls if cmd == name]


class FakeResponse:
    def __init__(self, status: int = 200, text: str = "", json_data=None, content: bytes = b"") -> None:
        self.status_code = status
        self.text = text
        self._json = json_data
        self.content = content

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._json is None:
            raise ValueError("response is not JSON")
        return self._json

    def iter_content(self, chunk_size: int = 1):
        yield self.content

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None


class FakeHttp:
    """Routes ``requests.get`` calls to canned responses by URL."""

    def __init__(self) -> None:
        self.routes: dict[str, object] = {}
        self.requested: list[str] = []

    def get(self, url: str, **kwargs):
        self.requested.append(url)
        response = self.routes.get(url, requests.ConnectionError(f"unreachable: {url}"))
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("KIND_BOOTSTRAP_"):
            monkeypatch.delenv(key)


@pytest.fixture
def fake_sh(monkeypatch) -> FakeSh:
    fake = FakeSh()
    for module in (tools, cluster, components):
        monkeypatch.setattr(module, "sh", fake)
    return fake


@pytest.fixture
def fake_http(monkeypatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr(requests, "get", fake.get)
    return fake


@pytest.fixture
def config(tmp_path) -> BootstrapConfig:
    kind_config = tmp_path / "kind-config.yaml"
    kind_config.write_text("kind: Cluster\napiVersion: kind.x-k8s.io/v1alpha4\n")
    return BootstrapConfig(
        kind_config=kind_config,
        install_dir=tmp_path / "bin",
        use_sudo=False,
    )
