"""Shared fixtures: recording stand-ins for sh commands, docker and HTTP."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest
import sh

import mesh_manager.bootstrap as bootstrap_module
import mesh_manager.inference as inference_module
import mesh_manager.linker as linker_module
import mesh_manager.mesh as mesh_module
import mesh_manager.orchestrator as orchestrator_module
import mesh_manager.resolver as resolver_module
import mesh_manager.smoke as smoke_module
import mesh_manager.utils as utils_module
from mesh_manager.config import DemoConfig, RepoLocation
from mesh_manager.constants import (
    ASSET_GPT5_EPP_DR,
    ASSET_GPT5_SIM_DEPLOYMENT,
    ASSET_HTTPROUTE,
    DEFAULT_TOPOLOGY_CONFIG,
    REL_INTEG_SUITE,
)

SH_MODULES = (
    bootstrap_module,
    inference_module,
    linker_module,
    mesh_module,
    orchestrator_module,
    resolver_module,
    smoke_module,
    utils_module,
)


@dataclass
class Call:
    program: str
    args: tuple
    kwargs: dict

    def has(self, *items: str) -> bool:
        return all(item in self.args for item in items)

    def context(self) -> str | None:
        for arg in self.args:
            for prefix in ("--context=", "--kube-context="):
                if arg.startswith(prefix):
                    return arg[len(prefix):]
        return None


class FakeCommand:
    def __init__(self, fake: FakeSh, program: str, args: tuple = (), kwargs: dict | None = None) -> None:
        self.fake = fake
        self.program = program
        self.args = args
        self.kwargs = kwargs or {}

    def bake(self, *args, **kwargs) -> FakeCommand:
        return FakeCommand(self.fake, self.program, self.args + args, {**self.kwargs, **kwargs})

    def __call__(self, *args, **kwargs):
        call = Call(self.program, self.args + args, {**self.kwargs, **kwargs})
        self.fake.calls.append(call)
        handler = self.fake.handlers.get(self.program)
        if handler is not None:
            return handler(call)
        return ""


@dataclass
class FakeSh:
    """Stands in for the ``sh`` module and records every command run."""

    ErrorReturnCode = sh.ErrorReturnCode

    calls: list[Call] = field(default_factory=list)
    handlers: dict = field(default_factory=dict)
    missing: set[str] = field(default_factory=set)

    def which(self, cmd: str) -> str | None:
        return None if cmd in self.missing else f"/usr/bin/{cmd}"

    def __getattr__(self, name: str) -> FakeCommand:
        if name.startswith("_"):
            raise AttributeError(name)
        return FakeCommand(self, name)

    def calls_for(self, program: str) -> list[Call]:
        return [c for c in self.calls if c.program == program]


@pytest.fixture
def fake_sh(monkeypatch) -> FakeSh:
    fake = FakeSh()
    for module in SH_MODULES:
        monkeypatch.setattr(module, "sh", fake)
    return fake


@pytest.fixture
def assets_dir(tmp_path) -> Path:
    assets = tmp_path / "assets"
    assets.mkdir()
    for name in (ASSET_GPT5_SIM_DEPLOYMENT, ASSET_GPT5_EPP_DR, ASSET_HTTPROUTE):
        (assets / name).write_text("kind: Placeholder\n", encoding="utf-8")
    (assets / DEFAULT_TOPOLOGY_CONFIG).write_text("[]\n", encoding="utf-8")
    return assets


@pytest.fixture
def cfg(assets_dir) -> DemoConfig:
    return DemoConfig(assets_dir=assets_dir, gateway_address_poll_seconds=0)


@pytest.fixture
def istio_repo(tmp_path) -> Path:
    repo = tmp_path / "workspace" / "istio"
    script = repo / REL_INTEG_SUITE
    script.parent.mkdir(parents=True)
    script.write_text("#!/bin/bash\n", encoding="utf-8")
    return repo


@pytest.fixture
def repo(istio_repo) -> RepoLocation:
    return RepoLocation(istio_repo)


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200, reason: str = "OK") -> None:
        self.text = text
        self.status_code = status_code
        self.reason = reason
        self.headers = {"content-type": "application/json"}

    def raise_for_status(self) -> None:
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} {self.reason}")


class FakeDockerClient:
    def __init__(self, networks: dict[str, dict[str, dict]]) -> None:
        self._networks = networks
        self.closed = False
        self.containers = self

    def get(self, name: str):
        networks = self._networks[name]
        return type("Container", (), {"attrs": {"NetworkSettings": {"Networks": networks}}})()

    def close(self) -> None:
        self.closed = True
