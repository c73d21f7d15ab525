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

"""Prerequisite checks and multicluster kind bootstrap via the Istio integ suite."""

from __future__ import annotations

from pathlib import Path

import sh
from rich.panel import Panel

from mesh_manager import console
from mesh_manager.config import DemoConfig, RepoLocation
from mesh_manager.constants import (
    INTEG_SUITE_TOPOLOGY,
    LOCAL_MANIFESTS,
    REL_INTEG_SUITE,
    REQUIRED_COMMANDS,
)
from mesh_manager.utils import require_asset, require_command, require_file


def check_prerequisites(need_bootstrap: bool) -> None:
    """Check that every CLI the workflow shells out to is installed.

    Args:
        need_bootstrap: Whether the integration-suite bootstrap will run.
    """
    prereqs = list(REQUIRED_COMMANDS)
    if need_bootstrap:
        prereqs.append("bash")
    console.print(Panel.fit("Checking prerequisites", style="bold blue"))
    for cmd in prereqs:
        require_command(cmd)
    console.print("[green]\u2705 All required tools are available[/green]")


def verify_assets(cfg: DemoConfig, need_bootstrap: bool) -> None:
    """Check every local manifest the workflow applies, plus the topology file.

    Args:
        cfg: Demo configuration with the assets directory.
        need_bootstrap: Whether the topology file will be used.

    Raises:
        RuntimeError: If any asset is missing.
    """
    for name, what in LOCAL_MANIFESTS:
        require_asset(cfg, name, what)
    if need_bootstrap:
        require_asset(cfg, cfg.topology_config, "topology config")
    console.print(f"[green]\u2705 Local assets found in {cfg.assets_dir.resolve()}[/green]")


def run_integ_suite(repo: RepoLocation, topology_config: Path) -> None:
    """Create both kind clusters with the Istio integration-suite script.

    Clusters are kept after the script exits (``--skip-cleanup``) so the
    remaining steps can install into them.

    Args:
        repo: Resolved Istio source tree.
        topology_config: Multicluster topology descriptor.

    Raises:
        RuntimeError: If the topology descriptor does not exist.
    """
    console.print(Panel.fit("Bootstrapping multicluster kind environment", style="bold blue"))
    topology_config = topology_config.resolve()
    require_file(topology_config, "topology config")
    console.print(f"[yellow]\u2139\ufe0f  Topology: {topology_config}[/yellow]")

    integ_suite = repo.scoped(sh.bash.bake(REL_INTEG_SUITE))
    integ_suite(
        "--skip-cleanup",
        "--topology", INTEG_SUITE_TOPOLOGY,
        "--topology-config", str(topology_config),
        _fg=True,
    )
    console.print("[green]\u2705 Multicluster environment created[/green]")
