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

"""Link subcommands (secrets, pair)."""

from __future__ import annotations

from pathlib import Path

import typer

from mesh_manager.commands._common import cluster_argument, resolve_config
from mesh_manager.linker import link_all, link_clusters
from mesh_manager.orchestrator import prepare_repo
from mesh_manager.utils import require_command

app = typer.Typer(help="Create cross-cluster remote secrets.")


def _check_tools() -> None:
    for cmd in ("kind", "kubectl", "go"):
        require_command(cmd)


@app.command()
def secrets() -> None:
    """Link both clusters to each other."""
    _check_tools()
    cfg = resolve_config()
    link_all(cfg.clusters(), prepare_repo(cfg, Path.cwd()))


@app.command()
def pair(
    local: str = typer.Argument(..., help="Cluster receiving the secret"),
    remote: str = typer.Argument(..., help="Cluster the secret grants access to"),
) -> None:
    """Install a secret in LOCAL for reaching REMOTE (one direction only)."""
    if local == remote:
        raise typer.BadParameter("LOCAL and REMOTE must be different clusters")
    local_cluster, remote_cluster = cluster_argument(local), cluster_argument(remote)
    _check_tools()
    cfg = resolve_config()
    link_clusters(local_cluster, remote_cluster, prepare_repo(cfg, Path.cwd()))
