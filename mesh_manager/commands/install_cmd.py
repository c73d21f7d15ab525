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

"""Install subcommands (mesh, inference)."""

from __future__ import annotations

from pathlib import Path

import typer

from mesh_manager.commands._common import cluster_option, resolve_config
from mesh_manager.config import SetupOptions
from mesh_manager.inference import install_inference_extension
from mesh_manager.mesh import install_mesh
from mesh_manager.orchestrator import prepare_repo, resolve_tag
from mesh_manager.utils import require_command

app = typer.Typer(help="Install components into one cluster.")


@app.command()
def mesh(
    cluster: str | None = typer.Option(None, "--cluster", help="kind cluster name (default: DEMO_CLUSTER1)"),
    tag: str | None = typer.Option(None, "--tag", help="Istio build tag (default: fetched)"),
    hub: str | None = typer.Option(None, "--hub", help="Istio image registry"),
) -> None:
    """Install the Istio control plane with istioctl from the source tree."""
    cfg = resolve_config(hub=hub)
    target = cluster_option(cfg, cluster)
    require_command("go")
    resolved_tag = resolve_tag(cfg, SetupOptions(tag=tag))
    install_mesh(target, resolved_tag, cfg, prepare_repo(cfg, Path.cwd()))


@app.command()
def inference(
    cluster: str | None = typer.Option(None, "--cluster", help="kind cluster name (default: DEMO_CLUSTER1)"),
    assets_dir: Path | None = typer.Option(None, "--assets-dir", help="Directory with local manifests"),
) -> None:
    """Install Gateway API and inference extension CRDs, simulated backends, and InferencePools."""
    cfg = resolve_config(assets_dir=assets_dir)
    target = cluster_option(cfg, cluster)
    for cmd in ("kubectl", "helm"):
        require_command(cmd)
    install_inference_extension(target, cfg)
