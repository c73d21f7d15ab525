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

"""Configure subcommands (inference)."""

from __future__ import annotations

from pathlib import Path

import typer

from mesh_manager.commands._common import cluster_option, resolve_config
from mesh_manager.inference import configure_mesh_inference
from mesh_manager.utils import require_command

app = typer.Typer(help="Configure Istio routing in one cluster.")


@app.command()
def inference(
    cluster: str | None = typer.Option(None, "--cluster", help="kind cluster name (default: DEMO_CLUSTER1)"),
    assets_dir: Path | None = typer.Option(None, "--assets-dir", help="Directory with local manifests"),
) -> None:
    """Apply destination rules, the inference gateway, body-based routing, and the HTTPRoute."""
    cfg = resolve_config(assets_dir=assets_dir)
    target = cluster_option(cfg, cluster)
    for cmd in ("kubectl", "helm"):
        require_command(cmd)
    configure_mesh_inference(target, cfg)
