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

"""Composite setup subcommand (all)."""

from __future__ import annotations

from pathlib import Path

import typer

from mesh_manager.commands._common import resolve_config
from mesh_manager.config import SetupOptions, display_config
from mesh_manager.orchestrator import run_setup

app = typer.Typer(help="Composite setup workflows.")


@app.command("all")
def setup_all(
    skip_bootstrap: bool = typer.Option(
        False, "--skip-bootstrap", help="Reuse kind clusters from an earlier run"),
    skip_smoke_test: bool = typer.Option(
        False, "--skip-smoke-test", help="Do not send the smoke-test request"),
    parallel_clusters: bool = typer.Option(
        False, "--parallel-clusters", help="Install both clusters concurrently"),
    tag: str | None = typer.Option(
        None, "--tag", help="Istio build tag (default: fetched from DEMO_VERSION_URL)"),
    hub: str | None = typer.Option(
        None, "--hub", help="Istio image registry (overrides DEMO_HUB)"),
    assets_dir: Path | None = typer.Option(
        None, "--assets-dir", help="Directory with local manifests (overrides DEMO_ASSETS_DIR)"),
) -> None:
    """Full demo: bootstrap + Istio + inference extension on both clusters + remote secrets + smoke test."""
    cfg = resolve_config(hub=hub, assets_dir=assets_dir)
    options = SetupOptions(
        skip_bootstrap=skip_bootstrap,
        skip_smoke_test=skip_smoke_test,
        parallel_clusters=parallel_clusters,
        tag=tag,
    )
    display_config(cfg, options)
    run_setup(cfg, options, Path.cwd())
