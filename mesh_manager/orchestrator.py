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

"""Orchestration functions that compose domain modules into workflows."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import sh
from rich.panel import Panel

from mesh_manager import console
from mesh_manager.bootstrap import check_prerequisites, run_integ_suite, verify_assets
from mesh_manager.config import ClusterContext, DemoConfig, RepoLocation, SetupOptions
from mesh_manager.inference import configure_mesh_inference, install_inference_extension
from mesh_manager.linker import link_all
from mesh_manager.mesh import install_mesh
from mesh_manager.resolver import fetch_version_tag, locate_repo, verify_repo_layout
from mesh_manager.smoke import run_smoke_test

# ============================================================================
# Internal helpers
# ============================================================================


def _run_sequential(tasks: dict[str, Callable[[], None]]) -> None:
    """Run tasks one after another; the first failure stops the rest."""
    for fn in tasks.values():
        fn()


def _run_parallel(tasks: dict[str, Callable[[], None]]) -> None:
    """Run tasks in parallel, printing each task's output as a clean block.

    Args:
        tasks: Mapping of task name to callable.

    Raises:
        Exception: Re-raises the first exception from any failed task.
    """
    if not tasks:
        return

    def _run_task(name: str, fn: Callable) -> None:
        with console.capture(name):
            fn()

    try:
        with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
            futures = {executor.submit(_run_task, name, fn): name for name, fn in tasks.items()}
            for future in as_completed(futures):
                future.result()
    finally:
        console.replay(tasks)


def resolve_tag(cfg: DemoConfig, options: SetupOptions) -> str:
    """Return the tag override, or fetch the published Istio build tag."""
    if options.tag:
        console.print(f"[yellow]\u2139\ufe0f  Using Istio build tag override: {options.tag}[/yellow]")
        return options.tag
    return fetch_version_tag(cfg.version_url, cfg.request_timeout)


def prepare_repo(cfg: DemoConfig, start_dir: Path) -> RepoLocation:
    """Locate the Istio source tree and check its layout."""
    repo = locate_repo(cfg, start_dir)
    verify_repo_layout(repo)
    return repo


# ============================================================================
# Public API
# ============================================================================


def setup_cluster(cluster: ClusterContext, tag: str, cfg: DemoConfig, repo: RepoLocation) -> None:
    """Install Istio, the inference extension, and inference routing on one cluster.

    Args:
        cluster: Target cluster.
        tag: Istio build tag.
        cfg: Demo configuration.
        repo: Resolved Istio source tree.
    """
    install_mesh(cluster, tag, cfg, repo)
    install_inference_extension(cluster, cfg)
    configure_mesh_inference(cluster, cfg)


def run_setup(cfg: DemoConfig, options: SetupOptions, start_dir: Path) -> None:
    """Run the full demo workflow.

    Order: local asset check, tag + source tree, cluster bootstrap,
    per-cluster installs, remote secrets in both directions, smoke test. Any
    failure aborts the run; nothing already applied is rolled back.

    Args:
        cfg: Demo configuration.
        options: Workflow options.
        start_dir: Directory the Istio source tree search starts from.

    Raises:
        RuntimeError: If a precondition fails.
        sh.ErrorReturnCode: If an external command fails.
    """
    clusters = cfg.clusters()
    need_bootstrap = not options.skip_bootstrap

    verify_assets(cfg, need_bootstrap)
    tag = resolve_tag(cfg, options)
    check_prerequisites(need_bootstrap=need_bootstrap)
    repo = prepare_repo(cfg, start_dir)

    if need_bootstrap:
        run_integ_suite(repo, cfg.asset(cfg.topology_config))

    tasks: dict[str, Callable[[], None]] = {
        cluster.name: (lambda c=cluster: setup_cluster(c, tag, cfg, repo))
        for cluster in clusters
    }
    if options.parallel_clusters:
        _run_parallel(tasks)
    else:
        _run_sequential(tasks)

    link_all(clusters, repo)

    if not options.skip_smoke_test:
        run_smoke_test(clusters[0], cfg)
    console.print("[green]\u2705 Multicluster inference demo is ready[/green]")


def delete_clusters(cfg: DemoConfig) -> None:
    """Delete both kind clusters.

    Args:
        cfg: Demo configuration with the cluster names.
    """
    console.print(Panel.fit("Deleting kind clusters", style="bold blue"))
    for cluster in cfg.clusters():
        console.print(f"[yellow]\u2139\ufe0f  Deleting kind cluster '{cluster.name}'...[/yellow]")
        sh.kind("delete", "cluster", "--name", cluster.name)
    console.print("[green]\u2705 Clusters deleted[/green]")
