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

"""Istio build tag lookup and source tree resolution."""

from __future__ import annotations

from pathlib import Path

import requests
import sh
from rich.panel import Panel

from mesh_manager import console, logger
from mesh_manager.config import DemoConfig, RepoLocation
from mesh_manager.constants import REL_INTEG_SUITE
from mesh_manager.utils import require_command, require_file


def fetch_version_tag(url: str, timeout: float) -> str:
    """Fetch the Istio build tag published at *url*.

    Args:
        url: Endpoint returning the tag as plain text.
        timeout: Request timeout in seconds.

    Returns:
        The tag with surrounding whitespace removed.

    Raises:
        RuntimeError: If the endpoint is unreachable, returns an error status,
            or returns an empty body.
    """
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as err:
        raise RuntimeError(f"Failed to fetch Istio version from {url}: {err}") from err

    tag = resp.text.strip()
    if not tag:
        raise RuntimeError(f"Empty Istio version returned by {url}")
    console.print(f"[green]\u2705 Istio build tag: {tag}[/green]")
    return tag


def locate_repo(cfg: DemoConfig, start_dir: Path) -> RepoLocation:
    """Find the Istio source tree, cloning it when no local copy exists.

    Checked in order: *start_dir* itself, ``start_dir/<repo>``,
    ``start_dir/../<repo>``; otherwise the repo is cloned into *start_dir*.

    Args:
        cfg: Demo configuration with the repo name and URL.
        start_dir: Directory the search starts from.

    Returns:
        The resolved repo location.

    Raises:
        RuntimeError: If git is needed for a clone but not installed.
    """
    console.print(Panel.fit("Locating Istio source tree", style="bold blue"))
    start_dir = start_dir.resolve()
    candidates = [
        ("Using current directory as", start_dir, start_dir.name == cfg.repo_name),
        ("Using", start_dir / cfg.repo_name, (start_dir / cfg.repo_name).is_dir()),
        ("Using", start_dir.parent / cfg.repo_name, (start_dir.parent / cfg.repo_name).is_dir()),
    ]
    for message, path, matched in candidates:
        if matched:
            console.print(f"[yellow]\u2139\ufe0f  {message} {path}[/yellow]")
            return RepoLocation(path)

    require_command("git")
    target = start_dir / cfg.repo_name
    console.print(f"[yellow]\u2139\ufe0f  Cloning {cfg.repo_url} into {target}...[/yellow]")
    logger.info("git clone %s %s", cfg.repo_url, cfg.repo_name)
    sh.git("clone", cfg.repo_url, cfg.repo_name, _cwd=str(start_dir))
    return RepoLocation(target)


def verify_repo_layout(repo: RepoLocation) -> None:
    """Check the source tree contains the kind integration-suite entry point.

    Raises:
        RuntimeError: If the integration-suite script is missing.
    """
    require_file(repo.path / REL_INTEG_SUITE, f"./{REL_INTEG_SUITE}")
