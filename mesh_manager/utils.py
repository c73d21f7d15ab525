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

"""Utility functions for kubectl, helm overrides, and command checks."""

from __future__ import annotations

from pathlib import Path

import sh

from mesh_manager.config import ClusterContext, DemoConfig


def set_args(overrides: dict[str, str]) -> list[str]:
    """Flatten ``key=value`` overrides into repeated ``--set`` arguments.

    Args:
        overrides: Mapping of override keys to values, in insertion order.

    Returns:
        Argument list such as ``["--set", "a=1", "--set", "b=2"]``.
    """
    return [item for key, value in overrides.items() for item in ("--set", f"{key}={value}")]


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        RuntimeError: If the command is not found.
    """
    if not sh.which(cmd):
        raise RuntimeError(f"Required command '{cmd}' not found. Please install it first.")


def require_file(path: Path, what: str) -> None:
    """Fail unless *path* is an existing file.

    Raises:
        RuntimeError: If the file does not exist.
    """
    if not path.is_file():
        raise RuntimeError(f"Expected {what} not found: {path}")


def require_asset(cfg: DemoConfig, name: str, what: str) -> Path:
    """Resolve a local asset and fail unless it exists.

    Args:
        cfg: Demo configuration with the assets directory.
        name: Asset file name, relative to the assets directory.
        what: Description used in the error message.

    Returns:
        Absolute path of the asset.

    Raises:
        RuntimeError: If the file does not exist.
    """
    path = cfg.asset(name)
    if not path.is_file():
        raise RuntimeError(
            f"Expected {what} not found: {path} "
            f"(point DEMO_ASSETS_DIR or --assets-dir at the manifests directory)"
        )
    return path


def kubectl_apply(cluster: ClusterContext, source: str | Path) -> None:
    """Apply a local manifest or remote URL to one cluster.

    Args:
        cluster: Target cluster.
        source: Manifest file path or URL.
    """
    sh.kubectl("apply", f"--context={cluster.context}", "-f", str(source))


def helm_install(
    cluster: ClusterContext,
    release: str,
    chart: str,
    version: str,
    overrides: dict[str, str],
) -> None:
    """Install a chart by reference into one cluster.

    Args:
        cluster: Target cluster.
        release: Helm release name.
        chart: Chart reference (e.g. an ``oci://`` URL).
        version: Pinned chart version.
        overrides: ``--set`` values for the release.
    """
    sh.helm(
        "install", release,
        f"--kube-context={cluster.context}",
        *set_args(overrides),
        "--version", version,
        chart,
    )
