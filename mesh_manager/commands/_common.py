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

"""Config resolution and cluster name checks shared by subcommands."""

from __future__ import annotations

import re
from pathlib import Path

import typer

from mesh_manager.config import CLUSTER_NAME_PATTERN, ClusterContext, DemoConfig
from mesh_manager.constants import KIND_CONTEXT_PREFIX


def resolve_config(
    hub: str | None = None,
    assets_dir: Path | None = None,
) -> DemoConfig:
    """Merge CLI overrides over DEMO_* environment variables and defaults.

    Resolution priority: CLI arguments > DEMO_* environment variables > defaults.

    Args:
        hub: Image registry override, or None.
        assets_dir: Local manifests directory override, or None.

    Returns:
        The resolved configuration.
    """
    cfg = DemoConfig()
    overrides: dict = {}
    if hub is not None:
        overrides["hub"] = hub
    if assets_dir is not None:
        overrides["assets_dir"] = assets_dir
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    return cfg


def cluster_argument(name: str) -> ClusterContext:
    """Validate a kind cluster name given on the command line.

    Raises:
        typer.BadParameter: If *name* is a kube context or not a valid kind name.
    """
    if name.startswith(KIND_CONTEXT_PREFIX):
        raise typer.BadParameter(
            f"'{name}' is a kube context; pass the kind cluster name "
            f"'{name.removeprefix(KIND_CONTEXT_PREFIX)}'"
        )
    if not re.fullmatch(CLUSTER_NAME_PATTERN, name):
        raise typer.BadParameter(f"'{name}' is not a valid kind cluster name")
    return ClusterContext(name)


def cluster_option(cfg: DemoConfig, name: str | None) -> ClusterContext:
    """Return the cluster named on the command line, defaulting to cluster1."""
    if name is None:
        return ClusterContext(cfg.cluster1)
    return cluster_argument(name)
