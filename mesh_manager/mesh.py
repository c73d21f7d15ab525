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

"""Istio control plane installation and remote secret generation via istioctl."""

from __future__ import annotations

import sh
from rich.panel import Panel

from mesh_manager import console
from mesh_manager.config import ClusterContext, DemoConfig, RepoLocation
from mesh_manager.constants import (
    ISTIOCTL_PACKAGE,
    ISTIO_KEY_CLUSTER_NAME,
    ISTIO_KEY_HUB,
    ISTIO_KEY_INFERENCE_EXTENSION,
    ISTIO_KEY_TAG,
)
from mesh_manager.utils import set_args


def istioctl(repo: RepoLocation):
    """Return an ``sh`` command running istioctl from the source tree."""
    return repo.scoped(sh.go.bake("run", ISTIOCTL_PACKAGE))


def istio_install_overrides(cluster: ClusterContext, tag: str, hub: str) -> dict[str, str]:
    """Build the ``--set`` values for ``istioctl install``.

    The multicluster cluster name is derived from the kube context, not taken
    from ``cluster.name`` directly, so it always matches what kind registered.

    Args:
        cluster: Target cluster.
        tag: Istio build tag.
        hub: Image registry.

    Returns:
        Ordered mapping of override keys to values.
    """
    return {
        ISTIO_KEY_TAG: tag,
        ISTIO_KEY_HUB: hub,
        ISTIO_KEY_INFERENCE_EXTENSION: "true",
        ISTIO_KEY_CLUSTER_NAME: ClusterContext.from_context(cluster.context).name,
    }


def install_mesh(cluster: ClusterContext, tag: str, cfg: DemoConfig, repo: RepoLocation) -> None:
    """Install the Istio control plane into one cluster.

    Args:
        cluster: Target cluster.
        tag: Istio build tag.
        cfg: Demo configuration with the image hub.
        repo: Resolved Istio source tree.
    """
    console.print(Panel.fit(f"Setting up Istio in context: {cluster.context}", style="bold blue"))
    istioctl(repo)(
        "install", "-y",
        f"--context={cluster.context}",
        *set_args(istio_install_overrides(cluster, tag, cfg.hub)),
    )
    console.print(f"[green]\u2705 Istio installed in {cluster.context}[/green]")


def create_remote_secret(remote: ClusterContext, server: str, repo: RepoLocation) -> str:
    """Generate the remote secret granting access to *remote*'s API server.

    Args:
        remote: Cluster the secret grants access to.
        server: API server URL reachable from the other cluster.
        repo: Resolved Istio source tree.

    Returns:
        The secret manifest as emitted by istioctl.
    """
    return str(istioctl(repo)(
        "create-remote-secret",
        f"--context={remote.context}",
        f"--name={remote.name}",
        f"--server={server}",
    ))
