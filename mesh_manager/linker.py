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

"""Cross-cluster remote secrets between the two kind clusters."""

from __future__ import annotations

import docker
import sh
from rich.panel import Panel

from mesh_manager import console, logger
from mesh_manager.config import ClusterContext, RepoLocation
from mesh_manager.constants import API_SERVER_PORT, KIND_CONTROL_PLANE_SUFFIX
from mesh_manager.mesh import create_remote_secret


def control_plane_container(cluster_name: str) -> str:
    """Return the container name of a kind cluster's control-plane node.

    Args:
        cluster_name: kind cluster name.

    Raises:
        RuntimeError: If kind reports no nodes for the cluster.
    """
    nodes = str(sh.kind("get", "nodes", "-n", cluster_name)).split()
    if not nodes:
        raise RuntimeError(f"No kind nodes found for cluster '{cluster_name}'")
    for node in nodes:
        if node.endswith(KIND_CONTROL_PLANE_SUFFIX):
            return node
    return nodes[0]


def container_ip(container: str) -> str:
    """Return the docker network IP of a container.

    Addresses of every attached network are concatenated, matching
    ``docker inspect -f '{{range.NetworkSettings.Networks}}{{.IPAddress}}{{end}}'``.

    Raises:
        RuntimeError: If the container has no network address.
    """
    client = docker.from_env()
    try:
        attrs = client.containers.get(container).attrs
    finally:
        client.close()
    networks = attrs.get("NetworkSettings", {}).get("Networks") or {}
    ip = "".join(net.get("IPAddress") or "" for net in networks.values())
    if not ip:
        raise RuntimeError(f"Container '{container}' has no network IP address")
    return ip


def api_server_url(cluster: ClusterContext) -> str:
    """Return the API server URL of *cluster* as seen from the kind network."""
    ip = container_ip(control_plane_container(cluster.name))
    console.print(f"[yellow]\u2139\ufe0f  Remote cluster API server IP: {ip}[/yellow]")
    return f"https://{ip}:{API_SERVER_PORT}"


def link_clusters(local: ClusterContext, remote: ClusterContext, repo: RepoLocation) -> None:
    """Install a secret in *local* that lets its control plane reach *remote*.

    The secret is generated against the remote context and applied to the
    local context straight from memory.

    Args:
        local: Cluster receiving the secret.
        remote: Cluster the secret grants access to.
        repo: Resolved Istio source tree.
    """
    console.print(
        f"[yellow]\u2139\ufe0f  Setting up remote secrets in cluster {local.name} "
        f"for remote cluster {remote.name}[/yellow]"
    )
    secret = create_remote_secret(remote, api_server_url(remote), repo)
    sh.kubectl("apply", f"--context={local.context}", "-f", "-", _in=secret)
    logger.info("Remote secret for %s applied to %s", remote.context, local.context)


def link_all(clusters: tuple[ClusterContext, ClusterContext], repo: RepoLocation) -> None:
    """Link both clusters to each other, one direction at a time.

    Args:
        clusters: The two cluster contexts.
        repo: Resolved Istio source tree.
    """
    console.print(Panel.fit("Setting up remote secrets", style="bold blue"))
    first, second = clusters
    link_clusters(first, second, repo)
    link_clusters(second, first, repo)
    console.print("[green]\u2705 Clusters linked in both directions[/green]")
