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

"""Configuration classes, cluster contexts, and config display."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from mesh_manager import console
from mesh_manager.constants import (
    DEFAULT_BBR_PROVIDER,
    DEFAULT_CLUSTER1,
    DEFAULT_CLUSTER2,
    DEFAULT_GATEWAY_ADDRESS_ATTEMPTS,
    DEFAULT_GATEWAY_ADDRESS_POLL_SECONDS,
    DEFAULT_GATEWAY_PORT,
    DEFAULT_GATEWAY_PROVIDER,
    DEFAULT_HUB,
    DEFAULT_REPO_NAME,
    DEFAULT_REPO_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_TOPOLOGY_CONFIG,
    DEFAULT_VERSION_URL,
    KIND_CONTEXT_PREFIX,
)

CLUSTER_NAME_PATTERN = r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$"


# ============================================================================
# Configuration classes
# ============================================================================

class DemoConfig(BaseSettings):
    """Demo configuration, auto-loaded from DEMO_* env vars.

    Attributes:
        repo_name: Directory name of the Istio source tree.
        repo_url: Git URL cloned when no local source tree is found.
        version_url: URL returning the Istio build tag as plain text.
        hub: Image registry passed to ``istioctl install``.
        cluster1: Name of the first kind cluster (smoke test target).
        cluster2: Name of the second kind cluster.
        assets_dir: Directory holding the local manifests and topology file.
        topology_config: Topology descriptor file name, relative to assets_dir.
        gateway_provider: ``provider.name`` for the inference pool charts.
        bbr_provider: ``provider.name`` for the body-based router chart.
        gateway_port: Port of the inference gateway listener.
        request_timeout: Timeout in seconds for HTTP calls.
        gateway_address_attempts: Reads of the gateway status before giving up.
        gateway_address_poll_seconds: Wait between gateway status reads.
    """

    model_config = SettingsConfigDict(env_prefix="DEMO_", extra="ignore")

    repo_name: str = DEFAULT_REPO_NAME
    repo_url: str = DEFAULT_REPO_URL
    version_url: str = DEFAULT_VERSION_URL
    hub: str = DEFAULT_HUB
    cluster1: str = Field(default=DEFAULT_CLUSTER1, pattern=CLUSTER_NAME_PATTERN)
    cluster2: str = Field(default=DEFAULT_CLUSTER2, pattern=CLUSTER_NAME_PATTERN)
    assets_dir: Path = Path(".")
    topology_config: str = DEFAULT_TOPOLOGY_CONFIG
    gateway_provider: str = DEFAULT_GATEWAY_PROVIDER
    bbr_provider: str = DEFAULT_BBR_PROVIDER
    gateway_port: int = Field(default=DEFAULT_GATEWAY_PORT, ge=1, le=65535)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    gateway_address_attempts: int = Field(default=DEFAULT_GATEWAY_ADDRESS_ATTEMPTS, ge=1, le=120)
    gateway_address_poll_seconds: int = Field(default=DEFAULT_GATEWAY_ADDRESS_POLL_SECONDS, ge=0)

    @model_validator(mode="after")
    def check_distinct_clusters(self) -> DemoConfig:
        if self.cluster1 == self.cluster2:
            raise ValueError(f"cluster1 and cluster2 must differ (both are '{self.cluster1}')")
        return self

    def clusters(self) -> tuple[ClusterContext, ClusterContext]:
        """Return the two cluster contexts in setup order."""
        return ClusterContext(self.cluster1), ClusterContext(self.cluster2)

    def asset(self, name: str) -> Path:
        """Resolve a local asset file name against the assets directory."""
        return (self.assets_dir / name).resolve()


# ============================================================================
# Run-scoped values
# ============================================================================

@dataclass(frozen=True)
class ClusterContext:
    """A kind cluster name paired with its kubeconfig context.

    Attributes:
        name: Logical kind cluster name (e.g. ``primary-1``).
    """

    name: str

    @property
    def context(self) -> str:
        """Kubeconfig context kind creates for this cluster."""
        return f"{KIND_CONTEXT_PREFIX}{self.name}"

    @classmethod
    def from_context(cls, context: str) -> ClusterContext:
        """Build a ClusterContext from a ``kind-`` context string.

        Only a leading ``kind-`` is removed; occurrences elsewhere in the
        string are part of the cluster name.
        """
        return cls(context.removeprefix(KIND_CONTEXT_PREFIX))


@dataclass(frozen=True)
class RepoLocation:
    """Resolved Istio source tree.

    Commands that need repo-relative paths are bound to this directory with
    ``scoped`` instead of changing the process working directory.

    Attributes:
        path: Absolute path of the source tree.
    """

    path: Path

    def scoped(self, command):
        """Bake ``_cwd`` into an ``sh`` command so it runs inside the repo."""
        return command.bake(_cwd=str(self.path))


@dataclass(frozen=True)
class SetupOptions:
    """Options for the full setup workflow.

    Attributes:
        skip_bootstrap: Reuse clusters created by an earlier run.
        skip_smoke_test: Do not send the smoke-test request.
        parallel_clusters: Run the per-cluster installs concurrently.
        tag: Istio build tag override, or None to fetch it.
    """

    skip_bootstrap: bool = False
    skip_smoke_test: bool = False
    parallel_clusters: bool = False
    tag: str | None = None


# ============================================================================
# Display
# ============================================================================

def display_config(cfg: DemoConfig, options: SetupOptions) -> None:
    """Print the resolved configuration for a setup run.

    Args:
        cfg: Demo configuration.
        options: Workflow options.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print("[yellow]Clusters:[/yellow]")
    for cluster in cfg.clusters():
        console.print(f"  {cluster.name:<16}: {cluster.context}")
    console.print("[yellow]Istio:[/yellow]")
    console.print(f"  tag             : {options.tag or f'(from {cfg.version_url})'}")
    console.print(f"  hub             : {cfg.hub}")
    console.print(f"  repo            : {cfg.repo_name} ({cfg.repo_url})")
    console.print("[yellow]Inference:[/yellow]")
    console.print(f"  assets_dir      : {cfg.assets_dir.resolve()}")
    console.print(f"  gateway_provider: {cfg.gateway_provider}")
    console.print(f"  bbr_provider    : {cfg.bbr_provider}")
    console.print("[yellow]Workflow:[/yellow]")
    console.print(f"  bootstrap       : {'skip' if options.skip_bootstrap else 'run'}")
    console.print(f"  cluster installs: {'parallel' if options.parallel_clusters else 'sequential'}")
    console.print(f"  smoke test      : {'skip' if options.skip_smoke_test else 'run'}")
