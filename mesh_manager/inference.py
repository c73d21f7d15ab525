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

"""Gateway API Inference Extension install and Istio inference routing."""

from __future__ import annotations

import sh
from rich.panel import Panel

from mesh_manager import console
from mesh_manager.config import ClusterContext, DemoConfig
from mesh_manager.constants import (
    ASSET_GPT5_EPP_DR,
    ASSET_GPT5_SIM_DEPLOYMENT,
    ASSET_HTTPROUTE,
    BBR_CHART_OCI,
    GATEWAY_API_CRDS_URL,
    HELM_KEY_MODEL_SERVER_LABEL,
    HELM_KEY_PROVIDER_NAME,
    HELM_RELEASE_BBR,
    INFERENCE_CHART_VERSION,
    INFERENCE_CRDS_URL,
    INFERENCEPOOL_CHART_OCI,
    ISTIO_DESTINATION_RULE_URL,
    ISTIO_GATEWAY_URL,
    LEGACY_INFERENCEPOOL_CRD,
    MODEL_SERVER_RELEASES,
    VLLM_SIM_DEPLOYMENT_URL,
)
from mesh_manager.utils import helm_install, kubectl_apply, require_asset


# ============================================================================
# Inference extension
# ============================================================================

def delete_legacy_inferencepool_crd(cluster: ClusterContext) -> None:
    """Remove the alpha InferencePool CRD so Istio only sees the v1 kind.

    Safe to repeat: a missing CRD is not an error.
    """
    sh.kubectl(
        "delete", f"--context={cluster.context}",
        LEGACY_INFERENCEPOOL_CRD,
        "--ignore-not-found",
    )


def install_inference_pool(cluster: ClusterContext, release: str, cfg: DemoConfig) -> None:
    """Install one InferencePool and its endpoint picker.

    Args:
        cluster: Target cluster.
        release: Helm release name, also the model server ``app`` label.
        cfg: Demo configuration with the gateway provider.
    """
    helm_install(
        cluster, release, INFERENCEPOOL_CHART_OCI, INFERENCE_CHART_VERSION,
        {
            HELM_KEY_MODEL_SERVER_LABEL: release,
            HELM_KEY_PROVIDER_NAME: cfg.gateway_provider,
        },
    )


def install_inference_extension(cluster: ClusterContext, cfg: DemoConfig) -> None:
    """Install the inference extension CRDs, simulated backends, and pools.

    The v1 CRDs must be applied before the alpha CRD is removed, and the
    alpha CRD must be gone before the pool charts are installed.

    Args:
        cluster: Target cluster.
        cfg: Demo configuration.

    Raises:
        RuntimeError: If the local simulated deployment manifest is missing.
    """
    console.print(Panel.fit(f"Setting up Inference Extension in context: {cluster.context}", style="bold blue"))
    sim_deployment = require_asset(cfg, ASSET_GPT5_SIM_DEPLOYMENT, "simulated deployment manifest")

    kubectl_apply(cluster, GATEWAY_API_CRDS_URL)
    kubectl_apply(cluster, VLLM_SIM_DEPLOYMENT_URL)
    kubectl_apply(cluster, sim_deployment)
    kubectl_apply(cluster, INFERENCE_CRDS_URL)
    delete_legacy_inferencepool_crd(cluster)

    for release in MODEL_SERVER_RELEASES:
        console.print(f"[yellow]\u2139\ufe0f  Installing InferencePool {release}...[/yellow]")
        install_inference_pool(cluster, release, cfg)
    console.print(f"[green]\u2705 Inference Extension installed in {cluster.context}[/green]")


# ============================================================================
# Istio inference routing
# ============================================================================

def configure_mesh_inference(cluster: ClusterContext, cfg: DemoConfig) -> None:
    """Wire Istio to the endpoint pickers and install body-based routing.

    Args:
        cluster: Target cluster.
        cfg: Demo configuration.

    Raises:
        RuntimeError: If a local manifest is missing.
    """
    console.print(Panel.fit(f"Configuring Istio Inference in context: {cluster.context}", style="bold blue"))
    epp_destination_rule = require_asset(cfg, ASSET_GPT5_EPP_DR, "EPP destination rule manifest")
    httproute = require_asset(cfg, ASSET_HTTPROUTE, "HTTPRoute manifest")

    # Both EPPs serve self-signed TLS
    kubectl_apply(cluster, ISTIO_DESTINATION_RULE_URL)
    kubectl_apply(cluster, epp_destination_rule)
    kubectl_apply(cluster, ISTIO_GATEWAY_URL)

    helm_install(
        cluster, HELM_RELEASE_BBR, BBR_CHART_OCI, INFERENCE_CHART_VERSION,
        {HELM_KEY_PROVIDER_NAME: cfg.bbr_provider},
    )

    kubectl_apply(cluster, httproute)
    console.print(f"[green]\u2705 Istio inference routing configured in {cluster.context}[/green]")
