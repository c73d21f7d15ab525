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

"""Constants, dependency loading, and dep_value helper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_dependencies() -> dict:
    """Load pinned upstream chart and manifest references from dependencies.yaml.

    Returns:
        Parsed YAML content as a nested dictionary.
    """
    deps_file = Path(__file__).resolve().parent / "dependencies.yaml"
    with open(deps_file) as f:
        return yaml.safe_load(f)


DEPENDENCIES = load_dependencies()


def dep_value(*keys: str, default: Any = None) -> Any:
    """Safely traverse the DEPENDENCIES dict by key path.

    Args:
        *keys: Sequence of dictionary keys to traverse.
        default: Value to return if any key is missing.

    Returns:
        The value at the nested key path, or *default* if not found.
    """
    node = DEPENDENCIES
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


# -- kind --
KIND_CONTEXT_PREFIX = "kind-"
KIND_CONTROL_PLANE_SUFFIX = "-control-plane"
API_SERVER_PORT = 6443

# -- Istio source tree --
DEFAULT_REPO_NAME = "istio"
DEFAULT_REPO_URL = dep_value("istio", "repo_url", default="https://github.com/istio/istio.git")
DEFAULT_VERSION_URL = dep_value(
    "istio", "version_url", default="https://storage.googleapis.com/istio-build/dev/1.28-dev")
DEFAULT_HUB = dep_value("istio", "hub", default="gcr.io/istio-testing")
ISTIOCTL_PACKAGE = "./istioctl/cmd/istioctl"
REL_INTEG_SUITE = "prow/integ-suite-kind.sh"
INTEG_SUITE_TOPOLOGY = "MULTICLUSTER"

# -- Clusters --
DEFAULT_CLUSTER1 = "primary-1"
DEFAULT_CLUSTER2 = "primary-2"

# -- Istio install override keys --
ISTIO_KEY_TAG = "tag"
ISTIO_KEY_HUB = "hub"
ISTIO_KEY_INFERENCE_EXTENSION = "values.pilot.env.ENABLE_GATEWAY_API_INFERENCE_EXTENSION"
ISTIO_KEY_CLUSTER_NAME = "values.global.multiCluster.clusterName"

# -- Gateway API / inference extension --
GATEWAY_API_VERSION = dep_value("gateway_api", "version", default="v1.3.0")
GATEWAY_API_CRDS_URL = dep_value("gateway_api", "standard_install").format(version=GATEWAY_API_VERSION)
INFERENCE_CRDS_URL = dep_value("inference_extension", "manifests", "crds")
VLLM_SIM_DEPLOYMENT_URL = dep_value("inference_extension", "manifests", "vllm_sim_deployment")
ISTIO_DESTINATION_RULE_URL = dep_value("inference_extension", "manifests", "istio_destination_rule")
ISTIO_GATEWAY_URL = dep_value("inference_extension", "manifests", "istio_gateway")
INFERENCE_CHART_VERSION = dep_value("inference_extension", "chart_version", default="v1.0.0")
INFERENCEPOOL_CHART_OCI = dep_value("inference_extension", "charts", "inferencepool")
BBR_CHART_OCI = dep_value("inference_extension", "charts", "body_based_routing")
LEGACY_INFERENCEPOOL_CRD = (
    "customresourcedefinition.apiextensions.k8s.io/inferencepools.inference.networking.x-k8s.io"
)

# -- Helm releases --
HELM_RELEASE_BBR = "body-based-router"
MODEL_SERVER_RELEASES = ("vllm-llama3-8b-instruct", "vllm-gpt5-oss")

# -- Helm override keys --
HELM_KEY_MODEL_SERVER_LABEL = "inferencePool.modelServers.matchLabels.app"
HELM_KEY_PROVIDER_NAME = "provider.name"

# -- Local assets (relative to the assets directory) --
ASSET_GPT5_SIM_DEPLOYMENT = "vllm-gpt5-oss-sim-deployment.yaml"
ASSET_GPT5_EPP_DR = "gpt5-oss-epp-dr.yaml"
ASSET_HTTPROUTE = "httproute.yaml"
DEFAULT_TOPOLOGY_CONFIG = "multicluster-single-network.json"
LOCAL_MANIFESTS = (
    (ASSET_GPT5_SIM_DEPLOYMENT, "simulated deployment manifest"),
    (ASSET_GPT5_EPP_DR, "EPP destination rule manifest"),
    (ASSET_HTTPROUTE, "HTTPRoute manifest"),
)

# -- Smoke test --
INFERENCE_GATEWAY = "gateway/inference-gateway"
GATEWAY_ADDRESS_JSONPATH = "jsonpath={.status.addresses[0].value}"
DEFAULT_GATEWAY_PORT = 80
CHAT_COMPLETIONS_PATH = "/v1/chat/completions"
SMOKE_TEST_PAYLOAD = {
    "model": "food-review-2",
    "messages": [{"role": "user", "content": "What is the color of the sky?"}],
    "max_tokens": 100,
    "temperature": 0,
}

# -- Defaults --
DEFAULT_GATEWAY_PROVIDER = "none"
DEFAULT_BBR_PROVIDER = "istio"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_GATEWAY_ADDRESS_ATTEMPTS = 1
DEFAULT_GATEWAY_ADDRESS_POLL_SECONDS = 5

# -- Prerequisites --
REQUIRED_COMMANDS = ("kubectl", "helm", "kind", "docker", "go")
