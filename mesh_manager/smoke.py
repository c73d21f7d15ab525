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

"""Smoke test request against the inference gateway."""

from __future__ import annotations

import requests
import sh
from rich.panel import Panel
from tenacity import retry, retry_if_result, stop_after_attempt, wait_fixed

from mesh_manager import console
from mesh_manager.config import ClusterContext, DemoConfig
from mesh_manager.constants import (
    CHAT_COMPLETIONS_PATH,
    GATEWAY_ADDRESS_JSONPATH,
    INFERENCE_GATEWAY,
    SMOKE_TEST_PAYLOAD,
)


def use_context(cluster: ClusterContext) -> None:
    """Make *cluster* the current kubectl context."""
    sh.kubectl("config", "use-context", cluster.context)


def _read_gateway_address() -> str:
    return str(sh.kubectl("get", INFERENCE_GATEWAY, "-o", GATEWAY_ADDRESS_JSONPATH)).strip()


def gateway_address(cfg: DemoConfig) -> str:
    """Read the external address assigned to the inference gateway.

    The status is read ``cfg.gateway_address_attempts`` times at most; the
    default of one read does not wait for the address to be populated.

    Args:
        cfg: Demo configuration with the polling settings.

    Returns:
        The gateway address.

    Raises:
        RuntimeError: If the gateway has no address after the last read.
    """
    poll = retry(
        stop=stop_after_attempt(cfg.gateway_address_attempts),
        wait=wait_fixed(cfg.gateway_address_poll_seconds),
        retry=retry_if_result(lambda address: not address),
        retry_error_callback=lambda state: state.outcome.result(),
    )(_read_gateway_address)
    address = poll()
    if not address:
        raise RuntimeError(f"{INFERENCE_GATEWAY} has no address in .status.addresses yet")
    return address


def send_inference_request(address: str, cfg: DemoConfig) -> requests.Response:
    """Send the chat completion request and print the raw response.

    The response is shown for manual inspection and is not validated.

    Args:
        address: Gateway address.
        cfg: Demo configuration with port and timeout.

    Returns:
        The HTTP response.

    Raises:
        RuntimeError: If the request cannot be sent.
    """
    url = f"http://{address}:{cfg.gateway_port}{CHAT_COMPLETIONS_PATH}"
    console.print(f"[yellow]\u2139\ufe0f  POST {url}[/yellow]")
    try:
        resp = requests.post(url, json=SMOKE_TEST_PAYLOAD, timeout=cfg.request_timeout)
    except requests.RequestException as err:
        raise RuntimeError(f"Smoke test request to {url} failed: {err}") from err

    console.print(f"HTTP {resp.status_code} {resp.reason}")
    for name, value in resp.headers.items():
        console.print(f"{name}: {value}", markup=False, highlight=False)
    console.print(resp.text, markup=False, highlight=False)
    return resp


def run_smoke_test(cluster: ClusterContext, cfg: DemoConfig) -> requests.Response:
    """Switch to *cluster* and send one request through its inference gateway.

    Args:
        cluster: Cluster whose gateway receives the request.
        cfg: Demo configuration.

    Returns:
        The HTTP response.
    """
    console.print(Panel.fit(f"Smoke testing inference gateway in {cluster.context}", style="bold blue"))
    use_context(cluster)
    return send_inference_request(gateway_address(cfg), cfg)
