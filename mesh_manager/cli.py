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

"""
cli.py - CLI for the Istio multicluster inference demo.

Subcommands:
    setup       Composite workflow (all)
    install     Install components into one cluster (mesh, inference)
    configure   Configure Istio inference routing in one cluster (inference)
    link        Cross-cluster remote secrets (secrets, pair)
    smoke-test  Send one request through the cluster1 inference gateway
    delete      Delete demo resources (clusters)

Environment Variables:
    All configuration can be overridden via DEMO_* environment variables:
    - DEMO_CLUSTER1 / DEMO_CLUSTER2 (default: primary-1 / primary-2)
    - DEMO_HUB (default: gcr.io/istio-testing)
    - DEMO_ASSETS_DIR (default: current directory)
    - DEMO_VERSION_URL, DEMO_REPO_URL, DEMO_GATEWAY_PROVIDER, ...

Examples:
    # Full demo (bootstrap, install, link, smoke test)
    DEMO_ASSETS_DIR=manifests mesh-demo setup all

    # Re-run installs against clusters created earlier
    mesh-demo setup all --skip-bootstrap --tag 1.28-alpha.abc123

    # Only relink the clusters
    mesh-demo link secrets

    # Tear down
    mesh-demo delete clusters

For detailed usage information, run: mesh-demo --help
"""

from __future__ import annotations

import logging
import sys

import typer

from mesh_manager import console
from mesh_manager.commands import (
    configure_cmd,
    delete_cmd,
    install_cmd,
    link_cmd,
    setup_cmd,
)
from mesh_manager.commands._common import resolve_config
from mesh_manager.smoke import run_smoke_test
from mesh_manager.utils import require_command

app = typer.Typer(
    help="Istio multicluster Gateway API inference extension demo.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


@app.command("smoke-test")
def smoke_test() -> None:
    """Send one chat completion request through the cluster1 inference gateway."""
    require_command("kubectl")
    cfg = resolve_config()
    run_smoke_test(cfg.clusters()[0], cfg)


app.add_typer(setup_cmd.app, name="setup")
app.add_typer(install_cmd.app, name="install")
app.add_typer(configure_cmd.app, name="configure")
app.add_typer(link_cmd.app, name="link")
app.add_typer(delete_cmd.app, name="delete")


def main() -> None:
    """Console script entry point."""
    try:
        app()
    except Exception as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
