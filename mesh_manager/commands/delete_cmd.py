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

"""Delete subcommands (clusters)."""

from __future__ import annotations

import typer

from mesh_manager.commands._common import resolve_config
from mesh_manager.orchestrator import delete_clusters
from mesh_manager.utils import require_command

app = typer.Typer(help="Delete demo resources.")


@app.command()
def clusters() -> None:
    """Delete both kind clusters."""
    require_command("kind")
    delete_clusters(resolve_config())
