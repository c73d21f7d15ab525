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

"""mesh_manager - Istio multicluster inference demo orchestration package."""

from __future__ import annotations

import io
import logging
import threading
from collections.abc import Iterable
from contextlib import contextmanager

from rich.console import Console


class ThreadAwareConsole:
    """Console proxy that captures output per cluster while installs run in parallel.

    Outside ``capture`` every call goes to the real console. Inside it, the
    calling thread prints into a private buffer that ``replay`` later emits
    as one block under a rule naming the cluster.
    """

    def __init__(self, real_console: Console) -> None:
        object.__setattr__(self, "_real", real_console)
        object.__setattr__(self, "_local", threading.local())
        object.__setattr__(self, "_blocks", {})
        object.__setattr__(self, "_lock", threading.Lock())

    def __getattr__(self, name: str):
        target = getattr(self._local, "console", self._real)
        return getattr(target, name)

    @contextmanager
    def capture(self, cluster: str):
        """Buffer the current thread's output as the block for *cluster*."""
        buf = io.StringIO()
        self._local.console = Console(file=buf, stderr=False)
        try:
            yield
        finally:
            del self._local.console
            with self._lock:
                self._blocks[cluster] = buf.getvalue()

    def replay(self, clusters: Iterable[str]) -> None:
        """Print and discard the captured blocks in *clusters* order."""
        for cluster in clusters:
            with self._lock:
                text = self._blocks.pop(cluster, "")
            if text:
                self._real.rule(f"[bold]{cluster}[/bold]")
                self._real.print(text, end="", markup=False, highlight=False)


console = ThreadAwareConsole(Console(stderr=True))
logger = logging.getLogger("mesh_manager")
