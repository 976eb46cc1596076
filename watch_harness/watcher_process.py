"""Build, run and capture the external watcher under test."""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from pathlib import Path
from typing import IO, List, Optional, Sequence

from watch_harness.config import HarnessConfig
from watch_harness.errors import LaunchError

logger = logging.getLogger(__name__)


class WatcherProcess:
    """
    Owns one watcher subprocess and the buffer its stdout is captured into.

    Stdout is drained by a reader thread into a lock-guarded list, so the
    watcher never blocks on a full pipe.  ``terminate`` joins that thread,
    which makes every line written before exit visible to
    ``collected_output``.  Use it as a context manager to guarantee
    termination on every exit path.
    """

    def __init__(self, config: Optional[HarnessConfig] = None):
        self.config = config or HarnessConfig()
        self._process: Optional[subprocess.Popen] = None
        self._reader: Optional[threading.Thread] = None
        self._lines: List[str] = []
        self._lock = threading.Lock()
        self._built = False

    def __enter__(self) -> "WatcherProcess":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.terminate()

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def build(self) -> None:
        """Run the configured build command once."""

        command = self.config.build_command
        if self._built or not command:
            return
        logger.info("Building watcher: %s", " ".join(command))
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as exc:
            raise LaunchError(f"Unable to run build command {command[0]}: {exc}") from exc
        if result.returncode != 0:
            raise LaunchError(
                f"Build command exited with status {result.returncode}\n{result.stderr.strip()}"
            )
        self._built = True

    def start(self, watch_roots: Sequence[Path]) -> "WatcherProcess":
        """Spawn the watcher against ``watch_roots``."""

        if self._process is not None:
            raise LaunchError("Watcher has already been started")

        command = self.config.resolved_watcher_command() + [str(root) for root in watch_roots]
        logger.info("Starting watcher: %s", " ".join(command))
        try:
            self._process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as exc:
            raise LaunchError(f"Unable to start watcher {command[0]}: {exc}") from exc

        self._reader = threading.Thread(
            target=self._drain,
            args=(self._process.stdout,),
            name="watcher-stdout",
            daemon=True,
        )
        self._reader.start()

        if self.config.startup_grace > 0:
            time.sleep(self.config.startup_grace)
        return self

    def _drain(self, stream: IO[str]) -> None:
        # Undecodable bytes arrive as U+FFFD (errors="replace" above).
        with stream:
            for line in stream:
                with self._lock:
                    self._lines.append(line.rstrip("\n"))

    def terminate(self) -> None:
        """Stop the watcher.  Calling this more than once is a no-op."""

        process = self._process
        if process is None:
            return

        if process.poll() is None:
            logger.info("Terminating watcher (pid %d)", process.pid)
            process.terminate()
            try:
                process.wait(timeout=self.config.terminate_timeout)
            except subprocess.TimeoutExpired:
                logger.warning(
                    "Watcher ignored SIGTERM for %.1fs, killing it",
                    self.config.terminate_timeout,
                )
                process.kill()
                process.wait()

        if self._reader is not None:
            self._reader.join(timeout=self.config.terminate_timeout)
            if self._reader.is_alive():
                logger.warning("Watcher output reader did not finish; output may be partial")
            self._reader = None

    def collected_output(self) -> List[str]:
        """Snapshot of captured lines; complete once terminated."""

        with self._lock:
            return list(self._lines)
