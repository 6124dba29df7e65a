"""Structured run logging and verbosity levels for datamap views."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import Any


class Verbosity(IntEnum):
    """Verbosity levels for console output."""

    DEFAULT = 0   # Results only
    VERBOSE = 1   # + per-stage counts
    DEBUG = 2     # + dropped ids, timing


@dataclass
class StageLog:
    """Per-stage counts for one run."""

    name: str
    input_count: int = 0
    output_count: int = 0
    dropped_ids: list[str] = field(default_factory=list)
    time_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "input_count": self.input_count,
            "output_count": self.output_count,
            "dropped_ids": list(self.dropped_ids),
            "time_seconds": self.time_seconds,
        }


@dataclass
class RunLog:
    """Structured log of one normalize/filter/group run.

    The dict format is::

        {
            "run_id": "20250101T120000Z",
            "stages": {
                "normalize": {"input_count": 9, "output_count": 8, ...},
                "filter": {...},
                "group": {...},
            },
            "total_time": 0.01,
        }
    """

    run_id: str = ""
    stages: dict[str, StageLog] = field(default_factory=dict)
    total_time: float = 0.0

    def get_or_create_stage(self, name: str) -> StageLog:
        """Get existing stage log or create a new one."""
        if name not in self.stages:
            self.stages[name] = StageLog(name=name)
        return self.stages[name]

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "stages": {name: stage.to_dict() for name, stage in self.stages.items()},
            "total_time": self.total_time,
        }


class DataMapLogger:
    """Structured logger for datamap runs.

    Writes JSONL log files to log_dir/ and optionally emits console
    output via Rich based on verbosity level.
    """

    def __init__(
        self,
        verbosity: Verbosity = Verbosity.DEFAULT,
        log_dir: Path | None = None,
    ):
        self.verbosity = verbosity
        self.log_dir = log_dir
        self.run_log = RunLog(
            run_id=datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"),
        )
        self._log_file = None
        self._log_path: Path | None = None
        self._stage_start: float = 0.0
        self._run_start: float = time.time()

        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            self._log_path = log_dir / f"{self.run_log.run_id}.jsonl"
            self._log_file = open(self._log_path, "a")

    @property
    def log_path(self) -> Path | None:
        return self._log_path

    def _write_event(self, event: dict[str, Any]) -> None:
        """Write a JSON event to the JSONL log file."""
        if self._log_file is not None:
            event["timestamp"] = datetime.now(timezone.utc).isoformat()
            self._log_file.write(json.dumps(event) + "\n")
            self._log_file.flush()

    def _console_print(self, message: str, min_verbosity: Verbosity) -> None:
        """Print to console if verbosity is high enough."""
        if self.verbosity >= min_verbosity:
            from rich.console import Console

            Console(stderr=True).print(message)

    # -- Stage events --

    def stage_start(self, name: str, input_count: int) -> None:
        """Log the start of a pipeline stage."""
        self._stage_start = time.time()
        stage = self.run_log.get_or_create_stage(name)
        stage.input_count = input_count

        self._write_event({
            "event": "stage_start",
            "stage": name,
            "input_count": input_count,
        })

    def stage_finish(self, name: str, output_count: int) -> None:
        """Log the completion of a pipeline stage."""
        elapsed = time.time() - self._stage_start
        stage = self.run_log.get_or_create_stage(name)
        stage.output_count = output_count
        stage.time_seconds = elapsed

        self._write_event({
            "event": "stage_finish",
            "stage": name,
            "input_count": stage.input_count,
            "output_count": output_count,
            "time_seconds": round(elapsed, 3),
        })

        self._console_print(
            f"  [bold]{name}:[/bold] {stage.input_count} in, {output_count} out",
            Verbosity.VERBOSE,
        )

    def record_dropped(self, name: str, system_id: str, reason: str) -> None:
        """Log that a system was left out of a stage's output."""
        stage = self.run_log.get_or_create_stage(name)
        stage.dropped_ids.append(system_id)

        self._write_event({
            "event": "system_dropped",
            "stage": name,
            "system_id": system_id,
            "reason": reason,
        })

        self._console_print(
            f"      [yellow]-[/yellow] {system_id} [dim]({reason})[/dim]",
            Verbosity.DEBUG,
        )

    # -- Run lifecycle --

    def run_finish(self) -> RunLog:
        """Finalize the run log and close the file."""
        self.run_log.total_time = time.time() - self._run_start

        self._write_event({
            "event": "run_finish",
            "total_time": round(self.run_log.total_time, 3),
            "stages": list(self.run_log.stages),
        })

        self._console_print(
            f"  [dim]done in {self.run_log.total_time:.3f}s[/dim]",
            Verbosity.DEBUG,
        )
        self.close()
        return self.run_log

    def close(self) -> None:
        """Close the log file if open."""
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None
