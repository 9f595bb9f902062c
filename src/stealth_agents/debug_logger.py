"""
Debug output for stealth simulations.

Provides structured, per-tick debug lines for following what each agent is
doing and why, plus a JSON summary at the end of a run.

Verbosity levels:
    0: disabled (default)
    1: per-tick summary: every agent's mode and recognition flag
    2: full detail: per-agent position/heading/goal/timers + mode changes

All output lines are prefixed with ``[stealth:debug]`` so they can be grepped
from mixed output.
"""

from __future__ import annotations

import json
import math
import sys
from dataclasses import dataclass, field
from typing import Any, Optional

from .types import Cell, KnockoutSignal

# ---------------------------------------------------------------------------
# Per-agent tick record
# ---------------------------------------------------------------------------


@dataclass
class AgentTickRecord:
    """Snapshot of one agent's state for a single tick."""

    agent_id: str
    mode: str
    position: Cell
    heading: float
    recognized: bool
    goal: Optional[Cell] = None
    visibility: float = 0.0
    lost: float = 0.0


# ---------------------------------------------------------------------------
# Mode change history
# ---------------------------------------------------------------------------


@dataclass
class ModeEvent:
    """One mode-change event."""

    step: int
    agent_id: str
    old_mode: str
    new_mode: str


@dataclass
class KnockoutEvent:
    step: int
    source_id: str
    target_id: str


# ---------------------------------------------------------------------------
# DebugLogger, the main interface
# ---------------------------------------------------------------------------


class DebugLogger:
    """Collects and emits structured debug output each tick.

    The simulation calls :meth:`record_agent_tick` for each agent after it
    updates and :meth:`flush_tick` once both agents are done.

    Parameters
    ----------
    level : int
        Verbosity level (1 or 2).
    output : file-like, optional
        Where to write output. Defaults to ``sys.stderr``.
    """

    PREFIX = "[stealth:debug]"

    def __init__(self, level: int = 1, output: Any = None) -> None:
        self.level = level
        self._out = output or sys.stderr

        # Per-tick accumulator, cleared on flush
        self._tick_records: list[AgentTickRecord] = []
        self._current_step: int = 0

        # Persistent trackers
        self._mode_events: list[ModeEvent] = []
        self._knockouts: list[KnockoutEvent] = []
        self._last_modes: dict[str, str] = {}
        self._recognitions: dict[str, int] = {}

    @property
    def mode_events(self) -> list[ModeEvent]:
        return list(self._mode_events)

    @property
    def knockouts(self) -> list[KnockoutEvent]:
        return list(self._knockouts)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_agent_tick(
        self,
        step: int,
        agent_id: str,
        mode: str,
        position: Cell,
        heading: float,
        recognized: bool,
        goal: Optional[Cell] = None,
        visibility: float = 0.0,
        lost: float = 0.0,
    ) -> None:
        """Record a single agent's tick data."""
        self._current_step = max(self._current_step, step)
        self._tick_records.append(
            AgentTickRecord(
                agent_id=agent_id,
                mode=mode,
                position=position,
                heading=heading,
                recognized=recognized,
                goal=goal,
                visibility=visibility,
                lost=lost,
            )
        )

        prev_mode = self._last_modes.get(agent_id)
        if prev_mode is not None and prev_mode != mode:
            self._mode_events.append(ModeEvent(step=step, agent_id=agent_id, old_mode=prev_mode, new_mode=mode))
        self._last_modes[agent_id] = mode

        if recognized and agent_id not in self._recognitions:
            self._recognitions[agent_id] = step

    def record_knockout(self, signal: KnockoutSignal, step: int) -> None:
        self._knockouts.append(KnockoutEvent(step=step, source_id=signal.source_id, target_id=signal.target_id))
        prev_mode = self._last_modes.get(signal.target_id)
        if prev_mode is not None and prev_mode != "down":
            self._mode_events.append(
                ModeEvent(step=step, agent_id=signal.target_id, old_mode=prev_mode, new_mode="down")
            )
        self._last_modes[signal.target_id] = "down"

    # ------------------------------------------------------------------
    # Flush (called once per tick after all agents stepped)
    # ------------------------------------------------------------------

    def flush_tick(self) -> None:
        """Emit debug output for the current tick and reset accumulators."""
        step = self._current_step
        if not self._tick_records:
            return

        # --- Level 1: one line with every agent's mode ---
        parts = [f"t={step}"]
        for rec in sorted(self._tick_records, key=lambda r: r.agent_id):
            flag = "!" if rec.recognized else ""
            parts.append(f"{rec.agent_id}:{rec.mode}{flag}")
        self._emit(" ".join(parts))

        # --- Level 2: per-agent detail + mode history ---
        if self.level >= 2:
            for rec in sorted(self._tick_records, key=lambda r: r.agent_id):
                goal = f" goal={rec.goal}" if rec.goal else ""
                self._emit(
                    f"  a={rec.agent_id} {rec.mode} "
                    f"({rec.position[0]},{rec.position[1]}) "
                    f"hdg={math.degrees(rec.heading):.0f} "
                    f"vis={rec.visibility:.2f} lost={rec.lost:.2f}{goal}"
                )
            for ev in (e for e in self._mode_events if e.step == step):
                self._emit(f"  mode_change a={ev.agent_id} {ev.old_mode}->{ev.new_mode}")
            for ko in (k for k in self._knockouts if k.step == step):
                self._emit(f"  knockout {ko.source_id}->{ko.target_id}")

        self._tick_records.clear()

    # ------------------------------------------------------------------
    # End-of-run summary
    # ------------------------------------------------------------------

    def summary(self) -> dict[str, Any]:
        return {
            "total_steps": self._current_step,
            "mode_changes": [
                {"step": ev.step, "agent_id": ev.agent_id, "old_mode": ev.old_mode, "new_mode": ev.new_mode}
                for ev in self._mode_events
            ],
            "first_recognition": dict(sorted(self._recognitions.items())),
            "knockouts": [{"step": k.step, "source": k.source_id, "target": k.target_id} for k in self._knockouts],
            "final_modes": dict(sorted(self._last_modes.items())),
        }

    def emit_summary(self) -> None:
        """Emit the run summary as one JSON line prefixed with ``[stealth:debug:summary]``."""
        line = json.dumps(self.summary(), separators=(",", ":"))
        print(f"[stealth:debug:summary] {line}", file=self._out, flush=True)

    def reset(self) -> None:
        self._tick_records.clear()
        self._mode_events.clear()
        self._knockouts.clear()
        self._last_modes.clear()
        self._recognitions.clear()
        self._current_step = 0

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _emit(self, msg: str) -> None:
        print(f"{self.PREFIX} {msg}", file=self._out, flush=True)
