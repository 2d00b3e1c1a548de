"""Create a Matchday save and drive the simulation for demo purposes.

Usage:
    python scripts/run_season.py seed            # Create a new save
    python scripts/run_season.py run [N]         # Run N stop-to-stop spans (default 1)
    python scripts/run_season.py status          # Print date, queue, and standings

Settings (seed, team count, calendar) come from MATCHDAY_* environment
variables.  The save lives in demo_matchday.json.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

from matchday.config import Settings
from matchday.core.generation import init_game_state, league_team_names
from matchday.core.match_engine import SkillWeightedSimulator
from matchday.core.runner import SimulationRunner
from matchday.core.scheduler import compute_standings
from matchday.core.season import SeasonLifecycle
from matchday.core.simulation import SimulationClock
from matchday.core.state import StateHandle

SAVE_PATH = Path(os.environ.get("MATCHDAY_SAVE", "demo_matchday.json"))


def _lifecycle(settings: Settings) -> SeasonLifecycle:
    return SeasonLifecycle(
        calendar=settings.season_calendar(),
        simulator=SkillWeightedSimulator(seed=settings.matchday_seed),
    )


def _load() -> StateHandle:
    if not SAVE_PATH.exists():
        print(f"No save at {SAVE_PATH}; run 'seed' first.")
        sys.exit(1)
    return StateHandle.from_json(SAVE_PATH.read_text())


def _save(handle: StateHandle) -> None:
    SAVE_PATH.write_text(handle.to_json(indent=2))


def seed(settings: Settings) -> None:
    state = init_game_state(
        league_team_names(settings.matchday_team_count),
        seed=settings.matchday_seed,
        lifecycle=_lifecycle(settings),
    )
    handle = StateHandle(state)
    _save(handle)
    print(f"Seeded {len(state.teams)} teams, {len(state.players)} players at {state.date}")


async def run(settings: Settings, spans: int) -> None:
    handle = _load()
    runner = SimulationRunner(handle, SimulationClock(_lifecycle(settings)))
    for _ in range(spans):
        state = await runner.run(settings.matchday_tick_interval_seconds)
        print(f"Stopped at {state.date} after {runner.ticks} ticks")
        if not state.event_queue:
            break
    _save(handle)


def status() -> None:
    state = _load().state
    print(f"Date: {state.date}")
    print(f"Queued events: {len(state.event_queue)}")
    for event in state.event_queue[:5]:
        print(f"  {event.date}  {event.type}")
    table = compute_standings(state.schedule_matches())
    for pos, row in enumerate(table, 1):
        print(
            f"{pos:>2}. {row['team']:<24} P{row['played']:>3} "
            f"GD{row['goal_diff']:>+4} Pts{row['points']:>4}"
        )


def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__)
        return

    settings = Settings()
    settings.configure_logging()

    cmd = sys.argv[1]
    if cmd == "seed":
        seed(settings)
    elif cmd == "run":
        n = int(sys.argv[2]) if len(sys.argv) > 2 else 1
        asyncio.run(run(settings, n))
    elif cmd == "status":
        status()
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)


if __name__ == "__main__":
    main()
