"""Top-level application orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from activity.local_host import disambiguated_title
from activity.settings import ApplicationSettings, load_application_settings
from activity.timestamps import Clock, utc_now
from core.activity_tracker import ActivityTracker
from core.event_bus import EventBus
from core.policy_runtime import load_effective_config
from core.state_manager import ActivityState


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    settings: ApplicationSettings
    state: ActivityState
    bus: EventBus
    tracker: ActivityTracker


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None, clock: Clock = utc_now) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.clock = clock

    def build(self) -> RuntimeBundle:
        config = load_effective_config(self.root)
        settings = load_application_settings(config)
        state = ActivityState(title_resolver=disambiguated_title, clock=self.clock)
        bus = EventBus()
        tracker = ActivityTracker(state=state, settings=settings, bus=bus, clock=self.clock)
        return RuntimeBundle(
            config=config,
            settings=settings,
            state=state,
            bus=bus,
            tracker=tracker,
        )
