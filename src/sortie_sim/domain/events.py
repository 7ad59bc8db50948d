"""Mission log entries and explainability events."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MissionLogEntry:
    phase: str
    message: str


@dataclass(frozen=True)
class FactorScope:
    kind: str  # "sortie" | "assignment" | ...
    id: str


@dataclass(frozen=True)
class FactorEvent:
    name: str
    phase: str
    value: float
    delta: str
    why: str
    scope: FactorScope


@dataclass()
class MissionLog:
    """Append-only narrative for one resolution."""

    _entries: list[MissionLogEntry] = field(default_factory=list)

    def add(self, phase: str, message: str) -> MissionLogEntry:
        entry = MissionLogEntry(phase=phase, message=message)
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple[MissionLogEntry, ...]:
        return tuple(self._entries)

    @property
    def lines(self) -> list[str]:
        return [entry.message for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)


@dataclass()
class FactorLog:
    scope: FactorScope
    events: list[FactorEvent] = None

    def __post_init__(self) -> None:
        if self.events is None:
            self.events = []

    def add(self, name: str, value: float, delta: str, why: str, phase: str) -> None:
        self.events.append(
            FactorEvent(
                name=name,
                value=value,
                delta=delta,
                why=why,
                phase=phase,
                scope=self.scope,
            )
        )
