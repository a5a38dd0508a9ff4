"""Projection of a timetable's flat day lists into the per-class editor grid.

The grid is addressed as ``grid[label][day][period]`` and every cell holds
either the ClassEntry scheduled there or None. The projection is a pure
function of its input: each call builds a fresh grid.
"""
from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass, field

from timetable_core.models import ClassEntry, SlotAddress, Timetable

logger = logging.getLogger(__name__)

DEFAULT_ROSTER: tuple[str, ...] = (
    "ME1", "IE1", "CA1",
    "ME2", "IE2", "CA2",
    "ME3", "IE3", "CA3",
    "ME4", "IE4", "CA4",
    "ME5", "IE5", "CA5",
)
DEFAULT_DAYS: tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
DEFAULT_SLOTS_PER_DAY = 4

Grid = dict[str, dict[str, list[t.Optional[ClassEntry]]]]


@dataclass(frozen=True)
class GridConfig:
    """Shape of the grid: which class labels, which days, how many slots a day."""
    roster: tuple[str, ...] = DEFAULT_ROSTER
    days: tuple[str, ...] = DEFAULT_DAYS
    slots_per_day: int = DEFAULT_SLOTS_PER_DAY

    def contains(self, address: SlotAddress) -> bool:
        return (
            address.label in self.roster
            and address.day in self.days
            and address.period is not None
            and 0 <= address.period < self.slots_per_day
        )


@dataclass
class Collision:
    """Two entries projected onto the same cell; ``winner`` is the one kept."""
    address: SlotAddress
    overwritten: ClassEntry
    winner: ClassEntry


@dataclass
class ProjectionDiagnostics:
    """Everything the projector silently drops or overwrites."""
    collisions: list[Collision] = field(default_factory=list)
    unknown_targets: list[tuple[str, str, ClassEntry]] = field(default_factory=list)
    out_of_range: list[tuple[str, ClassEntry]] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.collisions or self.unknown_targets or self.out_of_range)


def empty_grid(config: GridConfig = GridConfig()) -> Grid:
    """Build a grid covering the whole roster with every cell empty."""
    return {
        label: {day: [None] * config.slots_per_day for day in config.days}
        for label in config.roster
    }


def _placements(
        timetable: t.Optional[Timetable],
        config: GridConfig,
        diagnostics: t.Optional[ProjectionDiagnostics] = None,
) -> t.Iterator[tuple[SlotAddress, ClassEntry]]:
    """Yield every (address, entry) write in projection order.

    Order is day list order, then class list order, then target list order.
    Writes that have no cell in the grid are skipped and, when
    ``diagnostics`` is given, recorded there.
    """
    if timetable is None:
        return

    for day in timetable.days:
        day_known = day.day in config.days
        for entry in day.classes:
            index = entry.period.period
            if not day_known or not 0 <= index < config.slots_per_day:
                if entry.targets:
                    logger.debug("Dropping %s on %s at period %s: no such slot", entry.subject, day.day, index)
                    if diagnostics is not None:
                        diagnostics.out_of_range.append((day.day, entry))
                continue

            for target in entry.targets:
                if target not in config.roster:
                    logger.debug("Dropping %s for unknown class %s", entry.subject, target)
                    if diagnostics is not None:
                        diagnostics.unknown_targets.append((day.day, target, entry))
                    continue
                yield SlotAddress(day.day, target, index), entry


def project_grid(timetable: t.Optional[Timetable], config: GridConfig = GridConfig()) -> Grid:
    """Project a timetable into ``grid[label][day][period]``.

    Every class entry is written under each of its targets at its day and
    period. When two entries land on the same cell the last one written
    wins. Entries for labels outside the roster, days outside the
    configured week, or periods outside the slot range are dropped.

    :param timetable: The timetable to project, or None for "no data".
    :param config: The roster, days and slot count of the grid.
    :return: A freshly built grid.
    """
    grid = empty_grid(config)
    for address, entry in _placements(timetable, config):
        grid[address.label][address.day][address.period] = entry
    return grid


def diagnose(timetable: t.Optional[Timetable], config: GridConfig = GridConfig()) -> ProjectionDiagnostics:
    """Report the collisions and dropped writes a projection would hide."""
    diagnostics = ProjectionDiagnostics()
    written: dict[SlotAddress, ClassEntry] = {}
    for address, entry in _placements(timetable, config, diagnostics):
        previous = written.get(address)
        if previous is not None and previous is not entry:
            diagnostics.collisions.append(Collision(address=address, overwritten=previous, winner=entry))
        written[address] = entry
    return diagnostics


def cell(grid: Grid, address: SlotAddress) -> t.Optional[ClassEntry]:
    """Return the entry at ``address``, or None when empty or off the grid."""
    if address.period is None:
        return None
    slots = grid.get(address.label, {}).get(address.day)
    if slots is None or not 0 <= address.period < len(slots):
        return None
    return slots[address.period]


def count_filled(grid: Grid) -> int:
    return sum(1 for days in grid.values() for slots in days.values() for entry in slots if entry is not None)


def list_instructors(timetable: t.Optional[Timetable]) -> list[str]:
    """Unique instructor names in the order they first appear."""
    if timetable is None:
        return []
    seen: dict[str, None] = {}
    for day in timetable.days:
        for entry in day.classes:
            for name in entry.instructors:
                seen.setdefault(name, None)
    return list(seen)


def is_highlighted(entry: t.Optional[ClassEntry], instructor: str) -> bool:
    return bool(instructor and entry is not None and instructor in entry.instructors)


def filter_grid(grid: Grid, instructor: str) -> Grid:
    """Blank every cell the given instructor does not teach."""
    return {
        label: {
            day: [entry if is_highlighted(entry, instructor) else None for entry in slots]
            for day, slots in days.items()
        }
        for label, days in grid.items()
    }
