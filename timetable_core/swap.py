"""Slot moves and swaps for the grid editor.

Both operations work on the flat per-day class lists of a Timetable and
never on a projected grid; re-project after each call to refresh the view.
They follow a command style: the input timetable is never mutated, a
mutation returns a deep copy and a no-op returns the input object itself.

A ClassEntry carries a single period for all of its targets, so moving or
swapping a combined class for one target class moves it for every target.
"""
from __future__ import annotations

import copy
import logging
import typing as t
from enum import Enum

from timetable_core.models import ClassEntry, SlotAddress, Timetable, TimetableDay

logger = logging.getLogger(__name__)


def locate(timetable: Timetable, address: SlotAddress) -> t.Optional[tuple[int, int]]:
    """Find the class entry occupying ``address``.

    When several entries share the cell, the last one in list order is
    returned: it is the one the projected grid shows.

    :return: ``(day_index, class_index)`` into ``timetable.days`` and that
        day's ``classes``, or None when the slot is empty or the address has
        no period.
    """
    if address.period is None:
        return None
    found = None
    for day_index, day in enumerate(timetable.days):
        if day.day != address.day:
            continue
        for class_index, entry in enumerate(day.classes):
            if entry.period.period == address.period and address.label in entry.targets:
                found = day_index, class_index
    return found


def relocate_class(timetable: Timetable, source: SlotAddress, destination: SlotAddress) -> Timetable:
    """Drag the class at ``source`` onto ``destination``.

    The moved entry takes the destination period. Its old list position is
    replaced by an empty placeholder so the day lists keep their shape. A
    class already at the destination is overwritten; an empty destination
    gets the entry appended to its day.
    """
    if source == destination:
        return timetable
    if destination.period is None:
        logger.warning("Ignoring drop of %s onto %s: destination has no period", source, destination)
        return timetable

    found = locate(timetable, source)
    if found is None:
        logger.warning("Ignoring drop from %s: no class there", source)
        return timetable
    occupant = locate(timetable, destination)
    if occupant == found:
        return timetable

    updated = copy.deepcopy(timetable)
    source_day, source_index = found
    moved = updated.days[source_day].classes[source_index]

    updated.days[source_day].classes[source_index] = ClassEntry.empty()
    moved.period.period = destination.period

    if occupant is not None:
        target_day, target_index = occupant
        updated.days[target_day].classes[target_index] = moved
    else:
        day = updated.day(destination.day)
        if day is None:
            day = TimetableDay(day=destination.day)
            updated.days.append(day)
        day.classes.append(moved)

    logger.info("Moved %s from %s to %s", moved.subject, source, destination)
    return updated


def swap_classes(timetable: Timetable, first: SlotAddress, second: SlotAddress) -> Timetable:
    """Exchange the classes at two addresses.

    Both entries trade their period index and their positions in the day
    lists; every other attribute stays with its entry. Nothing changes
    unless both addresses resolve to distinct entries.
    """
    first_found = locate(timetable, first)
    second_found = locate(timetable, second)
    if first_found is None or second_found is None:
        logger.warning("Swap of %s and %s aborted: both slots must hold a class", first, second)
        return timetable
    if first_found == second_found:
        return timetable

    updated = copy.deepcopy(timetable)
    (first_day, first_index), (second_day, second_index) = first_found, second_found
    first_classes = updated.days[first_day].classes
    second_classes = updated.days[second_day].classes
    first_entry = first_classes[first_index]
    second_entry = second_classes[second_index]

    first_entry.period.period, second_entry.period.period = second_entry.period.period, first_entry.period.period
    first_classes[first_index], second_classes[second_index] = second_entry, first_entry

    logger.info("Swapped %s at %s with %s at %s", first_entry.subject, first, second_entry.subject, second)
    return updated


class SelectionState(Enum):
    """State of the double-click selection."""
    IDLE = "IDLE"
    SELECTED = "SELECTED"


class SwapSelector:
    """Double-click one class, then another, to swap them.

    Double-clicking the selected class again clears the selection.
    Clicks on cells without a period are ignored.
    """

    def __init__(self) -> None:
        self.selected: t.Optional[SlotAddress] = None

    @property
    def state(self) -> SelectionState:
        return SelectionState.IDLE if self.selected is None else SelectionState.SELECTED

    def reset(self) -> None:
        self.selected = None

    def double_click(self, timetable: Timetable, address: SlotAddress) -> Timetable:
        """Feed one double-click and return the (possibly swapped) timetable."""
        if address.period is None:
            return timetable

        if self.selected is None:
            self.selected = address
            logger.debug("Selected %s", address)
            return timetable

        selected, self.selected = self.selected, None
        if selected == address:
            logger.debug("Deselected %s", address)
            return timetable
        return swap_classes(timetable, selected, address)
