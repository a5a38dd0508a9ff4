# -*- coding: utf-8 -*-
from __future__ import annotations

import typing as t
from dataclasses import replace

from timetable_core.grid import Grid, GridConfig, project_grid
from timetable_core.models import SlotAddress, Timetable
from timetable_core.swap import SelectionState, SwapSelector, relocate_class, swap_classes


# In-memory state of one editing session
# Persisting it back to the backend is up to the caller


class EditSession:
    """Holds the timetable being edited, its undo history and the selection."""

    def __init__(self, timetable: Timetable, config: GridConfig = GridConfig()) -> None:
        self.timetable = timetable
        self.config = config
        self.selector = SwapSelector()
        self.history: list[Timetable] = []

    @property
    def dirty(self) -> bool:
        return bool(self.history)

    @property
    def selection(self) -> t.Optional[SlotAddress]:
        return self.selector.selected

    @property
    def state(self) -> SelectionState:
        return self.selector.state

    def grid(self) -> Grid:
        """Project the current timetable.

        :return: A fresh grid for the session's configuration.
        """
        return project_grid(self.timetable, self.config)

    def _apply(self, updated: Timetable) -> bool:
        if updated is self.timetable:
            return False
        self.history.append(self.timetable)
        self.timetable = updated
        return True

    def double_click(self, address: SlotAddress) -> bool:
        """Select a class, or swap it with the one already selected.

        :param address: The double-clicked cell.
        :return: True when the timetable changed.
        """
        return self._apply(self.selector.double_click(self.timetable, address))

    def move(self, source: SlotAddress, destination: SlotAddress) -> bool:
        """Drag the class at source onto destination.

        :return: True when the timetable changed.
        """
        self.selector.reset()
        return self._apply(relocate_class(self.timetable, source, destination))

    def swap(self, first: SlotAddress, second: SlotAddress) -> bool:
        self.selector.reset()
        return self._apply(swap_classes(self.timetable, first, second))

    def undo(self) -> bool:
        """Restore the timetable as it was before the last change.

        :return: False when there is nothing to undo.
        """
        self.selector.reset()
        if not self.history:
            return False
        self.timetable = self.history.pop()
        return True

    def rename(self, name: str) -> None:
        self.timetable = replace(self.timetable, name=name)
