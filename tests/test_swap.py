"""Tests for moving and swapping classes between slots.

This module tests drag-and-drop relocation, the two-way swap and the
double-click selection state machine.
"""
import copy

from conftest import make_entry
from timetable_core.grid import count_filled, project_grid
from timetable_core.models import ClassEntry, SlotAddress, Timetable, TimetableDay
from timetable_core.swap import SelectionState, SwapSelector, locate, relocate_class, swap_classes


def test_locate_matches_day_period_and_target(timetable: Timetable) -> None:
    """Test resolving addresses to positions in the day lists."""
    assert locate(timetable, SlotAddress("Monday", "IE1", 0)) == (0, 0)
    assert locate(timetable, SlotAddress("Monday", "ME1", 1)) == (0, 1)
    assert locate(timetable, SlotAddress("Tuesday", "CA1", 2)) == (1, 0)
    assert locate(timetable, SlotAddress("Monday", "IE1", 1)) is None
    assert locate(timetable, SlotAddress("Monday", "ME1", None)) is None


def test_relocate_into_empty_slot(timetable: Timetable) -> None:
    """Test that a drag onto an empty slot moves the class and clears the source."""
    original = copy.deepcopy(timetable)
    source = SlotAddress("Monday", "ME1", 1)
    destination = SlotAddress("Monday", "ME1", 3)

    updated = relocate_class(timetable, source, destination)
    grid = project_grid(updated)

    assert grid["ME1"]["Monday"][3].subject == "Physics"
    assert grid["ME1"]["Monday"][1] is None
    # The source list position holds a placeholder instead of being removed
    assert updated.days[0].classes[1] == ClassEntry.empty()
    assert updated.days[0].classes[1].is_empty
    # No class lost or duplicated
    assert count_filled(grid) == count_filled(project_grid(original))
    # The input timetable is untouched
    assert timetable == original


def test_relocate_onto_occupied_slot_overwrites(timetable: Timetable) -> None:
    """Test that a drag onto a taken slot replaces its class."""
    updated = relocate_class(timetable, SlotAddress("Monday", "ME1", 1), SlotAddress("Monday", "ME1", 0))
    grid = project_grid(updated)

    assert grid["ME1"]["Monday"][0].subject == "Physics"
    assert grid["ME1"]["Monday"][1] is None
    # Math lived in the overwritten list position, so IE1 loses it too
    assert grid["IE1"]["Monday"][0] is None
    assert len(updated.days[0].classes) == len(timetable.days[0].classes)


def test_relocate_to_another_day(timetable: Timetable) -> None:
    """Test moving a class to a day the timetable has no entries for yet."""
    updated = relocate_class(timetable, SlotAddress("Tuesday", "CA1", 2), SlotAddress("Wednesday", "CA1", 0))
    grid = project_grid(updated)

    assert grid["CA1"]["Wednesday"][0].subject == "Programming"
    assert grid["CA1"]["Tuesday"][2] is None
    assert updated.day("Wednesday") is not None
    assert updated.day("Tuesday").classes == [ClassEntry.empty()]


def test_relocate_moves_combined_class_for_all_targets(timetable: Timetable) -> None:
    """Test that a class shared by two targets moves for both of them."""
    updated = relocate_class(timetable, SlotAddress("Monday", "ME1", 0), SlotAddress("Monday", "ME1", 2))
    grid = project_grid(updated)

    assert grid["ME1"]["Monday"][2].subject == "Math"
    assert grid["IE1"]["Monday"][2].subject == "Math"
    assert grid["IE1"]["Monday"][0] is None


def test_relocate_onto_itself_is_a_no_op(timetable: Timetable) -> None:
    """Test that dropping a class where it already is does not erase it."""
    address = SlotAddress("Monday", "ME1", 1)

    assert relocate_class(timetable, address, address) is timetable


def test_relocate_without_a_class_is_a_no_op(timetable: Timetable) -> None:
    """Test that dragging from an empty slot, or onto no slot, changes nothing."""
    empty = SlotAddress("Monday", "ME1", 3)
    occupied = SlotAddress("Monday", "ME1", 1)

    assert relocate_class(timetable, empty, occupied) is timetable
    assert relocate_class(timetable, occupied, SlotAddress("Monday", "ME1", None)) is timetable


def test_swap_exchanges_periods_and_positions(timetable: Timetable) -> None:
    """Test a two-way swap within one day."""
    first = SlotAddress("Monday", "ME1", 0)
    second = SlotAddress("Monday", "ME1", 1)

    updated = swap_classes(timetable, first, second)
    grid = project_grid(updated)

    assert grid["ME1"]["Monday"][0].subject == "Physics"
    assert grid["ME1"]["Monday"][1].subject == "Math"
    # Math is still a combined class, so IE1 follows it
    assert grid["IE1"]["Monday"][1].subject == "Math"
    assert grid["IE1"]["Monday"][0] is None

    monday = updated.days[0].classes
    assert [entry.subject for entry in monday] == ["Physics", "Math", "English"]
    assert monday[0].period.period == 0
    assert monday[1].period.period == 1


def test_swap_keeps_all_other_attributes(timetable: Timetable) -> None:
    """Test that only the period moves with a swap."""
    updated = swap_classes(timetable, SlotAddress("Monday", "ME1", 0), SlotAddress("Monday", "ME1", 1))

    math = updated.days[0].classes[1]
    assert math.instructors == ["Tanaka"]
    assert math.rooms == ["R101"]
    assert math.targets == ["ME1", "IE1"]
    assert math.period.length == 1


def test_swap_twice_restores_original(timetable: Timetable) -> None:
    """Test that swapping the same two addresses again undoes the swap."""
    first = SlotAddress("Monday", "ME1", 0)
    second = SlotAddress("Monday", "ME1", 1)

    twice = swap_classes(swap_classes(timetable, first, second), first, second)

    assert twice == timetable
    assert twice is not timetable


def test_swap_across_days() -> None:
    """Test swapping classes that live in different day lists."""
    monday = make_entry("Math", 0, ["ME3"])
    friday = make_entry("Art", 3, ["ME3"])
    timetable = Timetable(days=[
        TimetableDay(day="Monday", classes=[monday]),
        TimetableDay(day="Friday", classes=[friday]),
    ])

    updated = swap_classes(timetable, SlotAddress("Monday", "ME3", 0), SlotAddress("Friday", "ME3", 3))
    grid = project_grid(updated)

    assert grid["ME3"]["Monday"][0].subject == "Art"
    assert grid["ME3"]["Friday"][3].subject == "Math"


def test_swap_with_empty_slot_changes_nothing(timetable: Timetable) -> None:
    """Test that a swap needs a class at both addresses."""
    original = copy.deepcopy(timetable)

    result = swap_classes(timetable, SlotAddress("Monday", "ME1", 0), SlotAddress("Monday", "ME1", 3))

    assert result is timetable
    assert timetable == original


def test_swap_of_one_shared_class_changes_nothing(timetable: Timetable) -> None:
    """Test that two addresses of the same combined class do not swap."""
    result = swap_classes(timetable, SlotAddress("Monday", "ME1", 0), SlotAddress("Monday", "IE1", 0))

    assert result is timetable


def test_selector_select_then_swap(timetable: Timetable) -> None:
    """Test the double-click protocol from idle to selected and back."""
    selector = SwapSelector()
    assert selector.state is SelectionState.IDLE

    first = SlotAddress("Monday", "ME1", 0)
    result = selector.double_click(timetable, first)
    assert result is timetable
    assert selector.state is SelectionState.SELECTED
    assert selector.selected == first

    result = selector.double_click(timetable, SlotAddress("Monday", "ME1", 1))
    assert selector.state is SelectionState.IDLE
    assert project_grid(result)["ME1"]["Monday"][0].subject == "Physics"


def test_selector_double_click_same_class_deselects(timetable: Timetable) -> None:
    """Test that picking the selected class again only clears the selection."""
    original = copy.deepcopy(timetable)
    selector = SwapSelector()
    address = SlotAddress("Monday", "CA1", 0)

    selector.double_click(timetable, address)
    result = selector.double_click(timetable, address)

    assert selector.state is SelectionState.IDLE
    assert result is timetable
    assert timetable == original


def test_selector_ignores_cells_without_period(timetable: Timetable) -> None:
    """Test that a click outside any slot does nothing in either state."""
    selector = SwapSelector()
    nowhere = SlotAddress("Monday", "ME1", None)

    assert selector.double_click(timetable, nowhere) is timetable
    assert selector.state is SelectionState.IDLE

    selector.double_click(timetable, SlotAddress("Monday", "ME1", 0))
    assert selector.double_click(timetable, nowhere) is timetable
    assert selector.state is SelectionState.SELECTED


def test_selector_failed_swap_returns_to_idle(timetable: Timetable) -> None:
    """Test that an unresolvable second pick leaves the timetable unchanged."""
    selector = SwapSelector()

    selector.double_click(timetable, SlotAddress("Monday", "ME1", 0))
    result = selector.double_click(timetable, SlotAddress("Thursday", "ME1", 2))

    assert result is timetable
    assert selector.state is SelectionState.IDLE


def test_overlapping_cell_moves_the_visible_class() -> None:
    """Test that a drag from a shared cell moves the class the grid shows."""
    hidden = make_entry("Hidden", 0, ["ME1"])
    shown = make_entry("Shown", 0, ["ME1"])
    timetable = Timetable(days=[TimetableDay(day="Monday", classes=[hidden, shown])])
    source = SlotAddress("Monday", "ME1", 0)
    assert project_grid(timetable)["ME1"]["Monday"][0] is shown
    assert locate(timetable, source) == (0, 1)

    updated = relocate_class(timetable, source, SlotAddress("Monday", "ME1", 3))
    grid = project_grid(updated)

    assert grid["ME1"]["Monday"][3].subject == "Shown"
    assert grid["ME1"]["Monday"][0].subject == "Hidden"


def test_overlapping_cell_swaps_the_visible_class() -> None:
    hidden = make_entry("Hidden", 0, ["ME1"])
    shown = make_entry("Shown", 0, ["ME1"])
    other = make_entry("Other", 2, ["ME1"])
    timetable = Timetable(days=[TimetableDay(day="Monday", classes=[hidden, shown, other])])

    updated = swap_classes(timetable, SlotAddress("Monday", "ME1", 0), SlotAddress("Monday", "ME1", 2))

    assert [entry.subject for entry in updated.days[0].classes] == ["Hidden", "Other", "Shown"]
    assert updated.days[0].classes[2].period.period == 2


def test_relocate_combined_class_onto_its_other_target_is_a_no_op(timetable: Timetable) -> None:
    """Test that dropping ME1+IE1 Math from its ME1 cell onto its IE1 cell changes nothing."""
    result = relocate_class(timetable, SlotAddress("Monday", "ME1", 0), SlotAddress("Monday", "IE1", 0))

    assert result is timetable
