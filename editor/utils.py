"""Utility functions for the editor command line."""
import typing as t

import click

from timetable_core.grid import DEFAULT_ROSTER, GridConfig
from timetable_core.models import SlotAddress


def parse_roster(value: t.Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated roster, falling back to the default one.

    Args:
        value: Labels such as "ME1,IE1,CA1", or None

    Returns:
        Tuple of class labels in the given order, duplicates removed

    Raises:
        click.BadParameter: If the value names no label at all
    """
    if value is None:
        return DEFAULT_ROSTER

    labels = tuple(dict.fromkeys(label.strip() for label in value.split(",") if label.strip()))
    if not labels:
        raise click.BadParameter("Roster must name at least one class label.", param_hint="--roster")
    return labels


def _match_day(token: str, config: GridConfig) -> str:
    lowered = token.lower()
    for day in config.days:
        if day.lower() == lowered or (len(lowered) >= 3 and day.lower().startswith(lowered)):
            return day
    raise click.BadParameter(f"Unknown day '{token}'. Expected one of: {', '.join(config.days)}")


def parse_address(tokens: t.Sequence[str], config: GridConfig) -> SlotAddress:
    """Turn "DAY LABEL PERIOD" (or "DAY/LABEL/PERIOD") into a slot address.

    Args:
        tokens: The words typed for one address
        config: Grid shape the address must fall inside

    Returns:
        The matching SlotAddress; a period of "-" gives an address with no period

    Raises:
        click.BadParameter: If the day, label or period is not on the grid
    """
    if len(tokens) == 1 and "/" in tokens[0]:
        tokens = tokens[0].split("/")
    if len(tokens) != 3:
        raise click.BadParameter("An address is DAY LABEL PERIOD, e.g. 'Monday ME1 0'.")

    day_token, label, period_token = tokens
    day = _match_day(day_token, config)
    if label not in config.roster:
        raise click.BadParameter(f"Unknown class label '{label}'.")

    if period_token == "-":
        return SlotAddress(day, label, None)
    try:
        period = int(period_token)
    except ValueError:
        raise click.BadParameter(f"Period must be a number, got '{period_token}'.")
    if not 0 <= period < config.slots_per_day:
        raise click.BadParameter(f"Period must be between 0 and {config.slots_per_day - 1}, got {period}.")
    return SlotAddress(day, label, period)
