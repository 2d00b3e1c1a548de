"""Player development: monthly growth toward potential and age-related decline.

Growth scales with headroom (potential - skill) so it is fast for raw young
players and slows near the cap.  Decline starts after the peak age and grows
with every year past it.  Both are deterministic.
"""

from __future__ import annotations

from datetime import date, datetime

from matchday.models.team import Player

# Players grow until this age, hold until DECLINE_AGE, then decline.
PEAK_AGE = 27
DECLINE_AGE = 30

# Monthly growth = GROWTH_RATE * headroom / 99, at least 1 while headroom remains.
GROWTH_RATE = 4.0

# Yearly decline per year past DECLINE_AGE, spread over twelve months.
DECLINE_PER_YEAR = 1.5

MIN_SKILL = 1


def monthly_growth(player: Player, on: date | datetime) -> int:
    """Skill points ``player`` gains this month (0 once past peak age)."""
    if player.age(on) >= PEAK_AGE:
        return 0
    headroom = player.potential - player.skill
    if headroom <= 0:
        return 0
    # Younger players develop faster: x1.5 at 17, x1.0 at 26
    youth = 1.0 + max(0, PEAK_AGE - 1 - player.age(on)) / 18
    delta = round(GROWTH_RATE * (headroom / 99.0) * youth)
    return min(headroom, max(1, delta))


def monthly_degrowth(player: Player, on: date | datetime) -> int:
    """Skill points ``player`` loses this month (0 before DECLINE_AGE)."""
    years_past = player.age(on) - DECLINE_AGE
    if years_past < 0:
        return 0
    # Accumulate fractional decline: a whole point falls on the months where
    # the running total crosses an integer.
    month = on.month
    yearly = DECLINE_PER_YEAR * (years_past + 1)
    before = int(yearly * (month - 1) / 12)
    after = int(yearly * month / 12)
    return min(player.skill - MIN_SKILL, after - before)


def apply_monthly_growth(player: Player, on: date | datetime) -> int:
    """Raise ``player.skill`` in place; returns the points gained."""
    delta = monthly_growth(player, on)
    player.skill += delta
    return delta


def apply_monthly_degrowth(player: Player, on: date | datetime) -> int:
    """Lower ``player.skill`` in place; returns the points lost."""
    delta = monthly_degrowth(player, on)
    player.skill -= delta
    return delta
