"""Itinerary distance aggregation.

Point-to-point distances come from an external routing provider; this
module only decides which legs make up a trip and sums them. For a round
trip with stops the loop is closed by routing back to pickup. The fare
calculator, not this module, applies the round-trip multiplier.
"""

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from fare_engine.core.exceptions import IncompleteRouteError
from fare_engine.itinerary import Itinerary, LegDistance, ServiceType, format_duration

logger = logging.getLogger(__name__)


class DistanceSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_distance: float = Field(ge=0)
    total_duration: float = Field(ge=0, description="Minutes")
    leg_count: int = Field(ge=0)
    return_leg_included: bool = False

    @property
    def duration_text(self) -> str:
        return format_duration(self.total_duration)


EMPTY_SUMMARY = DistanceSummary(total_distance=0.0, total_duration=0.0, leg_count=0)


def build_waypoints(itinerary: Itinerary) -> list[str]:
    """Ordered waypoints: pickup, stops, drop, and pickup again for a looped round trip."""
    stops = itinerary.active_stops
    waypoints = [itinerary.pickup, *stops, itinerary.drop]

    if itinerary.service_type == ServiceType.ROUND_TRIP and stops:
        waypoints.append(itinerary.pickup)

    return waypoints


def compute_distance(
    waypoints: Sequence[str],
    leg_distances: Sequence[LegDistance],
) -> DistanceSummary:
    """Sum leg distances and durations over consecutive waypoint pairs.

    Returns an all-zero summary when the first or last waypoint is blank;
    callers are expected to block submission of such itineraries.

    Raises:
        IncompleteRouteError: A consecutive pair has no leg.
    """
    if len(waypoints) < 2 or not waypoints[0].strip() or not waypoints[-1].strip():
        return EMPTY_SUMMARY

    legs = {(leg.from_index, leg.to_index): leg for leg in leg_distances}

    total_distance = 0.0
    total_duration = 0.0
    for index in range(len(waypoints) - 1):
        leg = legs.get((index, index + 1))
        if leg is None:
            raise IncompleteRouteError(
                f"No distance for leg {waypoints[index]!r} -> {waypoints[index + 1]!r}",
                details={"from_index": index, "to_index": index + 1},
            )
        total_distance += leg.distance
        total_duration += leg.duration

    summary = DistanceSummary(
        total_distance=total_distance,
        total_duration=total_duration,
        leg_count=len(waypoints) - 1,
        return_leg_included=len(waypoints) > 2 and waypoints[-1] == waypoints[0],
    )
    logger.debug(
        "Aggregated %d legs: %.2f distance, %s",
        summary.leg_count,
        summary.total_distance,
        summary.duration_text,
    )
    return summary


def aggregate_itinerary(
    itinerary: Itinerary,
    leg_distances: Sequence[LegDistance],
) -> DistanceSummary:
    """Aggregate the itinerary's legs, or zeros while pickup or drop is blank."""
    if not itinerary.pickup.strip() or not itinerary.drop.strip():
        return EMPTY_SUMMARY
    return compute_distance(build_waypoints(itinerary), leg_distances)
