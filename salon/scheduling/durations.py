"""
Duration Aggregation

Sums the durations of the selected services into one booking length.
What happens to an id missing from the lookup is an explicit policy.
"""
import logging
from enum import Enum
from typing import Any, Iterable, Mapping

from .exceptions import UnknownServiceError

logger = logging.getLogger(__name__)


class MissingServicePolicy(str, Enum):
    IGNORE = "ignore"
    REJECT = "reject"


def _duration_of(service: Any) -> int:
    if isinstance(service, int):
        return service
    if isinstance(service, Mapping):
        return int(service.get("duration_minutes") or 0)
    return int(getattr(service, "duration_minutes", 0) or 0)


def aggregate_duration(
    service_ids: Iterable,
    services: Mapping[Any, Any],
    policy: MissingServicePolicy = MissingServicePolicy.IGNORE,
) -> int:
    """
    Total duration in minutes of the selected services.

    Args:
        service_ids: ordered selection (duplicates count once per occurrence)
        services: lookup of id -> service object, dict or plain duration
        policy: IGNORE counts a missing id as 0, REJECT raises

    Returns:
        int: total minutes; 0 for an empty selection. A 0 total means no
        booking is possible.

    Raises:
        UnknownServiceError: policy is REJECT and some ids are missing
    """
    policy = MissingServicePolicy(policy)
    total = 0
    missing = []

    for service_id in service_ids:
        service = services.get(service_id)
        if service is None:
            missing.append(service_id)
            continue
        total += _duration_of(service)

    if missing:
        if policy == MissingServicePolicy.REJECT:
            raise UnknownServiceError(missing)
        logger.warning(f"Ignoring unknown service id(s) while aggregating duration: {missing}")

    return total
