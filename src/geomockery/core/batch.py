"""Batch generation: run a generator N times and tally the outcome."""

import logging
from typing import Callable, Iterator, Optional, Sequence

from ..config import (
    DEFAULT_MAX_AREA_M2,
    DEFAULT_MAX_LENGTH_M,
    DEFAULT_MIN_AREA_M2,
    DEFAULT_MIN_LENGTH_M,
    GEOMETRY_TYPES,
    MAX_ATTEMPTS,
)
from ..models import AttributeDefinition, GeneratedFeature, GenerationRequest
from .generators import generate_line, generate_point, generate_polygon
from .models import BatchResult, ResolvedConstraint
from .randomness import RandomValueProvider

logger = logging.getLogger(__name__)

# Progress is reported roughly this many times per batch
_PROGRESS_STEPS = 100


def iter_features(
    geometry_type: str,
    quantity: int,
    constraint: ResolvedConstraint,
    attributes: Sequence[AttributeDefinition],
    rng: RandomValueProvider,
    *,
    min_length: float = DEFAULT_MIN_LENGTH_M,
    max_length: float = DEFAULT_MAX_LENGTH_M,
    min_area: float = DEFAULT_MIN_AREA_M2,
    max_area: float = DEFAULT_MAX_AREA_M2,
    max_attempts: int = MAX_ATTEMPTS,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> Iterator[Optional[GeneratedFeature]]:
    """Yield one generated feature, or None for a failed attempt, per iteration.

    Stops early when ``should_cancel`` returns True between iterations.
    """
    if geometry_type == "point":
        def make():
            return generate_point(constraint, attributes, rng, max_attempts)
    elif geometry_type == "line":
        def make():
            return generate_line(constraint, attributes, rng, min_length, max_length, max_attempts)
    elif geometry_type == "polygon":
        def make():
            return generate_polygon(constraint, attributes, rng, min_area, max_area, max_attempts)
    else:
        raise ValueError(
            f"Unsupported geometry type '{geometry_type}'. Use one of: {', '.join(GEOMETRY_TYPES)}"
        )

    for i in range(quantity):
        if should_cancel is not None and should_cancel():
            logger.info("Generation cancelled after %d of %d features", i, quantity)
            return
        try:
            feature = make()
        except Exception as exc:
            logger.warning("Error generating %s feature %d: %s", geometry_type, i, exc)
            feature = None
        yield feature


def generate_batch(
    geometry_type: str,
    quantity: int,
    constraint: ResolvedConstraint,
    attributes: Sequence[AttributeDefinition],
    rng: RandomValueProvider,
    on_progress: Optional[Callable[[int, int], None]] = None,
    **options,
) -> BatchResult:
    """Generate ``quantity`` features, tolerating individual failures.

    Keyword options are passed to iter_features (length/area ranges,
    max_attempts, should_cancel). ``on_progress(done, total)`` is called about
    every hundredth of the batch and after the last feature. The result may
    hold zero features; deciding whether that is an error is up to the caller.
    """
    result = BatchResult(warnings=list(constraint.warnings))
    step = max(1, quantity // _PROGRESS_STEPS)
    for feature in iter_features(geometry_type, quantity, constraint, attributes, rng, **options):
        if feature is None:
            result.fail_count += 1
        else:
            result.features.append(feature)
            result.success_count += 1
        if on_progress is not None and (result.attempted % step == 0 or result.attempted == quantity):
            on_progress(result.attempted, quantity)

    result.cancelled = result.attempted < quantity
    logger.info(
        "Generation complete: %d success, %d failed%s",
        result.success_count, result.fail_count, " (cancelled)" if result.cancelled else "",
    )
    return result


def run_request(
    request: GenerationRequest,
    constraint: ResolvedConstraint,
    should_cancel: Optional[Callable[[], bool]] = None,
    on_progress: Optional[Callable[[int, int], None]] = None,
) -> BatchResult:
    """Run a validated GenerationRequest against a resolved area."""
    return generate_batch(
        request.geometry_type,
        request.quantity,
        constraint,
        request.attributes,
        RandomValueProvider(request.seed),
        on_progress=on_progress,
        should_cancel=should_cancel,
        max_attempts=request.max_attempts,
        **request_ranges(request),
    )


def request_ranges(request: GenerationRequest) -> dict[str, float]:
    """Length/area keyword options for iter_features from a request."""
    options: dict[str, float] = {}
    if request.length_range is not None:
        options["min_length"] = request.length_range.min
        options["max_length"] = request.length_range.max
    if request.area_range is not None:
        options["min_area"] = request.area_range.min
        options["max_area"] = request.area_range.max
    return options
