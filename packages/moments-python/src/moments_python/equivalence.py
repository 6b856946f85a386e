"""Cross-validation of the incremental, batch and cached-vector paths.

Runs every statistic through all three implementations on the same data
and reports where they disagree, either in value (outside tolerance) or in
the kind of error raised. The batch path is the reference.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from moments_python import batch
from moments_python.cached import CachedVectorStatistics
from moments_python.config import load_moments_config
from moments_python.errors import InvalidDataError, StatsError
from moments_python.formulas import STATISTICS
from moments_python.incremental import IncrementalMoments

IMPLEMENTATIONS = ("incremental", "batch", "cached")


def _outcome(query) -> dict[str, Any]:
    try:
        return {"value": query()}
    except StatsError as e:
        return {"error": e.kind}


def _collect_outcomes(values) -> dict[str, dict[str, dict[str, Any]]]:
    """Query every statistic from every implementation."""
    values = batch.as_samples(values)
    invalid = {name: {"error": InvalidDataError.kind} for name in STATISTICS}

    incremental = IncrementalMoments()
    try:
        incremental.update_array(values)
    except InvalidDataError:
        incremental = None

    try:
        cached = CachedVectorStatistics(values)
    except InvalidDataError:
        cached = None

    results: dict[str, dict[str, dict[str, Any]]] = {}
    results["incremental"] = (
        {name: _outcome(getattr(incremental, name)) for name in STATISTICS}
        if incremental is not None
        else dict(invalid)
    )
    results["batch"] = {
        name: _outcome(lambda fn=getattr(batch, name): fn(values)) for name in STATISTICS
    }
    results["cached"] = (
        {name: _outcome(getattr(cached, name)) for name in STATISTICS}
        if cached is not None
        else dict(invalid)
    )
    return results


def cross_validate(
    values,
    rtol: float | None = None,
    atol: float | None = None,
) -> dict[str, Any]:
    """Compare all three implementations on one dataset.

    Args:
        values: Sample sequence
        rtol: Relative tolerance (default: config equivalence.rtol)
        atol: Absolute tolerance (default: config equivalence.atol)

    Returns:
        Dictionary with comparison results and any discrepancies
    """
    if rtol is None or atol is None:
        equivalence = load_moments_config().equivalence
        rtol = equivalence.rtol if rtol is None else rtol
        atol = equivalence.atol if atol is None else atol

    results = _collect_outcomes(values)
    reference = results["batch"]
    discrepancies = []

    for name in STATISTICS:
        ref = reference[name]
        for impl in IMPLEMENTATIONS:
            if impl == "batch":
                continue
            other = results[impl][name]
            if "error" in ref or "error" in other:
                if ref.get("error") != other.get("error"):
                    discrepancies.append({
                        "type": "outcome_mismatch",
                        "statistic": name,
                        "implementation": impl,
                        "batch": ref.get("error", ref.get("value")),
                        impl: other.get("error", other.get("value")),
                    })
                continue

            rv, ov = ref["value"], other["value"]
            if abs(ov - rv) > atol + rtol * abs(rv):
                discrepancies.append({
                    "type": "value_mismatch",
                    "statistic": name,
                    "implementation": impl,
                    "batch": rv,
                    impl: ov,
                    "diff": abs(ov - rv),
                })

    count = reference["count"].get("value", 0)
    report = {
        "aligned": len(discrepancies) == 0,
        "count": count,
        "statistic_count": len(STATISTICS),
        "discrepancy_count": len(discrepancies),
        "discrepancies": discrepancies,
        "results": results,
    }

    context = {"count": count, "rtol": rtol, "atol": atol, "discrepancy_count": len(discrepancies)}
    if report["aligned"]:
        logger.bind(context=context).debug("Implementations aligned")
    else:
        logger.bind(context=context).warning(
            f"Implementations disagree on {len(discrepancies)} statistic(s)"
        )
    return report
