"""
Errors for the aggregation engine.
"""
from .base import ReviewError


class AggregationError(ReviewError):
    """Recomputing a submission's aggregate failed.

    The review that triggered the recomputation stays submitted; the
    aggregate can be recomputed later from the stored reviews.
    """
