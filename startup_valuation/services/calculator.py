from ..schemas import MultipleSet, ValuationRange

def compute(revenue: float, multiple_set: MultipleSet) -> ValuationRange:
    """
    Revenue × multiples, with low/high defaulting to 0.8× / 1.2× of mid when
    the set does not carry them. No validation: non-positive inputs flow through.
    """
    return ValuationRange(
        low=revenue * multiple_set.effective_low(),
        mid=revenue * multiple_set.mid,
        high=revenue * multiple_set.effective_high(),
    )
