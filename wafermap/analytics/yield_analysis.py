from dataclasses import dataclass
from wafermap.core.models import WaferGrid

def yield_rate(grid: WaferGrid) -> float:
    """
    Percentage of insert events classified as PASS.
    Returns exactly 0.0 for an empty grid.
    """
    if grid.total_chips <= 0:
        return 0.0
    return grid.pass_count / grid.total_chips * 100

@dataclass(frozen=True)
class YieldSummary:
    total_chips: int
    pass_count: int
    yield_rate: float

    @property
    def fail_count(self) -> int:
        return self.total_chips - self.pass_count

def summarize_yield(grid: WaferGrid) -> YieldSummary:
    return YieldSummary(
        total_chips=grid.total_chips,
        pass_count=grid.pass_count,
        yield_rate=yield_rate(grid),
    )
