import pytest
from wafermap.core.models import DieRecord, WaferGrid
from wafermap.io.ingestion import build_wafer_grid

def prr_line(x, y, part_id, part_txt, hard_bin="1", soft_bin="1") -> str:
    """PRR line in the fixed column layout: X=7, Y=8, PART_ID=10, PART_TXT=11."""
    fields = ["PRR", "1", "0", "0", "110", str(hard_bin), str(soft_bin), str(x), str(y), "950", str(part_id), str(part_txt), ""]
    return "|".join(fields)

@pytest.fixture
def scenario_lines() -> list[str]:
    """Three dies: one pass at (0,0), fails at (1,0) and (0,1)."""
    return [
        "FAR|1|4",
        prr_line(0, 0, "1", "1.0"),
        prr_line(1, 0, "2", "0.0", hard_bin="5", soft_bin="5"),
        prr_line(0, 1, "3", "2.0", hard_bin="2", soft_bin="2"),
    ]

@pytest.fixture
def scenario_grid(scenario_lines) -> WaferGrid:
    return build_wafer_grid(scenario_lines).grid

@pytest.fixture
def ring_grid() -> WaferGrid:
    """A 3x3 box from (-1,-1) to (1,1) with the center missing and mixed outcomes."""
    grid = WaferGrid()
    part_id = 0
    for y in (1, 0, -1):
        for x in (-1, 0, 1):
            if (x, y) == (0, 0):
                continue
            part_id += 1
            grid.insert(DieRecord(x=x, y=y, identifier=str(part_id), bin_value=1 if (x + y) % 2 == 0 else 3))
    return grid

@pytest.fixture
def make_prr_line():
    return prr_line
