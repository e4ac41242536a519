import itertools
import pytest
import pandas as pd
from wafermap.core.models import DieRecord, WaferGrid, Bounds, EMPTY_BOUNDS
from wafermap.enums import DieStatus, CellStatus

def die(x, y, bin_value=1, identifier="1") -> DieRecord:
    return DieRecord(x=x, y=y, identifier=identifier, bin_value=bin_value)

def test_status_is_derived_from_bin_value():
    assert die(0, 0, bin_value=1).status is DieStatus.PASS
    assert die(0, 0, bin_value=0).status is DieStatus.FAIL
    assert die(0, 0, bin_value=2).status is DieStatus.FAIL

def test_die_record_is_immutable():
    record = die(0, 0)
    with pytest.raises(AttributeError):
        record.bin_value = 5

def test_empty_grid_has_inverted_bounds():
    grid = WaferGrid()
    assert grid.is_empty
    assert grid.total_chips == 0
    assert grid.bounds() == EMPTY_BOUNDS
    assert not grid.bounds().is_valid
    assert list(grid.bounds().x_range()) == []
    assert list(grid.bounds().y_range_descending()) == []

def test_first_insert_initializes_bounds():
    grid = WaferGrid()
    grid.insert(die(-3, 7))
    assert grid.bounds() == Bounds(-3, -3, 7, 7)
    assert grid.bounds().width == 1
    assert grid.bounds().height == 1

def test_insert_updates_counters_and_lookup(scenario_grid):
    assert scenario_grid.total_chips == 3
    assert scenario_grid.pass_count == 1
    assert scenario_grid.fail_count == 2
    assert scenario_grid.lookup(0, 0).identifier == "1"
    assert scenario_grid.lookup(1, 1) is None
    assert scenario_grid.bounds() == Bounds(0, 1, 0, 1)

def test_duplicate_insert_overwrites_and_counts_events():
    grid = WaferGrid()
    grid.insert(die(2, 2, bin_value=1, identifier="A"))
    grid.insert(die(2, 2, bin_value=1, identifier="A"))
    assert grid.total_chips == 2
    assert grid.pass_count == 2
    assert len(grid) == 1

    grid.insert(die(2, 2, bin_value=4, identifier="B"))
    assert grid.total_chips == 3
    assert grid.pass_count == 2
    assert grid.lookup(2, 2).identifier == "B"
    assert len(grid) == 1

def test_bounds_are_order_independent():
    coords = [(0, 0), (-4, 2), (3, -5), (1, 1), (-2, 6)]
    expected = Bounds(-4, 3, -5, 6)
    for order in itertools.permutations(coords):
        grid = WaferGrid()
        for x, y in order:
            grid.insert(die(x, y))
        assert grid.bounds() == expected

def test_cell_status(ring_grid):
    assert ring_grid.cell_status(0, 0) is CellStatus.NO_DATA
    assert ring_grid.cell_status(-1, 1) is CellStatus.PASS
    assert ring_grid.cell_status(0, 1) is CellStatus.FAIL
    assert ring_grid.cell_status(5, 5) is CellStatus.NO_DATA

def test_contains_and_iteration(ring_grid):
    assert (1, 1) in ring_grid
    assert (0, 0) not in ring_grid
    assert len(list(ring_grid)) == 8

def test_to_dataframe_map_order(scenario_grid):
    df = scenario_grid.to_dataframe()
    assert isinstance(df, pd.DataFrame)
    assert list(df[['X_COORD', 'Y_COORD']].itertuples(index=False, name=None)) == [(0, 1), (0, 0), (1, 0)]
    assert df.loc[df['PART_ID'] == "1", 'STATUS'].iloc[0] == "P"

def test_to_dataframe_empty_grid():
    df = WaferGrid().to_dataframe()
    assert df.empty
    assert 'X_COORD' in df.columns
