"""Tests for move validation policies and path following."""

from rescuegrid.environment import (
    Cell,
    CellType,
    Direction,
    Grid,
    Position,
    RoadClassifier,
    RoadSource,
    WalkabilityProfile,
    grid_from_ascii,
)
from rescuegrid.movement import (
    MoveStatus,
    MoveValidator,
    Mover,
    PathFollower,
    PedestrianPolicy,
    VehiclePolicy,
)
from rescuegrid.pathfinding import find_path


def P(x: int, y: int) -> Position:
    return Position(x, y)


def occupancy(grid: Grid) -> set:
    return {cell.position for cell in grid.cells() if cell.occupied}


def vehicle_on(grid: Grid, start: Position, **policy_kwargs) -> tuple:
    validator = MoveValidator(grid, VehiclePolicy(**policy_kwargs))
    mover = Mover("amb-1", start)
    assert validator.place(mover) is True
    return validator, mover


def test_vehicle_accepts_road_step_and_transfers_occupancy():
    grid = Grid.filled(3, 1)
    validator, ambulance = vehicle_on(grid, P(0, 0))
    assert occupancy(grid) == {P(0, 0)}

    result = validator.try_move(ambulance, P(1, 0))
    assert result.status is MoveStatus.ACCEPTED
    assert result
    assert result.road_source is RoadSource.CELL_TYPE
    assert ambulance.position == P(1, 0)
    assert ambulance.facing is Direction.RIGHT
    assert occupancy(grid) == {P(1, 0)}


def test_vehicle_rejections_do_not_mutate_state():
    grid = grid_from_ascii([
        ".H.",
        ".R.",
        ". .",
    ])
    grid.set_cell(0, 2, Cell(type=CellType.ROAD, occupied=True))
    validator, ambulance = vehicle_on(grid, P(0, 1))
    before = occupancy(grid)

    cases = {
        P(-1, 1): MoveStatus.REJECTED_BOUNDS,
        P(0, 2): MoveStatus.REJECTED_OCCUPIED,
        P(1, 0): MoveStatus.REJECTED_FORBIDDEN_TERRAIN,
        P(1, 1): MoveStatus.REJECTED_IMPASSABLE,
        P(1, 2): MoveStatus.REJECTED_IMPASSABLE,  # empty slot
    }
    for target, expected in cases.items():
        result = validator.try_move(ambulance, target)
        assert result.status is expected, target
        assert not result
        assert result.reason
        assert ambulance.position == P(0, 1)
        assert occupancy(grid) == before


def test_vehicle_checks_short_circuit_in_order():
    # An occupied hospital tile reports occupancy first.
    grid = grid_from_ascii([".H"])
    grid.set_occupied(1, 0, True)
    validator, ambulance = vehicle_on(grid, P(0, 0))
    assert validator.validate(ambulance, P(1, 0)).status is MoveStatus.REJECTED_OCCUPIED


def test_vehicle_profile_is_consulted_last():
    grid = Grid.filled(3, 1)
    profile = WalkabilityProfile.from_rows([[True, False, True]])
    validator, ambulance = vehicle_on(grid, P(0, 0), profile=profile)
    result = validator.try_move(ambulance, P(1, 0))
    assert result.status is MoveStatus.REJECTED_IMPASSABLE
    assert result.reason == "blocked by vehicle profile"
    assert occupancy(grid) == {P(0, 0)}


def test_road_chain_prefers_classifier_then_layer_then_cell_type():
    grid = grid_from_ascii(["..#"])
    layer = WalkabilityProfile.from_rows([[True, False, True]])
    grid.set_profile("road", layer)

    by_layer = RoadClassifier()
    assert by_layer.classify(grid, 1, 0) == (False, RoadSource.LAYER)
    assert by_layer.classify(grid, 2, 0) == (True, RoadSource.LAYER)

    by_callable = RoadClassifier(classifier=lambda g, x, y: x == 1)
    assert by_callable.classify(grid, 1, 0) == (True, RoadSource.CLASSIFIER)

    by_type = RoadClassifier(layer_name=None)
    assert by_type.classify(grid, 1, 0) == (True, RoadSource.CELL_TYPE)
    assert RoadClassifier(layer_name="missing").classify(grid, 2, 0) == (False, RoadSource.CELL_TYPE)


def test_vehicle_rejects_non_road_from_layer():
    grid = Grid.filled(2, 1)
    grid.set_profile("road", WalkabilityProfile.from_rows([[True, False]]))
    validator, ambulance = vehicle_on(grid, P(0, 0), roads=RoadClassifier(layer_name="road"))
    result = validator.try_move(ambulance, P(1, 0))
    assert result.status is MoveStatus.REJECTED_IMPASSABLE
    assert result.road_source is RoadSource.LAYER


def test_vehicle_adjacency_requirement():
    grid = Grid.filled(4, 1)
    validator, ambulance = vehicle_on(grid, P(0, 0), require_adjacent=True)
    assert validator.try_move(ambulance, P(2, 0)).status is MoveStatus.REJECTED_NOT_ADJACENT
    assert validator.try_move_delta(ambulance, 1, 0).status is MoveStatus.ACCEPTED
    assert validator.try_step(ambulance, Direction.RIGHT).status is MoveStatus.ACCEPTED
    assert ambulance.position == P(2, 0)


def test_same_tile_is_a_no_op():
    grid = Grid.filled(2, 1)
    validator, ambulance = vehicle_on(grid, P(0, 0))
    result = validator.try_move(ambulance, P(0, 0))
    assert result.status is MoveStatus.NO_OP
    assert result.accepted
    assert occupancy(grid) == {P(0, 0)}


def test_place_fails_on_occupied_or_missing_tile():
    grid = grid_from_ascii([". "])
    validator = MoveValidator(grid, VehiclePolicy())
    first = Mover("a", P(0, 0))
    assert validator.place(first) is True
    assert first.holds_tile is True
    assert validator.place(Mover("b", P(0, 0))) is False
    assert validator.place(Mover("c", P(1, 0))) is False
    assert validator.place(Mover("d", P(5, 5))) is False
    validator.release(first)
    assert first.holds_tile is False
    assert occupancy(grid) == set()


def test_pedestrian_accepts_any_in_bounds_target():
    grid = grid_from_ascii([
        ".#H",
        "R. ",
    ])
    grid.set_occupied(0, 0, True)
    grid.set_default_profile(WalkabilityProfile.filled(3, 2, False))
    validator = MoveValidator(grid, PedestrianPolicy())
    rescuer = Mover("res-1", P(1, 1))
    before = occupancy(grid)

    for target in [P(1, 0), P(0, 0), P(2, 0), P(0, 1), P(2, 1)]:
        result = validator.try_move(rescuer, target)
        assert result.status is MoveStatus.ACCEPTED, target
        assert rescuer.position == target
    assert occupancy(grid) == before

    assert validator.try_move(rescuer, P(3, 0)).status is MoveStatus.REJECTED_BOUNDS
    assert rescuer.position == P(2, 1)


def test_pedestrian_place_claims_nothing():
    grid = Grid.filled(1, 1)
    validator = MoveValidator(grid, PedestrianPolicy())
    assert validator.place(Mover("res", P(0, 0))) is True
    assert occupancy(grid) == set()


def test_path_follower_walks_full_path():
    grid = Grid.filled(4, 4)
    validator, ambulance = vehicle_on(grid, P(0, 0))
    path = find_path(grid, P(0, 0), P(3, 3))
    follower = PathFollower(validator, ambulance, path)
    assert len(follower.remaining) == 6

    results = follower.run()
    assert len(results) == 6
    assert all(r.status is MoveStatus.ACCEPTED for r in results)
    assert follower.finished is True
    assert follower.advance() is None
    assert ambulance.position == P(3, 3)
    assert occupancy(grid) == {P(3, 3)}


def test_path_follower_stops_when_grid_changes():
    grid = Grid.filled(5, 1)
    validator, ambulance = vehicle_on(grid, P(0, 0))
    follower = PathFollower(validator, ambulance, find_path(grid, P(0, 0), P(4, 0)))

    assert follower.advance().status is MoveStatus.ACCEPTED
    # Another actor parks on the route after the path was computed.
    grid.set_occupied(3, 0, True)
    results = follower.run()
    assert [r.status for r in results] == [MoveStatus.ACCEPTED, MoveStatus.REJECTED_OCCUPIED]
    assert follower.blocked is True
    assert follower.remaining == [P(3, 0), P(4, 0)]
    assert ambulance.position == P(2, 0)

    # Re-plan fails on a single-lane road; the caller sees an empty path.
    assert find_path(grid, ambulance.position, P(4, 0)) == []


def test_path_follower_respects_max_steps():
    grid = Grid.filled(5, 1)
    validator, ambulance = vehicle_on(grid, P(0, 0))
    follower = PathFollower(validator, ambulance, find_path(grid, P(0, 0), P(4, 0)))
    assert len(follower.run(max_steps=2)) == 2
    assert ambulance.position == P(2, 0)


def test_debug_trace_reports_rejection(capsys):
    grid = grid_from_ascii([".H"])
    validator = MoveValidator(grid, VehiclePolicy(), debug=True)
    ambulance = Mover("amb-7", P(0, 0))
    validator.place(ambulance)
    validator.try_move(ambulance, P(1, 0))
    out = capsys.readouterr().out
    assert "[Move] amb-7 (vehicle) (0, 0) -> (1, 0)" in out
    assert "rejected_forbidden_terrain" in out


def test_road_only_toggle_switches_to_intrinsic_walkability():
    grid = grid_from_ascii([
        "...H",
        "R...",
    ])
    grid.set_profile("road", WalkabilityProfile.from_rows([[True, False, True, True], [True] * 4]))
    grid.set_occupied(1, 1, True)

    road_bound, ambulance = vehicle_on(grid, P(0, 0))
    result = road_bound.validate(ambulance, P(1, 0))
    assert result.status is MoveStatus.REJECTED_IMPASSABLE
    assert result.road_source is RoadSource.LAYER

    free_roaming = MoveValidator(grid, VehiclePolicy(road_only=False))
    result = free_roaming.validate(ambulance, P(1, 0))
    assert result.status is MoveStatus.ACCEPTED
    assert result.road_source is None

    rubble = free_roaming.validate(ambulance, P(0, 1))
    assert rubble.status is MoveStatus.REJECTED_IMPASSABLE
    assert rubble.reason == "rubble is not walkable"
    assert free_roaming.validate(ambulance, P(1, 1)).status is MoveStatus.REJECTED_OCCUPIED
    assert free_roaming.validate(ambulance, P(3, 0)).status is MoveStatus.REJECTED_FORBIDDEN_TERRAIN


def test_unplaced_mover_never_frees_another_vehicles_tile():
    grid = Grid.filled(2, 1)
    validator, parked = vehicle_on(grid, P(0, 0))
    stray = Mover("amb-2", P(0, 0))
    assert validator.place(stray) is False
    assert stray.holds_tile is False

    assert validator.try_move(stray, P(1, 0)).status is MoveStatus.ACCEPTED
    assert stray.holds_tile is True
    assert occupancy(grid) == {P(0, 0), P(1, 0)}

    validator.release(Mover("amb-9", P(0, 0)))
    assert occupancy(grid) == {P(0, 0), P(1, 0)}
    validator.release(stray)
    assert occupancy(grid) == {P(0, 0)}
    assert parked.position == P(0, 0)
