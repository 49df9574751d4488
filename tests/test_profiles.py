"""Tests for walkability profiles and the profile store."""

import pytest

from rescuegrid.environment import (
    ActorClass,
    Grid,
    Position,
    ProfileShapeError,
    WalkabilityProfile,
    grid_from_ascii,
    merge_profiles,
)


def test_out_of_bounds_is_never_walkable():
    profile = WalkabilityProfile.filled(2, 2, True)
    assert profile.is_walkable(1, 1) is True
    assert profile.is_walkable(2, 0) is False
    assert profile.is_walkable(0, -1) is False
    assert profile.is_blocked(5, 5) is True


def test_invalid_dimensions_raise():
    with pytest.raises(ProfileShapeError):
        WalkabilityProfile(-1, 2, [])
    with pytest.raises(ProfileShapeError):
        WalkabilityProfile(2, 2, [[True, True], [True]])
    with pytest.raises(ValueError):
        WalkabilityProfile.filled(3, -1)


def test_binary_layer_zero_means_passable():
    flat = WalkabilityProfile.from_binary_layer([0, 1, 0, 0, 2, 0], width=3, height=2)
    nested = WalkabilityProfile.from_binary_layer([[0, 1, 0], [0, 2, 0]], width=3, height=2)
    assert flat == nested
    assert flat.to_rows() == [[True, False, True], [True, False, True]]
    with pytest.raises(ProfileShapeError):
        WalkabilityProfile.from_binary_layer([0, 0, 0], width=2, height=2)


def test_layers_blocked_wins_over_walkable():
    profile = WalkabilityProfile.from_layers(
        2,
        2,
        walkable_layers=[[5, 5, 0, 5]],
        blocked_layers=[[0, 9, 0, 0]],
    )
    assert profile.to_rows() == [[True, False], [False, True]]
    assert WalkabilityProfile.from_layers(2, 1).to_rows() == [[False, False]]


def test_merge_is_intersection():
    base = WalkabilityProfile.from_rows([[True, True], [False, True]])
    hazard = WalkabilityProfile.from_rows([[True, False], [True, True]])
    merged = merge_profiles([base, hazard])
    assert merged.to_rows() == [[True, False], [False, True]]
    with pytest.raises(ProfileShapeError):
        merge_profiles([])
    with pytest.raises(ProfileShapeError):
        merge_profiles([base, WalkabilityProfile.filled(3, 2)])


def test_edits_return_new_profiles():
    original = WalkabilityProfile.filled(2, 2, True)
    edited = original.with_blocked([Position(0, 0), Position(7, 7)])
    assert original.is_walkable(0, 0) is True
    assert edited.is_walkable(0, 0) is False
    assert edited.with_walkable([Position(0, 0)]) == original


def test_actor_profiles_from_cell_types():
    grid = grid_from_ascii([".HR", "B# "])
    pedestrian = WalkabilityProfile.for_actor(grid, ActorClass.PEDESTRIAN)
    vehicle = WalkabilityProfile.for_actor(grid, ActorClass.VEHICLE)
    assert pedestrian.to_rows() == [[True, True, False], [False, False, False]]
    assert vehicle.to_rows() == [[True, False, False], [False, False, False]]


def test_store_set_get_remove_and_default():
    grid = Grid(2, 2)
    vehicle = WalkabilityProfile.filled(2, 2, False)
    grid.set_profile("vehicle", vehicle)
    assert grid.get_profile("vehicle") is vehicle
    assert grid.profile_names() == ["vehicle"]
    grid.set_profile("vehicle", None)
    assert grid.get_profile("vehicle") is None
    grid.set_profile("missing", None)  # removing an absent entry is fine
    assert grid.get_default_profile() is None
    grid.set_default_profile(vehicle)
    assert grid.get_default_profile() is vehicle
