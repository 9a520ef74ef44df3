"""Tests for PointSampler and GridSample"""

import dataclasses
import math

import numpy as np
import pytest

from heatmap3d.core.errors import ConsistencyError, NotReadyError, OutOfRangeError, SampleError
from heatmap3d.core.registry import VariableRegistry
from heatmap3d.core.role_map import RoleMap
from heatmap3d.core.sampler import GridSample, PointSampler
from heatmap3d.core.types import ConsistencyReason, Role
from heatmap3d.core.validator import ConsistencyValidator
from heatmap3d.io.base import RawGrid
from heatmap3d.core.grid_variable import GridVariable
from tests.test_heatmap3d.mocks import make_variable


@pytest.fixture
def registry():
    return VariableRegistry()


@pytest.fixture
def role_map(registry):
    return RoleMap(registry)


@pytest.fixture
def sampler(role_map):
    return PointSampler(role_map, ConsistencyValidator(role_map))


@pytest.fixture
def mapped(registry, role_map):
    """Three distinct 10x10 variables; only the top color has headers."""
    height = make_variable(10, 10, label='height_var')
    top = make_variable(10, 10, label='top_var', fill=2.5,
                        row_headers=True, column_headers=True, header_prefix='top')
    side = make_variable(10, 10, label='side_var', fill=-1.0,
                         row_headers=True, column_headers=True, header_prefix='side')
    for role, variable in zip(Role.all_roles(), (height, top, side)):
        registry.add(variable)
        role_map.assign(role, variable)
    return height, top, side


class TestPointSamplerSuccess:
    """Test sampling a ready mapping."""

    @pytest.mark.parametrize('row, col', [(0, 0), (9, 9), (3, 7)])
    def test_in_range(self, mapped, sampler, row, col):
        sample = sampler.sample_at(row, col)

        assert sample.is_valid
        assert (sample.row, sample.col) == (row, col)
        assert sample.height_value == row * 100 + col
        assert sample.top_value == 2.5
        assert sample.side_value == -1.0
        assert sample.bin == 0

    def test_labels(self, mapped, sampler):
        sample = sampler.sample_at(1, 1)
        assert sample.height_label == 'height_var'
        assert sample.top_label == 'top_var'
        assert sample.side_label == 'side_var'
        assert sample.label(Role.SIDE_COLOR) == 'side_var'
        assert sample.value(Role.TOP_COLOR) == 2.5

    def test_header_resolution_skips_empty(self, mapped, sampler):
        """Height has no headers, so the top color headers are used."""
        sample = sampler.sample_at(4, 6)

        assert sample.height_row_header == ''
        assert sample.height_col_header == ''
        assert sample.top_row_header == 'topR4'
        assert sample.side_col_header == 'sideC6'
        assert sample.row_header == 'topR4'
        assert sample.col_header == 'topC6'

    def test_header_resolution_falls_through_to_side(self, registry, role_map, sampler):
        plain = make_variable(3, 3, label='plain')
        side = make_variable(3, 3, label='side', row_headers=True, header_prefix='s')
        registry.add(plain)
        registry.add(side)
        role_map.assign(Role.HEIGHT, plain)
        role_map.assign(Role.TOP_COLOR, plain)
        role_map.assign(Role.SIDE_COLOR, side)

        sample = sampler.sample_at(2, 0)

        assert sample.row_header == 'sR2'
        assert sample.col_header == ''

    def test_same_variable_in_all_roles(self, registry, role_map, sampler):
        variable = make_variable(10, 10, label='solo', row_headers=True, column_headers=True)
        registry.add(variable)
        for role in Role.all_roles():
            role_map.assign(role, variable)

        sample = sampler.sample_at(5, 2)

        assert sample.height_value == sample.top_value == sample.side_value == 502.0
        assert sample.height_row_header == sample.top_row_header == sample.side_row_header == 'R5'
        assert sample.row_header == 'R5'
        assert sample.col_header == 'C2'

    def test_nan_value_sampled(self, registry, role_map, sampler):
        variable = GridVariable(label='holes')
        variable.import_from(RawGrid.from_rows([[np.nan, 1.0], [2.0, 3.0]]))
        registry.add(variable)
        for role in Role.all_roles():
            role_map.assign(role, variable)

        sample = sampler.sample_at(0, 0)
        assert sample.is_valid
        assert math.isnan(sample.height_value)

    def test_sample_is_immutable(self, mapped, sampler):
        sample = sampler.sample_at(0, 0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample.height_value = 1.0

    def test_str(self, mapped, sampler):
        assert 'height_var' in str(sampler.sample_at(0, 1))


class TestPointSamplerFailures:
    """Test NotReady and OutOfRange."""

    @pytest.mark.parametrize('row, col', [(10, 0), (-1, 0), (0, 10), (0, -1), (100, 100)])
    def test_out_of_range(self, mapped, sampler, row, col):
        with pytest.raises(OutOfRangeError) as exc_info:
            sampler.sample_at(row, col)
        assert isinstance(exc_info.value, SampleError)
        assert (exc_info.value.rows, exc_info.value.cols) == (10, 10)

    def test_not_ready_wraps_consistency_error(self, sampler):
        with pytest.raises(NotReadyError) as exc_info:
            sampler.sample_at(0, 0)

        error = exc_info.value
        assert isinstance(error, SampleError)
        assert error.reason == ConsistencyReason.HEIGHT_UNASSIGNED_OR_INVALID
        assert isinstance(error.consistency_error, ConsistencyError)
        assert error.__cause__ is error.consistency_error

    def test_not_ready_on_dimension_mismatch(self, registry, role_map, sampler):
        big = make_variable(10, 10)
        small = make_variable(5, 5)
        registry.add(big)
        registry.add(small)
        role_map.assign(Role.HEIGHT, big)
        role_map.assign(Role.TOP_COLOR, big)
        role_map.assign(Role.SIDE_COLOR, small)

        with pytest.raises(NotReadyError) as exc_info:
            sampler.sample_at(0, 0)
        assert exc_info.value.reason == ConsistencyReason.DIMENSION_MISMATCH

    def test_not_ready_checked_before_range(self, sampler):
        with pytest.raises(NotReadyError):
            sampler.sample_at(-1, -1)

    def test_try_sample_at_returns_invalid_sample(self, mapped, sampler):
        sample = sampler.try_sample_at(10, 0)
        assert isinstance(sample, GridSample)
        assert not sample.is_valid
        assert math.isnan(sample.height_value)
        assert sample.row_header == ''
        assert (sample.row, sample.col) == (-1, -1)

    def test_try_sample_at_not_ready(self, sampler):
        assert not sampler.try_sample_at(0, 0).is_valid

    def test_try_sample_at_success(self, mapped, sampler):
        assert sampler.try_sample_at(1, 2).is_valid


class TestPointSamplerValueAccess:
    """Test per-role value accessors."""

    @pytest.fixture
    def holes(self, registry, role_map):
        variable = GridVariable(label='holes')
        variable.import_from(RawGrid.from_rows([[np.nan, 1.0], [2.0, 3.0]]))
        registry.add(variable)
        for role in Role.all_roles():
            role_map.assign(role, variable)
        return variable

    def test_value_by_role(self, holes, sampler):
        assert sampler.value_by_role(Role.TOP_COLOR, 1, 1) == 3.0
        assert math.isnan(sampler.value_by_role(Role.HEIGHT, 0, 0))

    def test_zero_for_nan(self, holes, sampler):
        assert sampler.value_by_role(Role.HEIGHT, 0, 0, zero_for_nan=True) == 0.0
        assert sampler.value_by_role(Role.HEIGHT, 1, 0, zero_for_nan=True) == 2.0

    def test_is_nan_by_role(self, holes, sampler):
        assert sampler.is_nan_by_role(Role.SIDE_COLOR, 0, 0)
        assert not sampler.is_nan_by_role(Role.SIDE_COLOR, 0, 1)

    def test_value_by_role_out_of_range(self, holes, sampler):
        with pytest.raises(OutOfRangeError):
            sampler.value_by_role(Role.HEIGHT, 2, 0)
