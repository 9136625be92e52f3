"""Pytest configuration and fixtures."""

import pytest

from launchpad.curve.launch import LaunchInputs
from launchpad.curve.model import CurveConfig
from tests.helpers.factories import make_launch_inputs, make_pool_world
from tests.helpers.fakes import FakeFactoryReader, FakePoolReader, FakeTokenReader


@pytest.fixture
def reference_inputs() -> LaunchInputs:
    """Launch inputs for p0=0.001, p1=0.01, L=10000 USDC, S=1e9."""
    return make_launch_inputs()


@pytest.fixture
def reference_curve(reference_inputs: LaunchInputs) -> CurveConfig:
    """The curve derived from reference_inputs."""
    return reference_inputs.curve()


@pytest.fixture
def pool_world() -> tuple[FakeTokenReader, FakePoolReader, FakeFactoryReader]:
    """USDC/LAUNCH pool on the reference curve, trading at 0.001 USDC."""
    return make_pool_world()
