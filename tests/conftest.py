from __future__ import annotations

import pytest

from tests.fakes import MONDAY_0930, build_world


@pytest.fixture
def fixed_now():
    return MONDAY_0930


@pytest.fixture
def world():
    return build_world()


@pytest.fixture
def container(world):
    return world.container()
