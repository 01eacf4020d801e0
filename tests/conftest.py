import pytest
from hypothesis import settings

from kvadtree import QuadTree


@pytest.fixture(params=[(0.0, 0.0, 100.0, 100.0), (-64.0, -32.0, 128.0, 64.0)])
def bounds(request):
    return request.param


@pytest.fixture
def tree():
    """The reference configuration: 100x100 world, 4 levels, 2 points per leaf."""
    qt = QuadTree.create(0, 0, 100, 100, max_levels=4, max_points_per_node=2, debug=True)
    yield qt
    qt.release()


settings.register_profile("kvadtree", deadline=None)
settings.load_profile("kvadtree")
