import pytest

from tttsolver.board import empty
from tttsolver.tree import build


@pytest.fixture(scope="session")
def full_tree():
    # ~550K nodes; built once for the whole session
    return build(empty())
