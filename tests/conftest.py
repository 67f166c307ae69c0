"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from mazebrain.main import app
from mazebrain.core.maze_parser import snapshot_from_text
from mazebrain.core.maze_state import MazeSnapshot
from mazebrain.core.path_search import SearchLimits
from mazebrain.schemas.snapshot import SnapshotPayload
from mazebrain.services.solver_session import SessionRegistry


# 3x3 rooms, no doors; exit in the far corner
OPEN_MAZE = """XXXXXXX
XS....X
X.X.X.X
X.....X
X.X.X.X
X....EX
XXXXXXX"""

# Door A guards the exit; key A sits at the end of a side branch
KEY_MAZE = """XXXXXXX
XS..AEX
X.XXXXX
X.X.X.X
X.XXXXX
XaX.X.X
XXXXXXX"""

# Exit walled off completely
WALLED_MAZE = """XXXXXXX
XS....X
X.X.X.X
X...X.X
X.X.XXX
X...XEX
XXXXXXX"""


@pytest.fixture
def key_snapshot() -> MazeSnapshot:
    """Snapshot of KEY_MAZE with the agent on the start."""
    return snapshot_from_text(KEY_MAZE)


@pytest.fixture
def key_payload(key_snapshot) -> dict:
    """KEY_MAZE snapshot as a request body."""
    return SnapshotPayload.from_snapshot(key_snapshot).model_dump()


@pytest.fixture
def walled_payload() -> dict:
    """WALLED_MAZE snapshot as a request body."""
    return SnapshotPayload.from_snapshot(snapshot_from_text(WALLED_MAZE)).model_dump()


@pytest.fixture
def registry() -> SessionRegistry:
    """Fresh session registry installed on the app."""
    registry = SessionRegistry(limits=SearchLimits())
    app.state.registry = registry
    return registry


@pytest_asyncio.fixture(scope="function")
async def client(registry) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
