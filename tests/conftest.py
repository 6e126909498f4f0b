import pathlib
import sys

import pytest

# Ensure project root is in sys.path
repo_root = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))


@pytest.fixture
def db_service():
    """
    Provides a fresh in-memory database service for each test.
    """
    from src.services.db_service import DatabaseService

    service = DatabaseService(":memory:")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def seed_dir():
    """Directory holding the sample flights.json and workPackages.json."""
    return repo_root / "data"


@pytest.fixture
def seeded_db_path(tmp_path, seed_dir):
    """
    A database file seeded with the sample data set.
    """
    from src.services.db_service import DatabaseService
    from src.services.seed_service import seed_from_directory

    path = str(tmp_path / "hangar.db")
    service = DatabaseService(path)
    service.connect()
    seed_from_directory(service, seed_dir)
    service.close()
    return path
