import pytest
from fastapi.testclient import TestClient

from antologia_api.app.core.db import get_connection, init_db
from antologia_api.app.main import create_app


@pytest.fixture
def db_path(tmp_path):
    # Each test gets its own database file
    return str(tmp_path / "antologia_test.sqlite")


@pytest.fixture
def conn(db_path):
    """Connection to a migrated but empty store."""
    connection = get_connection(db_path)
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture
def export_dir(tmp_path):
    return str(tmp_path / "exports")


@pytest.fixture
def client(db_path, export_dir):
    """TestClient whose startup has initialised and seeded the store."""
    app = create_app(database_path=db_path, export_dir=export_dir)
    with TestClient(app) as test_client:
        yield test_client
