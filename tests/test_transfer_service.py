import asyncio
import json
import logging
import os

import pytest

from antologia_api.app.core.db import get_connection, init_db
from antologia_api.app.core.exceptions import TransferError
from antologia_api.app.services.antologia_service import AntologiaService
from antologia_api.app.services.autor_service import AutorService
from antologia_api.app.services.like_service import LikeService
from antologia_api.app.services.transfer_service import TransferService


@pytest.fixture
def populated(conn):
    autor = asyncio.run(AutorService.create_autor(conn, {"nombre": "Rosario Castellanos", "biografia": "Poeta"}))
    other = asyncio.run(AutorService.create_autor(conn, {"nombre": "Juan José Arreola"}))
    first = asyncio.run(
        AntologiaService.create_antologia(conn, {"titulo": "Lívida luz", "idautor": autor.idautor, "referencia": "p. 3"})
    )
    second = asyncio.run(AntologiaService.create_antologia(conn, {"titulo": "Confabulario", "idautor": other.idautor}))
    for user in ("a", "b"):
        asyncio.run(LikeService.create_like(conn, {"idantologia": first.id, "userId": user}))
    asyncio.run(LikeService.create_like(conn, {"idantologia": second.id, "userId": "a"}))
    return conn


@pytest.fixture
def target(tmp_path):
    connection = get_connection(str(tmp_path / "target.sqlite"))
    init_db(connection)
    yield connection
    connection.close()


def _rows(conn, table):
    return {tuple(row) for row in conn.execute(f"SELECT * FROM {table}")}


def test_export_snapshot_contains_raw_rows(populated):
    snapshot = asyncio.run(TransferService.export_snapshot(populated))

    assert len(snapshot.autores) == 2
    assert len(snapshot.antologias) == 2
    assert len(snapshot.likes) == 3
    assert set(snapshot.antologias[0]) == {
        "id",
        "titulo",
        "idautor",
        "contenido",
        "referencia",
        "tituloObra",
        "autorObra",
        "createdAt",
        "updatedAt",
    }
    assert set(snapshot.likes[0]) == {"id", "idantologia", "userId", "userEmail", "createdAt", "updatedAt"}


def test_export_then_import_reproduces_rows(populated, target):
    snapshot = asyncio.run(TransferService.export_snapshot(populated))

    result = asyncio.run(TransferService.import_snapshot(target, snapshot.model_dump()))

    assert result.inserted == 7
    for table in ("autores", "antologias", "likes"):
        assert _rows(target, table) == _rows(populated, table)


def test_import_twice_is_idempotent(populated, target):
    snapshot = asyncio.run(TransferService.export_snapshot(populated)).model_dump()

    asyncio.run(TransferService.import_snapshot(target, snapshot))
    counts_after_first = [len(_rows(target, table)) for table in ("autores", "antologias", "likes")]
    second = asyncio.run(TransferService.import_snapshot(target, snapshot))
    counts_after_second = [len(_rows(target, table)) for table in ("autores", "antologias", "likes")]

    assert second.inserted == 0
    assert second.autores.skipped == 2
    assert second.likes.skipped == 3
    assert counts_after_second == counts_after_first


def test_import_into_same_store_inserts_nothing(populated):
    snapshot = asyncio.run(TransferService.export_snapshot(populated)).model_dump()

    result = asyncio.run(TransferService.import_snapshot(populated, snapshot))

    assert result.inserted == 0


def test_import_missing_keys_means_nothing_to_import(target):
    snapshot = {"autores": [{"idautor": 10, "nombre": "Alfonso Reyes"}]}

    result = asyncio.run(TransferService.import_snapshot(target, snapshot))

    assert result.autores.inserted == 1
    assert result.antologias.inserted == 0
    assert result.likes.inserted == 0
    autores = asyncio.run(AutorService.list_autores(target))
    assert autores[0].idautor == 10
    assert autores[0].createdAt


def test_import_drops_unknown_columns(target):
    snapshot = {
        "antologias": [{"id": 3, "titulo": "Con extras", "likesCount": 9, "Autor": {"nombre": "x"}}],
    }

    asyncio.run(TransferService.import_snapshot(target, snapshot))

    listed = asyncio.run(AntologiaService.list_antologias(target))
    assert listed[0].id == 3
    assert listed[0].likesCount == 0


def test_failed_batch_does_not_block_later_batches(target):
    snapshot = {
        "autores": "not a list",
        "antologias": [{"id": 1, "titulo": "Sigue"}],
        "likes": [{"id": 1, "idantologia": 1, "userId": "u"}],
    }

    with pytest.raises(TransferError) as excinfo:
        asyncio.run(TransferService.import_snapshot(target, snapshot))

    assert "autores" in str(excinfo.value)
    assert len(_rows(target, "antologias")) == 1
    assert len(_rows(target, "likes")) == 1


def test_failed_batch_is_rolled_back_entirely(target):
    snapshot = {"likes": [{"id": 1, "idantologia": 1}, "not a row"]}

    with pytest.raises(TransferError):
        asyncio.run(TransferService.import_snapshot(target, snapshot))

    assert _rows(target, "likes") == set()


def test_import_rejects_non_object_snapshot(target):
    with pytest.raises(TransferError):
        asyncio.run(TransferService.import_snapshot(target, [1, 2, 3]))


def test_parse_snapshot():
    body = json.dumps({"autores": []}).encode("utf-8")

    assert TransferService.parse_snapshot(body, 1024) == {"autores": []}
    with pytest.raises(TransferError):
        TransferService.parse_snapshot(body, 5)
    with pytest.raises(TransferError):
        TransferService.parse_snapshot(b"{not json", 1024)
    with pytest.raises(TransferError):
        TransferService.parse_snapshot(b"[]", 1024)


def test_write_snapshot_file(populated, tmp_path):
    directory = str(tmp_path / "exports")

    path, filename = asyncio.run(TransferService.write_snapshot_file(populated, directory))

    assert filename.startswith("database_backup_")
    assert filename.endswith(".json")
    assert ":" not in filename
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    assert set(data) == {"autores", "antologias", "likes"}
    assert data["autores"][0]["nombre"] == "Rosario Castellanos"

    TransferService.remove_export_file(path)
    assert not os.path.exists(path)


def test_remove_export_file_only_logs_failures(tmp_path, caplog):
    missing = str(tmp_path / "gone.json")

    with caplog.at_level(logging.WARNING):
        TransferService.remove_export_file(missing)

    assert "Could not remove export file" in caplog.text


def test_import_rejects_wrongly_typed_row(target):
    snapshot = {"antologias": [{"id": 9, "titulo": "t", "idautor": "abc"}]}

    with pytest.raises(TransferError) as excinfo:
        asyncio.run(TransferService.import_snapshot(target, snapshot))

    assert "row 0 of 'antologias'" in str(excinfo.value)
    assert "idautor" in str(excinfo.value)
    assert _rows(target, "antologias") == set()
    # The listing join still works on the untouched store.
    assert asyncio.run(AntologiaService.list_antologias(target)) == []


def test_import_invalid_row_rolls_back_its_batch(target):
    snapshot = {
        "autores": [
            {"idautor": 1, "nombre": "Válida"},
            {"idautor": 2, "nombre": "Mal fecha", "createdAt": 123},
        ]
    }

    with pytest.raises(TransferError):
        asyncio.run(TransferService.import_snapshot(target, snapshot))

    assert _rows(target, "autores") == set()


@pytest.mark.parametrize(
    "snapshot, key",
    [
        ({"autores": [{"idautor": 4, "biografia": "sin nombre"}]}, "autores"),
        ({"autores": [{"idautor": 4, "nombre": "   "}]}, "autores"),
        ({"antologias": [{"id": 4, "contenido": "sin título"}]}, "antologias"),
        ({"antologias": [{"id": 4, "titulo": None}]}, "antologias"),
    ],
)
def test_import_row_without_required_text_fails_instead_of_skipping(target, snapshot, key):
    with pytest.raises(TransferError) as excinfo:
        asyncio.run(TransferService.import_snapshot(target, snapshot))

    assert key in str(excinfo.value)
    assert _rows(target, key) == set()


def test_import_coerces_numeric_like_user_id(target):
    snapshot = {"likes": [{"id": 5, "idantologia": 1, "userId": 42}]}

    asyncio.run(TransferService.import_snapshot(target, snapshot))

    likes = asyncio.run(LikeService.list_likes_for_antologia(target, 1))
    assert likes[0].userId == "42"


def test_write_snapshot_file_reports_unwritable_directory(populated, tmp_path):
    blocker = tmp_path / "not_a_directory"
    blocker.write_text("occupied", encoding="utf-8")

    with pytest.raises(TransferError) as excinfo:
        asyncio.run(TransferService.write_snapshot_file(populated, str(blocker)))

    assert "Could not write export file" in str(excinfo.value)


def test_write_snapshot_file_removes_partial_file(populated, tmp_path, monkeypatch):
    directory = tmp_path / "exports"

    def fail_dump(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(json, "dump", fail_dump)

    with pytest.raises(TransferError) as excinfo:
        asyncio.run(TransferService.write_snapshot_file(populated, str(directory)))

    assert "disk full" in str(excinfo.value)
    assert list(directory.iterdir()) == []


def test_read_body_stops_once_limit_is_passed():
    async def chunks():
        yield b'{"autores": '
        yield b"[]}"

    async def endless():
        while True:
            yield b"x" * 10

    assert asyncio.run(TransferService.read_body(chunks(), 1024)) == b'{"autores": []}'
    with pytest.raises(TransferError) as excinfo:
        asyncio.run(TransferService.read_body(endless(), 25))
    assert "maximum size" in str(excinfo.value)
