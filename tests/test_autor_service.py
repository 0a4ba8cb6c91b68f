import asyncio

import pytest

from antologia_api.app.core.exceptions import NotFoundError, ValidationError
from antologia_api.app.services.autor_service import AutorService


def test_create_autor_assigns_distinct_ids(conn):
    first = asyncio.run(AutorService.create_autor(conn, {"nombre": "Rosario Castellanos"}))
    second = asyncio.run(
        AutorService.create_autor(
            conn,
            {"nombre": "Juan Rulfo", "biografia": "Narrador jalisciense", "urlfoto": "https://example.com/rulfo.png"},
        )
    )

    assert first.idautor != second.idautor
    assert second.biografia == "Narrador jalisciense"
    assert first.biografia is None
    assert first.createdAt and first.updatedAt


@pytest.mark.parametrize("payload", [{}, {"nombre": ""}, {"nombre": "   "}, {"nombre": None}])
def test_create_autor_requires_nombre(conn, payload):
    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(AutorService.create_autor(conn, payload))

    assert excinfo.value.fields == ["nombre"]
    assert asyncio.run(AutorService.list_autores(conn)) == []


def test_create_autor_rejects_non_object_payload(conn):
    with pytest.raises(ValidationError):
        asyncio.run(AutorService.create_autor(conn, ["nombre"]))


def test_list_autores(conn):
    for nombre in ("Sor Juana", "Amado Nervo", "Octavio Paz"):
        asyncio.run(AutorService.create_autor(conn, {"nombre": nombre}))

    autores = asyncio.run(AutorService.list_autores(conn))

    assert {autor.nombre for autor in autores} == {"Sor Juana", "Amado Nervo", "Octavio Paz"}


def test_update_autor_is_partial(conn):
    autor = asyncio.run(AutorService.create_autor(conn, {"nombre": "Elena Garro", "biografia": "Dramaturga"}))

    updated = asyncio.run(AutorService.update_autor(conn, autor.idautor, {"urlfoto": "https://example.com/garro.png"}))

    assert updated.idautor == autor.idautor
    assert updated.nombre == "Elena Garro"
    assert updated.biografia == "Dramaturga"
    assert updated.urlfoto == "https://example.com/garro.png"
    assert updated.createdAt == autor.createdAt


def test_update_autor_missing_raises_not_found(conn):
    with pytest.raises(NotFoundError):
        asyncio.run(AutorService.update_autor(conn, 999, {"nombre": "Nadie"}))


def test_update_autor_rejects_blank_nombre(conn):
    autor = asyncio.run(AutorService.create_autor(conn, {"nombre": "José Emilio Pacheco"}))

    with pytest.raises(ValidationError):
        asyncio.run(AutorService.update_autor(conn, autor.idautor, {"nombre": ""}))

    stored = asyncio.run(AutorService.list_autores(conn))
    assert stored[0].nombre == "José Emilio Pacheco"
