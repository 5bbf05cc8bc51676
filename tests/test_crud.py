"""Owner-scoped persistence helpers, exercised directly against a fresh database."""

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DB_URL", "sqlite://")

from presux.crud.base import (  # noqa: E402
    ConflictError,
    InvalidReferenceError,
    create_owned,
    get_owned,
    list_owned,
    name_taken,
    update_owned,
)
from presux.crud.catalog import (  # noqa: E402
    create_item,
    create_product,
    ensure_brand_unused,
    list_items,
    update_product,
)
from presux.crud.personnel import assign_positions, drop_position_assignments, replace_positions  # noqa: E402
from presux.crud.profile import get_or_create_profile, update_profile  # noqa: E402
from presux.db.session import Base  # noqa: E402
from presux.models import Brand, Client, JobPosition, Personnel, ProductCategory  # noqa: E402
from presux.models.common import utcnow  # noqa: E402
from presux.services.identity import Identity  # noqa: E402

OWNER = "11111111-1111-4111-8111-111111111111"
OTHER = "22222222-2222-4222-8222-222222222222"


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def test_records_are_scoped_to_their_owner(db_session):
    mine = create_owned(db_session, Client, OWNER, {"nombre": "Beta", "tipo": "EMPRESA"})
    create_owned(db_session, Client, OWNER, {"nombre": "Alfa", "tipo": "PARTICULAR"})
    create_owned(db_session, Client, OTHER, {"nombre": "Gamma", "tipo": "EMPRESA"})

    assert [c.nombre for c in list_owned(db_session, Client, OWNER)] == ["Alfa", "Beta"]
    assert get_owned(db_session, Client, OWNER, mine.id) is mine
    assert get_owned(db_session, Client, OTHER, mine.id) is None


def test_name_taken_can_exclude_the_record_itself(db_session):
    record = create_owned(db_session, Brand, OWNER, {"nombre": "Shure"})
    assert name_taken(db_session, Brand, OWNER, "Shure")
    assert not name_taken(db_session, Brand, OWNER, "Shure", exclude_id=record.id)
    assert not name_taken(db_session, Brand, OTHER, "Shure")


def test_unique_constraint_race_becomes_conflict(db_session):
    create_owned(db_session, Brand, OWNER, {"nombre": "Shure"})
    with pytest.raises(ConflictError):
        create_owned(db_session, Brand, OWNER, {"nombre": "Shure"}, conflict_message="dup")
    # The session is still usable after the rollback.
    assert len(list_owned(db_session, Brand, OWNER)) == 1


def test_not_null_failure_is_not_reported_as_conflict(db_session):
    record = create_owned(db_session, Client, OWNER, {"nombre": "Acme", "tipo": "EMPRESA"})
    with pytest.raises(IntegrityError):
        update_owned(db_session, record, {"nombre": None}, conflict_message="dup")
    db_session.expire_all()
    assert get_owned(db_session, Client, OWNER, record.id).nombre == "Acme"


def test_timestamps_are_strictly_increasing():
    stamps = [utcnow() for _ in range(200)]
    assert stamps == sorted(set(stamps))
    assert all(stamp.endswith("Z") and len(stamp) == len(stamps[0]) for stamp in stamps)


def test_update_never_touches_identity_columns(db_session):
    record = create_owned(db_session, Client, OWNER, {"nombre": "Acme", "tipo": "EMPRESA"})
    original_created = record.created_at
    update_owned(db_session, record, {"id": "x", "user_id": OTHER, "created_at": "1999", "ciudad": "Cádiz"})
    assert record.user_id == OWNER
    assert record.created_at == original_created
    assert record.ciudad == "Cádiz"


def test_product_references_must_be_owned(db_session):
    mine = create_owned(db_session, ProductCategory, OWNER, {"nombre": "Audio"})
    theirs = create_owned(db_session, ProductCategory, OTHER, {"nombre": "Audio"})

    with pytest.raises(InvalidReferenceError):
        create_product(db_session, OWNER, {"nombre": "Micro", "categoria_id": theirs.id})

    product = create_product(db_session, OWNER, {"nombre": "Micro", "categoria_id": mine.id})
    assert product.categoria_nombre == "Audio"
    assert product.marca_nombre is None

    with pytest.raises(InvalidReferenceError):
        update_product(db_session, OWNER, product, {"marca_id": "33333333-3333-4333-8333-333333333333"})


def test_brand_in_use_blocks_delete(db_session):
    category = create_owned(db_session, ProductCategory, OWNER, {"nombre": "Audio"})
    brand = create_owned(db_session, Brand, OWNER, {"nombre": "Shure"})
    ensure_brand_unused(db_session, OWNER, brand)

    create_product(db_session, OWNER, {"nombre": "Micro", "categoria_id": category.id, "marca_id": brand.id})
    with pytest.raises(ConflictError):
        ensure_brand_unused(db_session, OWNER, brand)


def test_items_are_listed_newest_first(db_session):
    category = create_owned(db_session, ProductCategory, OWNER, {"nombre": "Audio"})
    product = create_product(db_session, OWNER, {"nombre": "Micro", "categoria_id": category.id})
    serials = [f"S{n:02d}" for n in range(12)]
    for serial in serials:
        create_item(db_session, OWNER, product, {"numero_serie": serial})

    assert [i.numero_serie for i in list_items(db_session, OWNER, product.id)] == serials[::-1]
    assert list_items(db_session, OTHER, product.id) == []


def test_assignment_lifecycle(db_session):
    person = create_owned(db_session, Personnel, OWNER, {"nombre": "Ana"})
    first = create_owned(db_session, JobPosition, OWNER, {"nombre": "Técnico", "precio_dia": 100})
    second = create_owned(db_session, JobPosition, OWNER, {"nombre": "Montador", "precio_dia": 80})
    foreign = create_owned(db_session, JobPosition, OTHER, {"nombre": "Chófer", "precio_dia": 50})

    assign_positions(db_session, OWNER, person, [{"puesto_trabajo_id": first.id, "fecha_asignacion": "2024-01-01"}])
    with pytest.raises(ConflictError):
        assign_positions(db_session, OWNER, person, [{"puesto_trabajo_id": first.id, "fecha_asignacion": "2024-01-02"}])
    with pytest.raises(InvalidReferenceError):
        assign_positions(db_session, OWNER, person, [{"puesto_trabajo_id": foreign.id, "fecha_asignacion": "2024-01-02"}])

    replaced = replace_positions(
        db_session,
        OWNER,
        person,
        [
            {"puesto_trabajo_id": first.id, "fecha_asignacion": "2024-02-01", "tarifa_por_dia": 120},
            {"puesto_trabajo_id": second.id, "fecha_asignacion": "2024-02-01"},
        ],
    )
    assert sorted(a.nombre_puesto for a in replaced) == ["Montador", "Técnico"]

    drop_position_assignments(db_session, OWNER, first)
    db_session.commit()
    db_session.refresh(person)
    assert [a.puesto_trabajo_id for a in person.asignaciones] == [second.id]


def test_profile_get_or_create_is_idempotent(db_session):
    identity = Identity(id=OWNER, email="ana@example.com")
    created = get_or_create_profile(db_session, identity)
    assert created.rol == "user"
    assert get_or_create_profile(db_session, identity) is created

    update_profile(db_session, created, {"nombre_completo": "Ana", "rol": "admin"})
    assert created.nombre_completo == "Ana"
    assert created.rol == "user"
