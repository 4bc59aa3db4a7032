# tests/test_session.py
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.db import session as session_module
from clinic_booking.db.crud import patient as patient_crud
from clinic_booking.db.schema import create_schema
from clinic_booking.db.session import db_session, init_database


async def test_db_session_requires_initialisation(monkeypatch):
    monkeypatch.setattr(session_module, "_global_session_factory", None)

    with pytest.raises(RuntimeError):
        async with db_session():
            pass


async def test_init_database_registers_a_session_factory(tmp_path, monkeypatch):
    monkeypatch.setattr(session_module, "_global_session_factory", None)
    engine = await init_database(f"sqlite+aiosqlite:///{tmp_path / 'scripts.db'}")
    try:
        await create_schema(engine)
        async with db_session() as db:
            assert isinstance(db, AsyncSession)
            assert await patient_crud.list_patients(db) == []
    finally:
        await engine.dispose()
