"""Tests for the schema bootstrap script."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from parley.models import Room
from parley.scripts import init_db


@pytest.fixture()
def bootstrap(engine, mocker):
    mocker.patch("parley.db.session.SessionLocal", sessionmaker(bind=engine))
    return {
        "create": mocker.patch.object(init_db, "create_tables"),
        "drop": mocker.patch.object(init_db, "drop_tables"),
    }


def test_seeds_missing_rooms_once(bootstrap, engine, capsys) -> None:
    init_db.main(["--room", "general", "--room", "random"])
    init_db.main(["--room", "general"])

    with sessionmaker(bind=engine)() as db:
        assert sorted(name for (name,) in db.query(Room.name).all()) == ["general", "random"]
    assert bootstrap["create"].call_count == 2
    bootstrap["drop"].assert_not_called()
    out = capsys.readouterr().out
    assert "2 room(s) added" in out
    assert "0 room(s) added" in out


def test_drop_tables_flag(bootstrap) -> None:
    init_db.main(["--drop-tables"])
    bootstrap["drop"].assert_called_once()
    bootstrap["create"].assert_called_once()


def test_database_error_exits_nonzero(bootstrap, capsys) -> None:
    bootstrap["create"].side_effect = OperationalError("CREATE", {}, Exception("no db"))
    with pytest.raises(SystemExit) as excinfo:
        init_db.main([])
    assert excinfo.value.code == 1
    assert "ERROR" in capsys.readouterr().err
