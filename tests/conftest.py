from datetime import timedelta
from pathlib import Path
import sys
import os

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Safety default for any module-level app creation during test imports.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from govdash import create_app
from govdash.extensions import db
from govdash.services import governance
from govdash.services.timing import utcnow

CREATOR = "0x1111111111111111111111111111111111111111"


@pytest.fixture()
def app(tmp_path: Path):
    db_file = tmp_path / "test.sqlite3"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}",
            "GOVDASH_MAX_OPTIONS": 5,
        }
    )

    with app.app_context():
        driver = db.engine.url.drivername
        if driver != "sqlite":
            raise RuntimeError(
                f"Test database must be SQLite, got '{driver}'. Refusing to run destructive test setup."
            )
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    with app.app_context():
        yield db.session


@pytest.fixture()
def organization(db_session):
    return governance.create_organization(creator=CREATOR, name="Test DAO")


@pytest.fixture()
def make_proposal(organization):
    def _make_proposal(vote_type="single-choice", options=None, started=True, **fields):
        now = utcnow()
        start = now - timedelta(hours=1) if started else now + timedelta(hours=1)
        return governance.create_proposal(
            organization.id,
            creator=CREATOR,
            title=fields.pop("title", "Adopt the new treasury policy"),
            options=options or ["Yes", "No", "Abstain"],
            start_date=start,
            end_date=start + timedelta(days=3),
            vote_type=vote_type,
            **fields,
        )

    return _make_proposal
