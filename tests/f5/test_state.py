"""Tests for the JSON marketplace snapshot (F5)."""

import json

import pytest

from tutoring.config.app_config import AppConfig
from tutoring.core.ordering import OrderBy
from tutoring.core.reputation import Tier
from tutoring.core.state import (
    STATE_FILENAME,
    STATE_SCHEMA,
    delete_marketplace_state,
    load_marketplace_state,
    marketplace_to_dict,
    save_marketplace_state,
)

GAUDS = "gaudslindo99@gmail.com"


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state" / STATE_FILENAME


class TestMarketplaceToDict:
    """Tests for the snapshot layout."""

    def test_layout(self, populated_marketplace):
        data = marketplace_to_dict(populated_marketplace)
        assert data["$schema"] == STATE_SCHEMA
        assert data["order"] == "name"
        assert data["revenue"] == 0
        assert len(data["students"]) == 3
        assert len(data["tutors"]) == 2

    def test_tier_not_stored(self, populated_marketplace):
        for tutor in marketplace_to_dict(populated_marketplace)["tutors"]:
            assert "tier" not in tutor


class TestSaveLoad:
    """Round trip through disk."""

    def test_round_trip(self, populated_marketplace, tmp_path):
        m = populated_marketplace
        for _ in range(5):
            m.rate_tutor(GAUDS, 5)
        m.add_schedule(GAUDS, "14:00", "seg")
        m.add_location(GAUDS, "LCC2")
        m.donate(GAUDS, 1000)
        m.students.lookup("11715987").set_satisfaction(3)
        m.configure_order("email")

        path = save_marketplace_state(m, tmp_path)
        assert path.exists()

        loaded = load_marketplace_state(tmp_path, config=AppConfig())

        assert loaded.list_students() == m.list_students()
        assert loaded.list_tutors() == m.list_tutors()
        assert loaded.students.order is OrderBy.EMAIL
        assert loaded.tutors.order is OrderBy.EMAIL
        assert loaded.system_revenue() == 100
        assert loaded.total_money(GAUDS) == 900
        assert loaded.rating_of(GAUDS) == m.rating_of(GAUDS)
        assert loaded.tier_of(GAUDS) is Tier.TOP
        assert loaded.has_schedule(GAUDS, "14:00", "seg")
        assert loaded.has_location(GAUDS, "LCC2")
        assert loaded.students.lookup("11715987").satisfaction == 3

    def test_loaded_tutor_shares_student(self, populated_marketplace, tmp_path):
        save_marketplace_state(populated_marketplace, tmp_path)
        loaded = load_marketplace_state(tmp_path, config=AppConfig())
        tutor = loaded.tutors.lookup(GAUDS)
        assert tutor.student is loaded.students.lookup("11715963")

    def test_store_points_at_state_dir(self, tmp_path):
        loaded = load_marketplace_state(tmp_path, config=AppConfig())
        assert loaded.store.state_dir == tmp_path / "state"


class TestLoadFallbacks:
    """A broken snapshot never prevents startup."""

    def test_missing_file(self, tmp_path):
        loaded = load_marketplace_state(tmp_path, config=AppConfig())
        assert len(loaded.students) == 0

    def test_corrupted_json(self, tmp_path, state_path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text("{not json", encoding="utf-8")
        loaded = load_marketplace_state(tmp_path, config=AppConfig())
        assert len(loaded.students) == 0

    def test_wrong_schema(self, tmp_path, state_path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text(json.dumps({"$schema": "other_v9", "students": []}), encoding="utf-8")
        loaded = load_marketplace_state(tmp_path, config=AppConfig())
        assert len(loaded.students) == 0

    def test_tutor_without_student(self, tmp_path, state_path):
        """An inconsistent snapshot yields an empty marketplace, not a partial one."""
        state_path.parent.mkdir(parents=True)
        data = {
            "$schema": STATE_SCHEMA,
            "students": [
                {
                    "registration_id": "1",
                    "name": "Ana",
                    "course_code": 2,
                    "email": "ana@example.com",
                }
            ],
            "tutors": [{"registration_id": "2", "subjects": {"P2": 4}}],
        }
        state_path.write_text(json.dumps(data), encoding="utf-8")
        loaded = load_marketplace_state(tmp_path, config=AppConfig())
        assert len(loaded.students) == 0
        assert len(loaded.tutors) == 0


class TestInvalidStoredOrder:
    """A bad stored order falls back to the default and keeps the records."""

    def test_records_survive(self, populated_marketplace, tmp_path, state_path):
        save_marketplace_state(populated_marketplace, tmp_path)
        data = json.loads(state_path.read_text(encoding="utf-8"))
        data["order"] = "subject"
        state_path.write_text(json.dumps(data), encoding="utf-8")

        loaded = load_marketplace_state(tmp_path, config=AppConfig())

        assert len(loaded.students) == 3
        assert len(loaded.tutors) == 2
        assert loaded.students.order is OrderBy.NAME
        assert loaded.tutors.order is OrderBy.NAME


class TestDelete:
    """Tests for delete_marketplace_state."""

    def test_delete(self, populated_marketplace, tmp_path, state_path):
        save_marketplace_state(populated_marketplace, tmp_path)
        assert delete_marketplace_state(tmp_path) is True
        assert not state_path.exists()

    def test_delete_missing(self, tmp_path):
        assert delete_marketplace_state(tmp_path) is False
