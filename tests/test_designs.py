import pytest

import database
from designs import delete_design, get_design, list_designs, normalize_tags, save_design
from schemas import SneakerConfiguration

BEACH = SneakerConfiguration(sole="#ffffff", upper="#00a8ff", laces="#fbbf24", logo="#ff6b35",
                             material="shiny", customText="SUN")


def test_normalize_tags():
    assert normalize_tags([" Summer", "summer", "BRIGHT", "", "  ", "bright"]) == ["summer", "bright"]


def test_save_and_list_newest_first(fake_db):
    save_design("user-1", "classic-runner", "Rainy Day", BEACH, ["grey"])
    beach_id = save_design("user-1", "classic-runner", " Beach Day ", BEACH, ["summer", "bright"])
    save_design("user-2", "classic-runner", "Not mine", BEACH)

    docs = list_designs("user-1")
    assert [d["name"] for d in docs] == ["Beach Day", "Rainy Day"]
    first = docs[0]
    assert first["_id"] == beach_id
    assert first["tags"] == ["summer", "bright"]
    assert first["configuration"] == BEACH.model_dump()
    assert first["productId"] == "classic-runner"
    assert "created_at" in first


def test_list_filters_by_name_or_tag(fake_db):
    save_design("u", "classic-runner", "Beach Day", BEACH, ["summer"])
    save_design("u", "classic-runner", "Forest", BEACH, ["nature"])
    assert [d["name"] for d in list_designs("u", q="BEACH")] == ["Beach Day"]
    assert [d["name"] for d in list_designs("u", q="natu")] == ["Forest"]
    assert list_designs("u", q="zzz") == []


def test_get_design_scoped_to_owner(fake_db):
    design_id = save_design("u", "classic-runner", "Mine", BEACH)
    assert get_design(design_id, "u")["name"] == "Mine"
    assert get_design(design_id, "someone-else") is None
    assert get_design("not-an-object-id", "u") is None


def test_delete_reports_success_once(fake_db):
    design_id = save_design("u", "classic-runner", "Gone soon", BEACH)
    assert delete_design(design_id, "u") is True
    assert delete_design(design_id, "u") is False
    assert list_designs("u") == []


def test_delete_requires_owner(fake_db):
    design_id = save_design("u", "classic-runner", "Keep", BEACH)
    assert delete_design(design_id, "intruder") is False
    assert len(list_designs("u")) == 1


def test_invalid_id_deletes_nothing(fake_db):
    assert delete_design("nope", "u") is False


def test_unconfigured_database_raises(no_db):
    with pytest.raises(database.DatabaseUnavailable):
        save_design("u", "classic-runner", "x", BEACH)
    with pytest.raises(database.DatabaseUnavailable):
        list_designs("u")
