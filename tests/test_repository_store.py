"""Test cases for the JSON file repository registry."""

import json

import pytest

from hookdeploy.core.exceptions import RegistryError
from hookdeploy.registry.file_repository_store import FileRepositoryStore
from hookdeploy.registry.repository_store import generate_token, project_name_from_url
from conftest import make_record


class TestFileRepositoryStore:
    """Test registry reads and mutations"""

    @pytest.fixture
    def store(self, tmp_path):
        return FileRepositoryStore(str(tmp_path / "data" / "repositories.json"))

    def test_missing_file_is_empty_registry(self, store):
        assert store.all() == []
        assert store.get("shop") is None
        assert not store.has("shop")

    def test_add_and_get(self, store, tmp_path):
        record = make_record(tmp_path / "shop")
        store.add(record)

        assert store.get("shop") == record
        assert store.has("shop")

    def test_file_layout(self, store, tmp_path):
        store.add(make_record(tmp_path / "shop", profile_type="simple"))

        data = json.loads(store.registry_path.read_text())
        assert list(data) == ["shop"]
        assert data["shop"]["type"] == "simple"
        assert "profile_type" not in data["shop"]
        assert set(data["shop"]) == {
            "name", "git_url", "local_path", "branch", "type", "webhook_token", "created_at",
        }

    def test_duplicate_is_rejected(self, store, tmp_path):
        store.add(make_record(tmp_path / "shop"))

        with pytest.raises(RegistryError, match="already exists"):
            store.add(make_record(tmp_path / "other"))

    def test_remove(self, store, tmp_path):
        store.add(make_record(tmp_path / "shop"))
        removed = store.remove("shop")

        assert removed.name == "shop"
        assert store.all() == []

    def test_remove_missing(self, store):
        with pytest.raises(RegistryError, match="not found"):
            store.remove("shop")

    def test_changes_from_another_instance_are_visible(self, store, tmp_path):
        other = FileRepositoryStore(str(store.registry_path))
        other.add(make_record(tmp_path / "shop"))

        assert store.has("shop")

    def test_corrupt_file(self, store):
        store.registry_path.parent.mkdir(parents=True)
        store.registry_path.write_text("{not json")

        with pytest.raises(RegistryError):
            store.all()

    def test_summary_hides_token(self, tmp_path):
        summary = make_record(tmp_path / "shop").to_summary()

        assert "webhook_token" not in summary
        assert summary["type"] == "symfony-api"


class TestHelpers:
    """Test token generation and project naming"""

    def test_generate_token(self):
        token = generate_token()

        assert len(token) == 64
        int(token, 16)
        assert token != generate_token()

    @pytest.mark.parametrize("git_url,local_path,expected", [
        ("git@gitlab.com:acme/shop.git", "/srv/www/site", "shop"),
        ("https://gitlab.com/acme/blog.git", "/srv/www/site", "blog"),
        ("https://gitlab.com/acme/blog", "/srv/www/site", "site"),
    ])
    def test_project_name_from_url(self, git_url, local_path, expected):
        assert project_name_from_url(git_url, local_path) == expected
