"""Tests for profile export and import."""

import json

import pytest

from swixter.core.errors import ConfigParseError, NotFoundError, ValidationError
from swixter.core.profiles import REDACTED_MARKER, ConflictPolicy, ProfileStore
from swixter.core.schema import dump_record


@pytest.fixture
def populated_store(profile_store, work_profile):
    profile_store.create(work_profile, activate=True)
    profile_store.create(
        {
            "name": "cn",
            "providerId": "deepseek",
            "apiKey": "sk-deepseek-0123456789abcdef",
            "model": "deepseek-chat",
            "authToken": "tok-secret-987654",
        }
    )
    profile_store.create({**work_profile, "name": "local", "providerId": "ollama", "apiKey": "ollama-local-key", "model": "qwen2.5-coder:7b"})
    return profile_store


@pytest.fixture
def other_store(tmp_path):
    other_path = tmp_path / "other" / "config.json"
    return ProfileStore(lambda: other_path)


def test_export_all_profiles_in_order(populated_store):
    snapshot = populated_store.export()
    assert [p.name for p in snapshot.profiles] == ["work", "cn", "local"]
    assert snapshot.sanitized is False
    assert snapshot.version == "1.0.0"
    assert snapshot.exported_at
    assert snapshot.profiles[0].api_key == "sk-1"


def test_export_selected_profiles_follow_request_order(populated_store):
    snapshot = populated_store.export(["local", "work", "local"])
    assert [p.name for p in snapshot.profiles] == ["local", "work"]


def test_export_unknown_name(populated_store):
    with pytest.raises(NotFoundError):
        populated_store.export(["work", "ghost"])


def test_sanitized_export_hides_every_secret(populated_store):
    populated_store.create(
        {
            "name": "gateway",
            "providerId": "anthropic",
            "apiKey": "sk-ant-secret-abcdef123456",
            "model": "claude-sonnet-4-20250514",
            "authToken": "tok-gateway-42",
            "baseURL": "https://gateway.example.com/v1?key=sk-ant-secret-abcdef123456",
            "headers": {
                "x-api-key": "sk-ant-secret-abcdef123456",
                "authorization": "Bearer tok-gateway-42",
                "x-team": "core",
            },
        }
    )
    originals = [p for p in populated_store.list_profiles()]
    snapshot = populated_store.export(sanitize=True)
    serialized = json.dumps(dump_record(snapshot))

    assert snapshot.sanitized is True
    for profile in originals:
        assert profile.api_key not in serialized
        if profile.auth_token:
            assert profile.auth_token not in serialized
    assert all(p.api_key == REDACTED_MARKER for p in snapshot.profiles)

    gateway = snapshot.profiles[-1]
    assert gateway.headers == {
        "x-api-key": REDACTED_MARKER,
        "authorization": REDACTED_MARKER,
        "x-team": "core",
    }
    assert gateway.base_url == f"https://gateway.example.com/v1?key={REDACTED_MARKER}"


def test_export_never_mutates_store(populated_store, config_path):
    before = config_path.read_text(encoding="utf-8")
    populated_store.export(sanitize=True)
    populated_store.export_to_file(config_path.parent / "export.json", sanitize=True)
    assert config_path.read_text(encoding="utf-8") == before
    assert populated_store.get("work").api_key == "sk-1"


def test_export_file_round_trip(populated_store, other_store, tmp_path):
    target = tmp_path / "exports" / "swixter-config.json"
    populated_store.export_to_file(target)

    document = json.loads(target.read_text(encoding="utf-8"))
    assert set(document) == {"profiles", "exportedAt", "version", "sanitized"}

    result = other_store.import_from_file(target)
    assert result.imported == ["work", "cn", "local"]
    assert other_store.get("cn").auth_token == "tok-secret-987654"
    # Imports never change which profile is active.
    assert other_store.get_active() is None


def test_import_skip_policy(populated_store, work_profile):
    snapshot = {
        "profiles": [{**work_profile, "apiKey": "sk-new"}, {**work_profile, "name": "fresh"}],
        "exportedAt": "2024-05-01T00:00:00.000Z",
        "version": "1.0.0",
    }
    result = populated_store.import_profiles(snapshot, ConflictPolicy.SKIP)

    assert result.skipped == ["work"]
    assert result.imported == ["fresh"]
    assert populated_store.get("work").api_key == "sk-1"


def test_import_overwrite_policy_keeps_created_at(populated_store, work_profile):
    original = populated_store.get("work")
    snapshot = {
        "profiles": [{**work_profile, "apiKey": "sk-new", "createdAt": "2020-01-01T00:00:00.000Z"}],
        "exportedAt": "2024-05-01T00:00:00.000Z",
        "version": "1.0.0",
    }
    result = populated_store.import_profiles(snapshot, "overwrite")

    assert result.overwritten == ["work"]
    stored = populated_store.get("work")
    assert stored.api_key == "sk-new"
    assert stored.created_at == original.created_at
    assert list(populated_store.load().profiles) == ["work", "cn", "local"]


def test_import_rename_policy(populated_store, work_profile):
    snapshot = {
        "profiles": [
            {**work_profile, "apiKey": "sk-a"},
            {**work_profile, "apiKey": "sk-b"},
        ],
        "exportedAt": "2024-05-01T00:00:00.000Z",
        "version": "1.0.0",
    }
    result = populated_store.import_profiles(snapshot, ConflictPolicy.RENAME)

    assert result.renamed == [("work", "work-2"), ("work", "work-3")]
    assert result.imported == ["work-2", "work-3"]
    assert populated_store.get("work").api_key == "sk-1"
    assert populated_store.get("work-2").api_key == "sk-a"
    assert populated_store.get("work-3").api_key == "sk-b"


def test_import_overwrite_reports_repeated_names_once(populated_store, work_profile):
    snapshot = {
        "profiles": [
            {**work_profile, "apiKey": "sk-a"},
            {**work_profile, "apiKey": "sk-b"},
            {**work_profile, "name": "fresh", "apiKey": "sk-c"},
            {**work_profile, "name": "fresh", "apiKey": "sk-d"},
        ],
        "exportedAt": "2024-05-01T00:00:00.000Z",
        "version": "1.0.0",
    }
    result = populated_store.import_profiles(snapshot, ConflictPolicy.OVERWRITE)

    assert result.imported == ["work", "fresh"]
    assert result.overwritten == ["work"]
    assert populated_store.get("work").api_key == "sk-b"
    assert populated_store.get("fresh").api_key == "sk-d"
    assert list(populated_store.load().profiles) == ["work", "cn", "local", "fresh"]


def test_import_skip_keeps_first_of_repeated_names(profile_store, work_profile):
    snapshot = {
        "profiles": [
            {**work_profile, "apiKey": "sk-a"},
            {**work_profile, "apiKey": "sk-b"},
        ],
        "exportedAt": "2024-05-01T00:00:00.000Z",
        "version": "1.0.0",
    }
    result = profile_store.import_profiles(snapshot)

    assert result.imported == ["work"]
    assert result.skipped == ["work"]
    assert profile_store.get("work").api_key == "sk-a"


def test_import_is_all_or_nothing_on_validation(populated_store, work_profile, config_path):
    before = config_path.read_text(encoding="utf-8")
    snapshot = {
        "profiles": [
            {**work_profile, "name": "good"},
            {**work_profile, "name": "bad", "baseURL": "nope"},
            {**work_profile, "name": "worse", "model": ""},
        ],
        "exportedAt": "2024-05-01T00:00:00.000Z",
        "version": "1.0.0",
    }
    with pytest.raises(ValidationError) as excinfo:
        populated_store.import_profiles(snapshot, ConflictPolicy.OVERWRITE)

    assert excinfo.value.paths == ["profiles[1].baseURL", "profiles[2].model"]
    assert config_path.read_text(encoding="utf-8") == before
    assert not populated_store.exists("good")


def test_sanitized_import_is_refused_by_default(populated_store, other_store):
    snapshot = dump_record(populated_store.export(sanitize=True))
    with pytest.raises(ValidationError) as excinfo:
        other_store.import_profiles(snapshot)
    assert excinfo.value.paths == ["sanitized"]
    assert other_store.list_profiles() == []

    result = other_store.import_profiles(snapshot, allow_sanitized=True)
    assert len(result.imported) == 3
    assert other_store.get("work").api_key == REDACTED_MARKER


def test_import_with_nothing_new_does_not_write(populated_store, config_path, work_profile):
    before = config_path.read_text(encoding="utf-8")
    snapshot = {
        "profiles": [work_profile],
        "exportedAt": "2024-05-01T00:00:00.000Z",
        "version": "1.0.0",
    }
    result = populated_store.import_profiles(snapshot)
    assert result.imported == []
    assert config_path.read_text(encoding="utf-8") == before


def test_import_from_missing_file(profile_store, tmp_path):
    with pytest.raises(NotFoundError):
        profile_store.import_from_file(tmp_path / "missing.json")


def test_import_from_invalid_json(profile_store, tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{]", encoding="utf-8")
    with pytest.raises(ConfigParseError):
        profile_store.import_from_file(broken)


def test_inspect_export_file(populated_store, tmp_path):
    target = tmp_path / "export.json"
    populated_store.export_to_file(target, ["work"], sanitize=True)

    summary = populated_store.inspect_export_file(target)
    assert summary.valid is True
    assert summary.profile_count == 1
    assert summary.sanitized is True

    missing = populated_store.inspect_export_file(tmp_path / "nope.json")
    assert missing.valid is False
    assert "not found" in missing.error

    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"profiles": "nope"}), encoding="utf-8")
    invalid = populated_store.inspect_export_file(broken)
    assert invalid.valid is False
    assert invalid.error
