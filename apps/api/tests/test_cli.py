"""Tests for the admin CLI."""

import json

import pytest
from click.testing import CliRunner

from namingops import cli as cli_module
from namingops.db.models import FormConfiguration, User


@pytest.fixture
def runner(db, monkeypatch):
    monkeypatch.setattr(cli_module, "SessionLocal", lambda: db)
    return CliRunner()


def test_create_user(runner, db):
    result = runner.invoke(
        cli_module.cli,
        ["create-user", "--email", "Admin@Example.com", "--name", "Admin", "--role", "admin"],
    )
    assert result.exit_code == 0
    assert "✓ Created user admin@example.com (admin)" in result.output
    assert db.query(User).filter(User.email == "admin@example.com").one().role == "admin"

    again = runner.invoke(
        cli_module.cli, ["create-user", "--email", "admin@example.com", "--name", "Admin"]
    )
    assert "❌" in again.output


def test_revoke_sessions(runner, db, submitter_user):
    # The command closes the session, detaching fixture objects
    user_id, email = submitter_user.id, submitter_user.email
    before = submitter_user.token_version

    result = runner.invoke(cli_module.cli, ["revoke-sessions", "--email", email])
    assert "✓ Revoked" in result.output
    assert db.get(User, user_id).token_version == before + 1

    missing = runner.invoke(cli_module.cli, ["revoke-sessions", "--email", "nobody@example.com"])
    assert "User not found" in missing.output


def test_seed_default_form(runner, db):
    result = runner.invoke(cli_module.cli, ["seed-form-config"])
    assert result.exit_code == 0
    assert "(active)" in result.output

    config = db.query(FormConfiguration).one()
    assert config.is_active is True
    assert config.fields_json[1]["name"] == "requestTitle"


def test_seed_from_file_inactive(runner, db, tmp_path):
    path = tmp_path / "form.json"
    path.write_text(
        json.dumps(
            {
                "name": "From File",
                "isActive": True,
                "fields": [{"name": "title", "label": "Title", "type": "text"}],
            }
        ),
        encoding="utf-8",
    )
    result = runner.invoke(cli_module.cli, ["seed-form-config", "--file", str(path), "--no-activate"])
    assert "(inactive)" in result.output


def test_seed_rejects_invalid_file(runner, db, tmp_path):
    path = tmp_path / "form.json"
    path.write_text(json.dumps({"name": "Broken", "fields": []}), encoding="utf-8")
    result = runner.invoke(cli_module.cli, ["seed-form-config", "--file", str(path)])
    assert "❌ Invalid form configuration" in result.output
    assert db.query(FormConfiguration).count() == 0


def test_list_and_activate(runner, db, active_config):
    active_id = active_config.id
    runner.invoke(cli_module.cli, ["seed-form-config", "--no-activate"])
    seeded_id = (
        db.query(FormConfiguration).filter(FormConfiguration.is_active.is_(False)).one().id
    )

    listing = runner.invoke(cli_module.cli, ["list-form-configs"])
    assert f"* {active_id}" in listing.output

    result = runner.invoke(cli_module.cli, ["activate-form-config", str(seeded_id)])
    assert "✓ Activated" in result.output

    db.expire_all()
    active = db.query(FormConfiguration).filter(FormConfiguration.is_active.is_(True)).all()
    assert [c.id for c in active] == [seeded_id]


def test_activate_unknown(runner, db):
    result = runner.invoke(
        cli_module.cli, ["activate-form-config", "00000000-0000-0000-0000-000000000000"]
    )
    assert "❌" in result.output
