"""CLI tools for NamingOps administration."""

import json
from uuid import UUID

import click
from pydantic import ValidationError

from namingops.db.enums import Role
from namingops.db.session import SessionLocal
from namingops.schemas.form_config import FormConfigurationCreate
from namingops.services import form_config_service, user_service

SEED_FORM_CONFIG = {
    "name": "Default Naming Request Form",
    "description": "Starter configuration for naming requests",
    "isActive": True,
    "fields": [
        {
            "type": "content",
            "content": "Tell us what needs a name. Reviewers will follow up if anything is unclear.",
        },
        {
            "name": "requestTitle",
            "label": "Request Title",
            "type": "text",
            "required": True,
            "placeholder": "Enter a short title",
            "validation": {"minLength": 3, "maxLength": 100},
        },
        {
            "name": "proposedName1",
            "label": "Proposed Name",
            "type": "text",
            "required": False,
            "geminiSuggest": True,
            "geminiEvaluate": True,
        },
        {
            "name": "description",
            "label": "Description",
            "type": "textarea",
            "required": True,
            "placeholder": "Describe the product, service or initiative",
            "validation": {"minLength": 10, "maxLength": 2000},
        },
        {
            "name": "projectType",
            "label": "Project Type",
            "type": "select",
            "required": True,
            "options": ["Product", "Service", "Feature", "Program", "Other"],
            "defaultValue": "Product",
        },
        {
            "name": "contactEmail",
            "label": "Contact Email",
            "type": "email",
            "required": True,
            "placeholder": "your.email@example.com",
        },
        {
            "name": "externalFacing",
            "label": "Customer facing",
            "type": "checkbox",
        },
    ],
}


@click.group()
def cli():
    """NamingOps CLI tools."""
    pass


@cli.command()
@click.option("--email", required=True, help="User email address")
@click.option("--name", required=True, help="Display name")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    default=Role.SUBMITTER.value,
    show_default=True,
)
def create_user(email: str, name: str, role: str):
    """
    Create a user.

    Example:
        python -m namingops.cli create-user --email admin@acme.com --name "Admin" --role admin
    """
    db = SessionLocal()
    try:
        user = user_service.create_user(db, email=email, name=name, role=Role(role))
        click.echo(f"✓ Created user {user.email} ({user.role})")
        click.echo(f"  ID: {user.id}")
    except ValueError as e:
        click.echo(f"❌ {e}")
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User email to revoke sessions for")
def revoke_sessions(email: str):
    """Revoke all sessions for a user by bumping token_version."""
    db = SessionLocal()
    try:
        user = user_service.get_user_by_email(db, email)
        if not user:
            click.echo(f"❌ User not found: {email}")
            return
        user_service.revoke_all_sessions(db, user.id)
        click.echo(f"✓ Revoked all sessions for {email}")
    finally:
        db.close()


@cli.command()
@click.option(
    "--file",
    "path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON file with a form configuration (defaults to the built-in starter form)",
)
@click.option("--activate/--no-activate", default=None, help="Override isActive from the file")
def seed_form_config(path: str | None, activate: bool | None):
    """Create a form configuration from JSON (or the starter form)."""
    if path:
        with open(path, encoding="utf-8") as fh:
            payload = json.load(fh)
    else:
        payload = dict(SEED_FORM_CONFIG)
    if activate is not None:
        payload["isActive"] = activate

    try:
        data = FormConfigurationCreate.model_validate(payload)
    except ValidationError as e:
        click.echo(f"❌ Invalid form configuration:\n{e}")
        return

    db = SessionLocal()
    try:
        config = form_config_service.create_form_configuration(db, data)
        state = "active" if config.is_active else "inactive"
        click.echo(f"✓ Created form configuration '{config.name}' ({state})")
        click.echo(f"  ID: {config.id}")
    except ValueError as e:
        click.echo(f"❌ {e}")
    finally:
        db.close()


@cli.command()
def list_form_configs():
    """List form configurations, newest first."""
    db = SessionLocal()
    try:
        configs = form_config_service.list_form_configurations(db)
        if not configs:
            click.echo("No form configurations")
            return
        for config in configs:
            marker = "*" if config.is_active else " "
            click.echo(
                f"{marker} {config.id}  {config.name}  ({len(config.fields_json or [])} fields)"
            )
    finally:
        db.close()


@cli.command()
@click.argument("config_id", type=click.UUID)
def activate_form_config(config_id: UUID):
    """Activate a form configuration and deactivate all others."""
    db = SessionLocal()
    try:
        config = form_config_service.activate_form_configuration(db, config_id)
        click.echo(f"✓ Activated '{config.name}'")
    except form_config_service.FormConfigNotFoundError as e:
        click.echo(f"❌ {e}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
