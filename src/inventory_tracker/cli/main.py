import asyncio
import logging

import typer
from tortoise import Tortoise

from ..core.config import TORTOISE_ORM_CONFIG
from ..features.auth.models import ROLE_ADMIN, User
from ..features.auth.security import get_password_hash
from ..features.inventory.models import Category, Item
from ..features.sales.models import Sale

logger = logging.getLogger(__name__)

app = typer.Typer(name="inventory-tracker", help="CLI for managing Inventory Tracker data.")


# Shared async context manager for database connection
class DBConnection:
    async def __aenter__(self):
        await Tortoise.init(config=TORTOISE_ORM_CONFIG)
        await Tortoise.generate_schemas(safe=True)  # Generate schema if it doesn't exist
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()


# User management commands
user_app = typer.Typer(name="users", help="Manage user accounts.")
app.add_typer(user_app)


async def _get_user_or_exit(email: str) -> User:
    user = await User.get_or_none(email=email.strip().lower())
    if not user:
        typer.secho(f"Error: User with email '{email}' not found.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    return user


@user_app.command("create-admin")
def create_admin_user_command(
    name: str = typer.Option(..., prompt=True, help="Display name for the new admin."),
    email: str = typer.Option(..., prompt=True, help="Email for the new admin."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password for the new admin.")
):
    """Creates a new admin user."""
    asyncio.run(_create_admin_user(name, email, password))


async def _create_admin_user(name: str, email: str, password: str):
    """Async implementation for creating an admin user."""
    email = email.strip().lower()
    if len(password) < 6:
        typer.secho("Error: Password must be at least 6 characters long.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    async with DBConnection():
        typer.echo(f"Attempting to create admin user: {name} ({email})...")
        if await User.filter(email=email).exists():
            typer.secho(f"Error: User with email '{email}' already exists.", fg=typer.colors.RED)
            raise typer.Exit(code=1)

        admin_user = await User.create(
            name=name.strip(),
            email=email,
            hashed_password=get_password_hash(password),
            role=ROLE_ADMIN,
            is_active=True,
        )
        typer.secho(f"Admin user '{admin_user.email}' created successfully with ID: {admin_user.public_id}", fg=typer.colors.GREEN)


@user_app.command("promote-to-admin")
def promote_user_to_admin_command(
    email: str = typer.Argument(..., help="The email of the user to promote to admin.")
):
    """Promotes an existing user to the admin role."""
    asyncio.run(_promote_user_to_admin(email))


async def _promote_user_to_admin(email: str):
    async with DBConnection():
        user = await _get_user_or_exit(email)
        if user.role == ROLE_ADMIN:
            typer.secho(f"User '{email}' is already an admin.", fg=typer.colors.YELLOW)
            raise typer.Exit(code=0)
        if not user.is_active:
            typer.secho(f"Error: User '{email}' is currently inactive. Activate the user before promoting to admin.", fg=typer.colors.RED)
            raise typer.Exit(code=1)

        user.role = ROLE_ADMIN
        await user.save(update_fields=["role"])
        typer.secho(f"User '{email}' has been successfully promoted to admin.", fg=typer.colors.GREEN)


@user_app.command("disable-user")
def disable_user_account_command(
    email: str = typer.Argument(..., help="The email of the user to disable.")
):
    """Disables an existing user's account."""
    asyncio.run(_set_user_active(email, False))


@user_app.command("enable-user")
def enable_user_account_command(
    email: str = typer.Argument(..., help="The email of the user to enable.")
):
    """Enables an existing user's account."""
    asyncio.run(_set_user_active(email, True))


async def _set_user_active(email: str, active: bool):
    state = "active" if active else "inactive"
    async with DBConnection():
        user = await _get_user_or_exit(email)
        if user.is_active == active:
            typer.secho(f"User '{email}' is already {state}.", fg=typer.colors.YELLOW)
            raise typer.Exit(code=0)

        user.is_active = active
        await user.save(update_fields=["is_active"])
        typer.secho(f"User account '{email}' is now {state}.", fg=typer.colors.GREEN)


@app.command("check-db")
def check_db_command():
    """Tests the database connection and prints record counts."""
    asyncio.run(_check_db())


async def _check_db():
    async with DBConnection():
        typer.echo("Successfully connected to the database.")
        for label, model in (("user", User), ("category", Category), ("item", Item), ("sale", Sale)):
            count = await model.all().count()
            typer.echo(f"Found {count} {label} record(s).")


if __name__ == "__main__":
    app()
