#!/usr/bin/env python3
"""
Create or promote an admin account.

Usage:
    python seed_admin.py --email admin@example.com --password 'a long password'
    python seed_admin.py --email someone@example.com --promote

The email and password may also come from ADMIN_EMAIL / ADMIN_PASSWORD.
An existing account is promoted to admin (and its password replaced when
one is given). A missing account is created as a verified admin unless
--promote is passed.
"""

import argparse
import asyncio
import os
import sys

from rich.console import Console
from rich.table import Table

from shared.exceptions import PinnacleError
from modules.accounts.models import Account
from modules.accounts.service import get_account_service

console = Console()


def show_account(account: Account) -> None:
    table = Table(title="Admin Account")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Email", account.email)
    table.add_row("Account ID", account.account_id)
    table.add_row("Role", account.role.value)
    table.add_row("Verification", account.verification_status.value)
    console.print(table)


async def seed(email: str, password: str | None, promote_only: bool) -> Account:
    service = get_account_service()
    return await service.ensure_admin(email, password, promote_only=promote_only)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Create or promote a Pinnacle Metals admin account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python seed_admin.py --email admin@example.com --password secret123   Create or promote
  python seed_admin.py --email admin@example.com --promote              Promote existing only
        """
    )
    parser.add_argument(
        "--email",
        default=os.environ.get("ADMIN_EMAIL"),
        help="Admin email (default: ADMIN_EMAIL)"
    )
    parser.add_argument(
        "--password",
        default=os.environ.get("ADMIN_PASSWORD"),
        help="Admin password (default: ADMIN_PASSWORD)"
    )
    parser.add_argument(
        "--promote",
        action="store_true",
        help="Only promote an existing account; never create one"
    )

    args = parser.parse_args()

    console.print("[bold]Pinnacle Metals Admin Seed[/bold]")
    console.print()

    if not args.email:
        console.print("[red]Error:[/red] --email or ADMIN_EMAIL is required.")
        sys.exit(1)
    if not args.promote and not args.password:
        console.print("[yellow]Warning:[/yellow] No password given; only an existing account can be promoted.")

    try:
        account = asyncio.run(seed(args.email, args.password, args.promote))
    except PinnacleError as e:
        console.print(f"[red]✗[/red] {e.message}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] {account.email} is an admin")
    show_account(account)


if __name__ == "__main__":
    main()
