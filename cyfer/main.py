#!/usr/bin/env python3
"""Command-line interface for the cyfer vault."""

import argparse
import getpass
import logging
import sys
from typing import Optional

from .config import VAULT_PATH_ENV, configure_logging, resolve_vault_path
from .exceptions import (
    CorruptVault,
    CyferError,
    IncorrectPassword,
    ServiceNotFound,
    VaultAlreadyExists,
    VaultConflict,
    VaultNotFound,
)
from .manager import VaultManager
from .models import SecretBundle

logger = logging.getLogger("cyfer.cli")

# Exit status per error kind; anything else exits with 1
EXIT_CODES = {
    IncorrectPassword: 2,
    ServiceNotFound: 3,
    VaultNotFound: 4,
    VaultAlreadyExists: 5,
    CorruptVault: 6,
    VaultConflict: 7,
}


def exit_code_for(error: CyferError) -> int:
    """Map a vault error to the CLI exit status."""
    for kind, code in EXIT_CODES.items():
        if isinstance(error, kind):
            return code
    return 1


def get_manager(vault_path: Optional[str] = None) -> VaultManager:
    """Create a VaultManager for the explicit, configured or default path."""
    return VaultManager(resolve_vault_path(vault_path))


def prompt_master_password(prompt: str = "Enter master password: ") -> str:
    """Securely prompt for the master password."""
    return getpass.getpass(prompt)


def cmd_init(args) -> int:
    """Create a new vault with a master password."""
    manager = get_manager(args.vault)

    if manager.exists:
        print(f"Error: Vault already initialized at {manager.vault_path}")
        return EXIT_CODES[VaultAlreadyExists]

    password = prompt_master_password("Set master password: ")
    confirm = prompt_master_password("Confirm master password: ")

    if password != confirm:
        print("Error: Passwords do not match.")
        return 1

    manager.init(password)
    print(f"Vault initialized at {manager.vault_path}")
    return 0


def cmd_add(args) -> int:
    """Add or replace the secret for a service."""
    manager = get_manager(args.vault)
    password = prompt_master_password()

    username = input("Username: ")
    secret = getpass.getpass("Secret: ")
    notes = input("Notes (optional): ")

    bundle = SecretBundle(username=username, secret=secret, notes=notes or None)
    manager.add(password, args.service, bundle)
    print(f"Service added {args.service}")
    return 0


def cmd_get(args) -> int:
    """Show the stored secret for a service."""
    manager = get_manager(args.vault)
    password = prompt_master_password()

    bundle = manager.get(password, args.service)
    print(f"{bundle.username} , {bundle.secret}")
    if bundle.notes is not None:
        print(bundle.notes)
    return 0


def cmd_list(args) -> int:
    """List all stored services."""
    manager = get_manager(args.vault)
    password = prompt_master_password()

    for service in sorted(manager.list_services(password)):
        print(service)
    return 0


def cmd_delete(args) -> int:
    """Delete the secret for a service."""
    manager = get_manager(args.vault)
    password = prompt_master_password()

    manager.delete(password, args.service)
    print(f"Service deleted {args.service}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cyfer",
        description="Password-protected secret vault (Argon2id + AES-256-GCM)"
    )

    parser.add_argument(
        "-d", "--vault",
        help=f"Path to the vault file (default: ${VAULT_PATH_ENV} or the per-user data directory)",
        default=None
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr"
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        required=True
    )

    init_parser = subparsers.add_parser(
        "init",
        help="Create a new vault with a master password"
    )
    init_parser.set_defaults(func=cmd_init)

    add_parser = subparsers.add_parser(
        "add",
        help="Add or replace the secret for a service"
    )
    add_parser.add_argument("service", help="Service name (e.g., github, email)")
    add_parser.set_defaults(func=cmd_add)

    get_parser = subparsers.add_parser(
        "get",
        help="Show the secret for a service"
    )
    get_parser.add_argument("service", help="Service name to look up")
    get_parser.set_defaults(func=cmd_get)

    list_parser = subparsers.add_parser(
        "list",
        help="List all stored services"
    )
    list_parser.set_defaults(func=cmd_list)

    delete_parser = subparsers.add_parser(
        "delete",
        aliases=["del"],
        help="Delete the secret for a service"
    )
    delete_parser.add_argument("service", help="Service name")
    delete_parser.set_defaults(func=cmd_delete)

    return parser


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        sys.exit(args.func(args))
    except KeyboardInterrupt:
        print("\nOperation cancelled.")
        sys.exit(1)
    except CyferError as e:
        logger.debug("Command %s failed: %s", args.command, type(e).__name__)
        print(f"Error: {e}")
        sys.exit(exit_code_for(e))
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
