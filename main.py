#!/usr/bin/env python3
"""
Product Catalog -- command-line client.

Talks to a running catalog API and keeps the login session in a small JSON
file so later commands reuse the token.

Usage:
  python main.py register --email a@b.com --name "A"
  python main.py login --email a@b.com
  python main.py whoami
  python main.py list
  python main.py create --name Widget --price 9.50 --description "Blue widget"
  python main.py show <product-id>
  python main.py update <product-id> --price 12
  python main.py delete <product-id>
  python main.py logout

Environment variables:
  CATALOG_API_URL       Base URL of the API (default: http://localhost:8000)
  CATALOG_SESSION_FILE  Where the session is stored (default: ~/.catalog/session.json)
"""

import argparse
import getpass
import os
from pathlib import Path
from typing import Any, Optional

from client.api import DEFAULT_BASE_URL, CatalogAPIError, CatalogClient
from client.state import SessionFile
from client.validation import check_login, check_product, check_registration, parse_price

_DEFAULT_SESSION_FILE = Path.home() / ".catalog" / "session.json"


def _fail(message: str) -> int:
    print(f"  [!] {message}")
    return 1


def _format_product(p: dict[str, Any]) -> str:
    desc = p.get("description") or ""
    line = f"  {p['id']}  {p['name']:<30} {p['price']:>10.2f}"
    return f"{line}  {desc}" if desc else line


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_register(client: CatalogClient, session: SessionFile, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    confirm = args.password or getpass.getpass("Confirm password: ")
    problem = check_registration(args.name, args.email, password, confirm)
    if problem:
        return _fail(problem)
    try:
        user = client.register(args.email, password, args.name)
    except CatalogAPIError as e:
        return _fail(e.message)
    session.save(client.auth)
    print(f"  Registered and logged in as {user.name} <{user.email}>.")
    return 0


def cmd_login(client: CatalogClient, session: SessionFile, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    problem = check_login(args.email, password)
    if problem:
        return _fail(problem)
    try:
        user = client.login(args.email, password)
    except CatalogAPIError as e:
        return _fail(e.message)
    session.save(client.auth)
    print(f"  Logged in as {user.name} <{user.email}>.")
    return 0


def cmd_logout(client: CatalogClient, session: SessionFile, args: argparse.Namespace) -> int:
    client.logout()
    session.clear()
    print("  Logged out.")
    return 0


def cmd_whoami(client: CatalogClient, session: SessionFile, args: argparse.Namespace) -> int:
    if client.auth.user is None:
        return _fail("Not logged in.")
    print(f"  {client.auth.user.name} <{client.auth.user.email}> (id {client.auth.user.id})")
    return 0


def cmd_list(client: CatalogClient, session: SessionFile, args: argparse.Namespace) -> int:
    products = client.fetch_products()
    if client.products.error:
        return _fail(client.products.error)
    if not products:
        print("  No products yet. Add one with: python main.py create --name ... --price ...")
        return 0
    for p in products:
        print(_format_product(p))
    print(f"\n  {len(products)} product(s).")
    return 0


def cmd_show(client: CatalogClient, session: SessionFile, args: argparse.Namespace) -> int:
    try:
        p = client.get_product(args.id)
    except CatalogAPIError as e:
        return _fail(e.message)
    print(f"  id:          {p['id']}")
    print(f"  name:        {p['name']}")
    print(f"  description: {p.get('description') or '-'}")
    print(f"  price:       {p['price']:.2f}")
    print(f"  created:     {p['createdAt']}")
    print(f"  updated:     {p['updatedAt']}")
    return 0


def cmd_create(client: CatalogClient, session: SessionFile, args: argparse.Namespace) -> int:
    problem = check_product(args.name, args.price)
    if problem:
        return _fail(problem)
    try:
        p = client.create_product(args.name, args.description, parse_price(args.price))
    except CatalogAPIError as e:
        return _fail(e.message)
    print(f"  Created {p['id']}.")
    return 0


def cmd_update(client: CatalogClient, session: SessionFile, args: argparse.Namespace) -> int:
    fields: dict[str, Any] = {}
    if args.name is not None:
        fields["name"] = args.name
    if args.description is not None:
        fields["description"] = args.description
    if args.price is not None:
        price = parse_price(args.price)
        if price is None:
            return _fail("Price must be a valid number")
        fields["price"] = price
    if not fields:
        return _fail("Nothing to update. Pass --name, --description, or --price.")
    try:
        p = client.update_product(args.id, **fields)
    except CatalogAPIError as e:
        return _fail(e.message)
    print(f"  Updated {p['id']}.")
    return 0


def cmd_delete(client: CatalogClient, session: SessionFile, args: argparse.Namespace) -> int:
    if not args.yes:
        answer = input("  Are you sure you want to delete this product? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("  Cancelled.")
            return 0
    try:
        client.delete_product(args.id)
    except CatalogAPIError as e:
        return _fail(e.message)
    print(f"  Deleted {args.id}.")
    return 0


_COMMANDS = {
    "register": cmd_register,
    "login": cmd_login,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
    "list": cmd_list,
    "show": cmd_show,
    "create": cmd_create,
    "update": cmd_update,
    "delete": cmd_delete,
}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog",
        description="Manage your products in a Product Catalog server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py register --email a@b.com --name "A"
  python main.py create --name Widget --price 9.50
  CATALOG_API_URL=https://catalog.example.com python main.py list
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("register", help="Create an account and log in")
    p.add_argument("--email", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--password", help="Password (prompted if omitted)")

    p = sub.add_parser("login", help="Log in and store the session")
    p.add_argument("--email", required=True)
    p.add_argument("--password", help="Password (prompted if omitted)")

    sub.add_parser("logout", help="Forget the stored session")
    sub.add_parser("whoami", help="Show the logged-in user")
    sub.add_parser("list", help="List your products")

    p = sub.add_parser("show", help="Show one product")
    p.add_argument("id", metavar="PRODUCT-ID")

    p = sub.add_parser("create", help="Create a product")
    p.add_argument("--name", required=True)
    p.add_argument("--price", required=True)
    p.add_argument("--description", default="")

    p = sub.add_parser("update", help="Change name, description, or price")
    p.add_argument("id", metavar="PRODUCT-ID")
    p.add_argument("--name")
    p.add_argument("--description")
    p.add_argument("--price")

    p = sub.add_parser("delete", help="Delete a product")
    p.add_argument("id", metavar="PRODUCT-ID")
    p.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    base_url = os.environ.get("CATALOG_API_URL") or DEFAULT_BASE_URL
    session = SessionFile(Path(os.environ.get("CATALOG_SESSION_FILE") or _DEFAULT_SESSION_FILE))
    client = CatalogClient(base_url, auth=session.load())
    return _COMMANDS[args.command](client, session, args)


if __name__ == "__main__":
    raise SystemExit(main())
