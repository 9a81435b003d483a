"""
Command-line front end for the portal client.

    portal-client login admin
    portal-client list --name Smith
    portal-client create customer.json
    portal-client update 12 customer.json
    portal-client delete 12
    portal-client logout

The session token is kept in PORTAL_SESSION_FILE between invocations.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import sys
from pathlib import Path

from app.client.api import PortalAPI
from app.client.controller import FileTokenStore, PortalController
from app.client.render import render
from app.client.state import View
from app.core.config import settings
from app.core.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portal-client", description="Employee portal client")
    parser.add_argument("--url", default=settings.PORTAL_URL, help="Portal base URL")
    parser.add_argument("--session-file", default=settings.PORTAL_SESSION_FILE)
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Sign in and remember the session")
    login.add_argument("username")
    login.add_argument("--password", help="Prompted for when omitted")

    sub.add_parser("logout", help="Sign out and forget the session")

    listing = sub.add_parser("list", help="List customers, optionally filtered")
    listing.add_argument("--name", default="", help="Match on insured name (takes priority)")
    listing.add_argument("--policy", default="", help="Match on policy number")

    show = sub.add_parser("show", help="Load one customer into the form")
    show.add_argument("customer_id", type=int)

    create = sub.add_parser("create", help="Create a customer from a JSON file")
    create.add_argument("file", type=Path)

    update = sub.add_parser("update", help="Replace a customer with a JSON file")
    update.add_argument("customer_id", type=int)
    update.add_argument("file", type=Path)

    delete = sub.add_parser("delete", help="Delete a customer")
    delete.add_argument("customer_id", type=int)
    delete.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    return parser


def _read_record(path: Path) -> dict:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise SystemExit(f"{path}: expected a JSON object")
    return data


async def run(args: argparse.Namespace) -> int:
    async with PortalAPI(args.url) as api:
        controller = PortalController(api, FileTokenStore(args.session_file))

        if args.command == "login":
            password = args.password or getpass.getpass("Password: ")
            state = await controller.login(args.username, password)
            print(render(state))
            return 0 if state.view is View.WORKSPACE else 1

        state = await controller.start()
        if state.view is View.LOGIN:
            if args.command != "logout":
                print("Not logged in. Run: portal-client login <username>")
            return 1 if args.command != "logout" else 0

        show_form = False
        if args.command == "logout":
            state = await controller.logout()
            print("Logged out.")
            return 0
        elif args.command == "list":
            state = await controller.search(args.name, args.policy)
        elif args.command == "show":
            state = controller.select(args.customer_id)
            show_form = True
        elif args.command == "create":
            controller.new_record()
            controller.edit(**_read_record(args.file))
            state = await controller.save()
        elif args.command == "update":
            state = controller.select(args.customer_id)
            if state.editing_id is not None:
                controller.edit(**_read_record(args.file))
                state = await controller.save()
        elif args.command == "delete":
            state = controller.select(args.customer_id)
            if state.editing_id is not None:
                if not args.yes and input("Are you sure you want to delete this customer? [y/N] ").lower() != "y":
                    return 1
                state = await controller.delete()

        print(render(state, show_form=show_form))
        return 1 if state.view is View.LOGIN or state.form_error else 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "WARNING", json_logs=False)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
