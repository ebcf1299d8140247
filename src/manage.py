"""WicketStore maintenance CLI.

Provides commands to create and drop database schemas for all domains and a
few catalogue and user maintenance jobs.

Usage:
    python src/manage.py setup-db                       # Create all tables
    python src/manage.py drop-db                        # Drop all tables
    python src/manage.py list-admins                    # Users with the admin role
    python src/manage.py list-products                  # Current catalogue
    python src/manage.py replace-products [--file F]    # Replace the whole catalogue
"""

import argparse
import json
import sys
from pathlib import Path

DOMAIN_NAMES = ["identity", "catalogue", "ordering"]


def _domains():
    from catalogue.domain import catalogue
    from identity.domain import identity
    from ordering.domain import ordering

    return {"identity": identity, "catalogue": catalogue, "ordering": ordering}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    all_domains = _domains()
    targets = {d: all_domains[d] for d in domains} if domains else all_domains

    for name, domain in targets.items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        providers = setup_db(domain)
        if providers:
            print(f"  {name} schema ready ({', '.join(providers)}).")
        else:
            print(f"  {name} uses no SQL database; nothing to create.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    all_domains = _domains()
    targets = {d: all_domains[d] for d in domains} if domains else all_domains

    for name, domain in targets.items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        providers = drop_db(domain)
        if providers:
            print(f"  {name} schema dropped ({', '.join(providers)}).")
        else:
            print(f"  {name} uses no SQL database; nothing to drop.")

    print("Done.")


def list_admins():
    from identity.domain import identity
    from identity.user.queries import list_admins as admins_query

    identity.init()
    with identity.domain_context():
        admins = admins_query()

    if not admins:
        print("No admin users.")
        return admins

    for user in admins:
        print(f"{user.id}\t{user.email}\t{user.display_name or ''}")
    return admins


def list_products():
    from catalogue.domain import catalogue
    from catalogue.product.browse import browse_products

    catalogue.init()
    with catalogue.domain_context():
        products = browse_products()

    for product in products:
        print(f"{product.id}\t{product.name}\t{product.price:.2f}\t{product.discount}% off")
    print(f"{len(products)} product(s).")
    return products


def replace_products(path=None):
    """Delete every product and load a new catalogue from ``path`` (or the bundled seed)."""
    from catalogue.domain import catalogue
    from catalogue.product.creation import ReplaceCatalogue
    from catalogue.seed import SEED_PRODUCTS

    products = json.loads(Path(path).read_text(encoding="utf-8")) if path else SEED_PRODUCTS

    catalogue.init()
    with catalogue.domain_context():
        product_ids = catalogue.process(
            ReplaceCatalogue(products=json.dumps(products)),
            asynchronous=False,
        )

    print(f"Catalogue replaced with {len(product_ids)} product(s).")
    return product_ids


def main(argv=None):
    parser = argparse.ArgumentParser(description="WicketStore maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    subparsers.add_parser("list-admins", help="List users with the admin role")
    subparsers.add_parser("list-products", help="List the current catalogue")

    replace_parser = subparsers.add_parser("replace-products", help="Replace every product in the catalogue")
    replace_parser.add_argument(
        "--file",
        help="JSON file with a list of products (default: bundled cricket catalogue)",
    )

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "list-admins":
        list_admins()
    elif args.command == "list-products":
        list_products()
    elif args.command == "replace-products":
        replace_products(args.file)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
