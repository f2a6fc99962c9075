"""
seed_catalog.py
---------------
Seeds (creates or updates) the salon catalog: services and stylists.
Safe to run any time; rows are upserted by id.

Usage:
    python manage.py seed_catalog
    python manage.py seed_catalog --with-demo-users
"""

from django.core.management.base import BaseCommand

from booking.services.catalog import seed_catalog


class Command(BaseCommand):
    help = "Seed or update the service/stylist catalog."

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-demo-users",
            action="store_true",
            help="Also register the demo customer (9876543210) and admin (9998887776).",
        )

    def handle(self, *args, **options):
        result = seed_catalog(with_demo_users=options["with_demo_users"])
        self.stdout.write(self.style.SUCCESS(
            f"Seed complete. Created={result['created']}, Updated={result['updated']}"
        ))
