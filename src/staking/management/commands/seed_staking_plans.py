"""
Installs the default staking plan catalog.
Plans are matched by name, so running it again updates them in place.
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from staking.models import StakingPlan
from staking.related_models.constants.staking import (
    DEFAULT_STAKING_PLANS,
    DEFAULT_SUPPORTED_COINS,
)


class Command(BaseCommand):
    help = "Seed the default staking plans"

    def add_arguments(self, parser):
        parser.add_argument(
            "--coins",
            nargs="+",
            default=DEFAULT_SUPPORTED_COINS,
            help="Asset ids supported by the seeded plans",
        )

    def handle(self, *args, **options):
        coins = options["coins"]
        created_count = 0

        with transaction.atomic():
            for plan_data in DEFAULT_STAKING_PLANS:
                plan, created = StakingPlan.objects.update_or_create(
                    name=plan_data["name"],
                    defaults={
                        **plan_data,
                        "supported_coins": coins,
                        "is_active": True,
                    },
                )
                if created:
                    created_count += 1
                    self.stdout.write(f"  + {plan.name} ({plan.apy}% APY)")
                else:
                    self.stdout.write(f"  ~ {plan.name} ({plan.apy}% APY)")

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(DEFAULT_STAKING_PLANS)} staking plans "
                f"({created_count} new)"
            )
        )
