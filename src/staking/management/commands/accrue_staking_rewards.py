"""
Accrues rewards for all active staking positions.
Runs the same sweep as the daily celery task.
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from staking.models import StakingPosition
from staking.services import StakingService


class Command(BaseCommand):
    help = "Accrue rewards for all active staking positions"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show pending rewards without crediting them",
        )

    def handle(self, *args, **options):
        service = StakingService()

        if options["dry_run"]:
            self._dry_run(service)
            return

        self.stdout.write("Accruing staking rewards...")
        result = service.sweep_all_active_positions()

        for error in result["errors"]:
            self.stdout.write(
                self.style.ERROR(
                    f"  Position {error['position_id']}: {error['message']}"
                )
            )

        self.stdout.write(
            self.style.SUCCESS(
                f"Updated {result['updated_count']} of "
                f"{result['total_positions']} positions "
                f"({result['error_count']} errors)"
            )
        )

    def _dry_run(self, service):
        self.stdout.write(self.style.WARNING("DRY RUN: no rewards will be credited"))

        now = timezone.now()
        positions = list(StakingPosition.objects.active().order_by("id"))
        plans = service.get_plans_for_positions(positions)

        for position in positions:
            plan = plans.get(position.plan_id)
            if plan is None:
                self.stdout.write(
                    self.style.ERROR(f"  Position {position.id}: plan not found")
                )
                continue

            details = service.get_position_details(position, plan=plan, now=now)
            self.stdout.write(
                f"  Position {position.id}: {details['pending_reward']} "
                f"{position.coin_id} pending"
            )

        self.stdout.write(f"{len(positions)} active positions")
