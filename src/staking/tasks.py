import logging

import utils.locking as lock
from cryptofolio.celery import QUEUE_STAKING, app
from staking.services import StakingService
from utils.sentry import log_info

logger = logging.getLogger(__name__)


@app.task(queue=QUEUE_STAKING)
def accrue_staking_rewards():
    """
    Daily reward sweep over every active staking position.
    Only one sweep runs at a time.
    """
    key = lock.name("accrue_staking_rewards")
    with lock.held(key) as acquired:
        if not acquired:
            logger.warning(f"Already locked {key}, skipping task")
            return False

        result = StakingService().sweep_all_active_positions()

    if result["error_count"]:
        log_info(
            f"Staking reward sweep finished with {result['error_count']} errors",
            extra={"errors": result["errors"]},
        )
    return result
