# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
import time

from mindful_youth.utils.schedulers.cleanup.forum_counter_reconciler import reconcile_forum_counters


logger = logging.getLogger("maintenance")


def run_all_cleanups():
    logger.info("🧹 Starting all maintenance tasks...")

    cleanup_tasks = [
        ("ForumCounters", reconcile_forum_counters),
    ]

    for name, func in cleanup_tasks:
        start = time.time()
        try:
            logger.info(f"🔹 Running maintenance: {name}")
            func()
            duration = round(time.time() - start, 2)
            logger.info(f"✅ Completed {name} in {duration} sec.")
        except Exception as e:
            logger.error(f"🛑 {name} failed: {e}", exc_info=True)

    logger.info("🎉 All maintenance jobs completed.")
