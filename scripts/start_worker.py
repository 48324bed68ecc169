#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Poster Worker Launcher
# =============================================================================
# Runs a Celery worker on both queues (default + ai_tasks) after loading .env
# into the process environment.
#
# Usage (from the project root, with the package installed: pip install -e .):
#   python scripts/start_worker.py
#   python scripts/start_worker.py --concurrency=4
#
# Extra arguments are passed to `celery worker` unchanged.
#
# Prerequisites:
#   - Redis reachable at REDIS_URL
#   - SUPABASE_* and KIE_AI_API_KEY set (.env or environment)
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

DEFAULT_ARGS = ["--loglevel=info", "--concurrency=2"]


def worker_argv(extra: list[str]) -> list[str]:
    """`celery worker` arguments: both queues, defaults unless overridden."""
    from workers.config import DEFAULT_QUEUE, GENERATION_QUEUE

    overridden = {arg.split("=")[0] for arg in extra}
    defaults = [arg for arg in DEFAULT_ARGS if arg.split("=")[0] not in overridden]
    return ["worker", f"--queues={DEFAULT_QUEUE},{GENERATION_QUEUE}", *defaults, *extra]


def main() -> None:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    from workers.celery_app import celery_app

    argv = worker_argv(sys.argv[1:])
    logging.getLogger("start_worker").info(f"Starting Graphiste GPT worker: celery {' '.join(argv)}")
    celery_app.worker_main(argv)


if __name__ == "__main__":
    main()
