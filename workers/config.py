# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Applied with celery_app.config_from_object("workers.config:CeleryConfig").
#
# Poster generation goes to its own queue so a slow Kie task never blocks
# anything else. Time limits follow the Kie polling settings: a task may
# poll KIE_POLL_MAX_ATTEMPTS times, KIE_POLL_INTERVAL_SECONDS apart.
# =============================================================================

from app.config import settings

DEFAULT_QUEUE = "default"
GENERATION_QUEUE = "ai_tasks"

GENERATION_TASK = "workers.tasks.generate_poster"

# Kie polling budget plus one minute for uploads, history and debit
GENERATION_SOFT_LIMIT = int(settings.KIE_POLL_MAX_ATTEMPTS * settings.KIE_POLL_INTERVAL_SECONDS) + 60


class CeleryConfig:
    """Celery settings for the poster worker."""

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # Redelivered only if the worker dies mid-task; one task per process
    task_acks_late = True
    worker_prefetch_multiplier = 1

    # STARTED is reported by GET /tasks/{id}
    task_track_started = True

    # Results (including failures returned as {"success": False}) live one hour
    result_expires = 3600

    # Soft limit raises SoftTimeLimitExceeded inside the task, hard limit kills it
    task_soft_time_limit = GENERATION_SOFT_LIMIT
    task_time_limit = GENERATION_SOFT_LIMIT + 60

    # Requests are JSON dumps of GenerateImageRequest
    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    task_default_queue = DEFAULT_QUEUE
    task_queues = {
        DEFAULT_QUEUE: {"exchange": DEFAULT_QUEUE, "routing_key": DEFAULT_QUEUE},
        GENERATION_QUEUE: {"exchange": GENERATION_QUEUE, "routing_key": GENERATION_QUEUE},
    }
    task_routes = {GENERATION_TASK: {"queue": GENERATION_QUEUE}}

    # A run may have debited credits: never retried automatically
    task_annotations = {GENERATION_TASK: {"max_retries": 0}}

    # Task events for Flower
    worker_send_task_events = True
    task_send_sent_event = True

    timezone = "UTC"
    enable_utc = True
