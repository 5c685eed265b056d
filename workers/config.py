# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Settings specific to Celery workers and the beat schedule.
# =============================================================================

from app.config import settings

# Scheduled generations are checked on the same 5 minute grid they are
# defined on
SCHEDULE_CHECK_SECONDS = 300


class CeleryConfig:
    """
    Celery configuration settings.

    These are applied to the Celery app via app.config_from_object().
    """

    # -------------------------------------------------------------------------
    # Broker Settings (Redis)
    # -------------------------------------------------------------------------

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # Fail fast when Redis is down so the API can run the pipeline inline
    broker_connection_timeout = 3
    broker_transport_options = {"max_retries": 1}

    # -------------------------------------------------------------------------
    # Task Settings
    # -------------------------------------------------------------------------

    # Acknowledge tasks after they complete (not before)
    task_acks_late = True

    # Only prefetch one task at a time
    worker_prefetch_multiplier = 1

    # Task results expire after 1 hour
    result_expires = 3600

    # Article generation makes a dozen LLM and image calls
    task_time_limit = 900
    task_soft_time_limit = 840

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # -------------------------------------------------------------------------
    # Task Routing
    # -------------------------------------------------------------------------

    task_queues = {
        "default": {
            "exchange": "default",
            "routing_key": "default",
        },
        "ai_tasks": {
            "exchange": "ai_tasks",
            "routing_key": "ai_tasks",
        },
    }

    # LLM-heavy tasks get their own queue
    task_routes = {
        "workers.tasks.publish_article": {"queue": "ai_tasks"},
        "workers.tasks.generate_article": {"queue": "ai_tasks"},
        "workers.tasks.run_scheduled_generations": {"queue": "ai_tasks"},
    }

    task_default_queue = "default"

    # -------------------------------------------------------------------------
    # Beat
    # -------------------------------------------------------------------------

    beat_schedule = {
        "run-scheduled-generations": {
            "task": "workers.tasks.run_scheduled_generations",
            "schedule": SCHEDULE_CHECK_SECONDS,
        },
    }

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    worker_send_task_events = True
    task_send_sent_event = True

    # -------------------------------------------------------------------------
    # Timezone
    # -------------------------------------------------------------------------

    timezone = "UTC"
    enable_utc = True
