"""
Celery application configuration for background task processing.

The beat schedule runs the periodic repair jobs that bring denormalized
counters and scores back in line with their sources of truth.
"""

from celery import Celery

from fitsocial.config import settings

celery_app = Celery(
    "fitness_social_core",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["fitsocial.tasks.reconciliation_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_routes={
        "reconcile_*": {"queue": "maintenance"},
    },
    result_expires=3600,  # 1 hour
    beat_schedule={
        "reconcile-follow-counters": {
            "task": "reconcile_follow_counters",
            "schedule": settings.follow_reconcile_interval,
        },
        "reconcile-activity-scores": {
            "task": "reconcile_activity_scores",
            "schedule": settings.score_reconcile_interval,
        },
    },
    beat_schedule_filename="/tmp/celerybeat-schedule",
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    worker_max_tasks_per_child=1000,
    worker_send_task_events=True,
    task_send_sent_event=True,
)

if __name__ == "__main__":
    celery_app.start()
