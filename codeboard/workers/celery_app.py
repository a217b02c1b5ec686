from celery import Celery
from celery.schedules import crontab

from codeboard.core.config import settings

celery_app = Celery(
    "codeboard",
    broker=settings.celery_broker_url or str(settings.redis_url),
    backend=settings.celery_result_backend or str(settings.redis_url),
    include=[
        "codeboard.workers.tasks.leaderboard_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.refresh_timezone,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=settings.job_default_timeout,
    task_soft_time_limit=settings.job_default_timeout - 60,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

# Periodic tasks. Registered once here; beat owns the only recurring timer.
celery_app.conf.beat_schedule = {
    "daily-leaderboard-refresh": {
        "task": "codeboard.workers.tasks.leaderboard_tasks.schedule_refresh",
        "schedule": crontab(
            hour=settings.refresh_cron_hour,
            minute=settings.refresh_cron_minute,
        ),
    },
}
