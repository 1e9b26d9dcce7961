"""
Celery workers module.

Background document ingestion for deployments that set
INGEST_DISPATCH_MODE=celery.

Dependencies: celery, docchat.configs
System role: Background task processing
"""

from celery import Celery
from celery.signals import setup_logging

from docchat.configs import get_settings
from docchat.observability.logger import configure_logging

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "docchat",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["docchat.workers.tasks.document_ingestion"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_time_limit=celery_config.task_time_limit,
)


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    """Use the application log format instead of Celery's."""
    configure_logging(settings.log_level)
