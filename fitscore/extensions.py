from datetime import timedelta
from flask_sqlalchemy import SQLAlchemy
from redis import Redis
from rq import Queue
from flask import current_app

class RQWrapper:
    def __init__(self):
        self.redis = None
        self.queue = None

    def init_app(self, app):
        try:
            self.redis = Redis.from_url(app.config.get("REDIS_URL"))
            self.queue = Queue("default", connection=self.redis)
        except Exception:
            # bad REDIS_URL; the worker can still run in loop mode
            app.logger.exception('Redis/RQ init failed, periodic jobs need WORKER_MODE=loop')
            self.redis = None
            self.queue = None

    def enqueue_in(self, seconds, func, *args, job_id=None, **kwargs):
        """Schedule ``func`` to run after ``seconds`` on the default queue.

        Returns the RQ job, or None when no queue is available or Redis
        refuses the call. Unlike enqueueing a one-off job there is no
        synchronous fallback: running a periodic job inline would recurse.
        """
        if self.queue is None:
            current_app.logger.error('No RQ queue available, cannot schedule %s', getattr(func, '__name__', func))
            return None
        try:
            return self.queue.enqueue_in(timedelta(seconds=seconds), func, *args, job_id=job_id, **kwargs)
        except Exception:
            current_app.logger.exception('RQ enqueue_in failed for %s', getattr(func, '__name__', func))
            return None

    def cancel_scheduled(self, prefix):
        """Drop scheduled jobs whose id starts with ``prefix``; returns how many."""
        if self.queue is None:
            return 0
        registry = self.queue.scheduled_job_registry
        removed = 0
        for job_id in registry.get_job_ids():
            if job_id.startswith(prefix):
                registry.remove(job_id, delete_job=True)
                removed += 1
        return removed


db = SQLAlchemy()
rq = RQWrapper()
