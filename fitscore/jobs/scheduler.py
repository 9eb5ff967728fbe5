"""Recurring timers for the worker cycles.

Each task runs on its own interval. The next run of a task is scheduled only
after the current one has finished, so cycles of the same task never
overlap. Two ways of driving the timers are provided:

* RQ: ``run_periodic`` executes one cycle and re-enqueues itself with
  ``enqueue_in``. Needs a worker started with the scheduler enabled
  (see scripts/run_worker.py).
* loop: ``PollingScheduler`` runs every task in-process, sleeping until the
  next one is due.
"""

import time
import uuid
from typing import Callable, NamedTuple

from flask import current_app

from ..extensions import db, rq
from .analysis import process_llm_analysis
from .notify import process_candidate_notifications
from .report import generate_high_fit_report


class Task(NamedTuple):
    func: Callable
    interval_key: str
    enabled: Callable


def _always(config):
    return True


def _has_openai_key(config):
    return bool(config.get('OPENAI_API_KEY'))


TASKS = {
    'notify': Task(process_candidate_notifications, 'NOTIFICATION_INTERVAL', _always),
    'analysis': Task(process_llm_analysis, 'ANALYSIS_INTERVAL', _has_openai_key),
    'report': Task(generate_high_fit_report, 'REPORT_INTERVAL', _always),
}


def enabled_tasks(config):
    names = [name for name, task in TASKS.items() if task.enabled(config)]
    if 'analysis' not in names:
        current_app.logger.warning('OPENAI_API_KEY is not set; the analysis loop is disabled')
    return names


def interval_for(name, config):
    return int(config.get(TASKS[name].interval_key))


def run_cycle(name):
    """Run one cycle of a task. Errors are logged, never raised."""
    try:
        return TASKS[name].func()
    except Exception:
        db.session.rollback()
        current_app.logger.exception('[%s] cycle crashed', name)
        return None


def job_prefix(name):
    return f'fitscore-{name}-'


def reschedule(name):
    delay = interval_for(name, current_app.config)
    return rq.enqueue_in(delay, run_periodic, name, job_id=job_prefix(name) + uuid.uuid4().hex)


def run_periodic(name):
    """RQ entrypoint: run one cycle of ``name`` and schedule the next one."""
    # lazy import to avoid circular imports at module import time
    from .. import create_app
    app = create_app()
    with app.app_context():
        try:
            run_cycle(name)
        finally:
            reschedule(name)


def schedule_all():
    """Replace any scheduled runs with one fresh job per enabled task."""
    scheduled = []
    for name in enabled_tasks(current_app.config):
        dropped = rq.cancel_scheduled(job_prefix(name))
        if dropped:
            current_app.logger.info('[%s] dropped %s previously scheduled run(s)', name, dropped)
        if reschedule(name) is not None:
            scheduled.append(name)
    return scheduled


class PollingScheduler:
    """Single-process timer loop over the worker tasks."""

    def __init__(self, intervals, clock=time.monotonic, sleep=time.sleep):
        self.intervals = dict(intervals)
        self.clock = clock
        self.sleep = sleep
        start = clock()
        self.next_due = {name: start + interval for name, interval in self.intervals.items()}
        self._running = False

    @classmethod
    def from_config(cls, config, **kwargs):
        return cls({name: interval_for(name, config) for name in enabled_tasks(config)}, **kwargs)

    def tick(self, now=None):
        """Run every task that is due and return their names."""
        now = self.clock() if now is None else now
        ran = []
        for name in sorted(self.next_due, key=self.next_due.get):
            if self.next_due[name] > now:
                continue
            run_cycle(name)
            self.next_due[name] = self.clock() + self.intervals[name]
            ran.append(name)
        return ran

    def seconds_until_next(self):
        if not self.next_due:
            return None
        return max(0.0, min(self.next_due.values()) - self.clock())

    def stop(self):
        self._running = False

    def run_forever(self):
        self._running = True
        current_app.logger.info('Polling scheduler started: %s', self.intervals)
        while self._running:
            self.tick()
            wait = self.seconds_until_next()
            if wait is None:
                current_app.logger.warning('No tasks enabled, polling scheduler exiting')
                break
            if self._running and wait > 0:
                self.sleep(wait)
