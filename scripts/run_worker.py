"""Run the FitScore polling worker.

Usage:
  source .venv/bin/activate
  export OBJC_DISABLE_INITIALIZE_FORK_SAFETY=YES   # macOS fork safety if needed
  python scripts/run_worker.py

WORKER_MODE=rq (default) seeds one scheduled job per task and starts an RQ
worker with the scheduler enabled; every job re-enqueues itself after it
runs. WORKER_MODE=loop runs the same tasks in this process without Redis.
"""

import sys
import os

# Ensure project root is on sys.path when running from scripts/ or other cwd
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
  sys.path.insert(0, ROOT)

from fitscore import create_app
from fitscore.extensions import rq
from fitscore.jobs.scheduler import PollingScheduler, schedule_all
from rq import Worker


def run_rq(app):
  with app.app_context():
    scheduled = schedule_all()
    app.logger.info('Scheduled tasks: %s', ', '.join(scheduled) or '(none)')
    worker = Worker([rq.queue], connection=rq.redis)
    app.logger.info('RQ worker starting (pid %s)', os.getpid())
    try:
      worker.work(burst=False, with_scheduler=True, logging_level='INFO')
    finally:
      app.logger.info('RQ worker exiting (pid %s)', os.getpid())


def run_loop(app):
  with app.app_context():
    scheduler = PollingScheduler.from_config(app.config)
    try:
      scheduler.run_forever()
    except KeyboardInterrupt:
      app.logger.info('Polling scheduler interrupted')


def main():
  app = create_app()
  mode = app.config.get('WORKER_MODE', 'rq')
  if mode == 'loop':
    run_loop(app)
  elif mode == 'rq':
    if rq.queue is None:
      sys.exit('Redis is not configured; set REDIS_URL or WORKER_MODE=loop')
    run_rq(app)
  else:
    sys.exit(f'Unknown WORKER_MODE {mode!r}, expected "rq" or "loop"')


if __name__ == '__main__':
  main()
