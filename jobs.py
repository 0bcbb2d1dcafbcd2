# jobs.py
"""
Scheduled jobs, run outside the API process (cron, container scheduler).

Usage:
     python jobs.py mark-overdue
"""
import logging
import os
import sys

from dotenv import load_dotenv

from database import get_session_context
from log_config import setup_logging
from services import PaymentService

logger = logging.getLogger(__name__)

JOBS = {
     "mark-overdue": PaymentService.mark_overdue_schedules,
}


def run(job_name: str) -> int:
     job = JOBS.get(job_name)
     if job is None:
          raise KeyError(f"Unknown job '{job_name}'. Available: {', '.join(sorted(JOBS))}")
     with get_session_context() as db:
          result = job(db)
     logger.info("Job %s finished: %s", job_name, result)
     return result


def main(argv=None) -> int:
     load_dotenv()
     setup_logging(level=os.getenv("LOG_LEVEL", "INFO"), format_type=os.getenv("LOG_FORMAT", "standard"))
     args = sys.argv[1:] if argv is None else argv
     if len(args) != 1:
          print(f"usage: jobs.py <{'|'.join(sorted(JOBS))}>", file=sys.stderr)
          return 2
     try:
          run(args[0])
     except KeyError as exc:
          print(exc.args[0], file=sys.stderr)
          return 2
     return 0


if __name__ == "__main__":
     sys.exit(main())
