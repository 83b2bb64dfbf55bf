"""
Script to move a user to another subscription plan.
Run: python -m scripts.set_user_plan user@example.com pro [--expires 2027-01-31]
"""
import argparse
import sys
import os
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from content_agent.core.config import DATABASE_URL
from content_agent.core.exceptions import AppError
from content_agent.core.plan_limits import SUPPORTED_PLANS
from content_agent.db.session import build_engine, build_session_factory
from content_agent.services.auth_service import set_user_plan
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Set a user's subscription plan")
    parser.add_argument("email")
    parser.add_argument("plan", choices=SUPPORTED_PLANS)
    parser.add_argument("--expires", help="Expiry date (YYYY-MM-DD); omit for no expiry")
    parser.add_argument("--database-url", default=DATABASE_URL)
    args = parser.parse_args(argv)

    expires_at = datetime.strptime(args.expires, "%Y-%m-%d") if args.expires else None

    engine = build_engine(args.database_url)
    db = build_session_factory(engine)()
    try:
        user = set_user_plan(db, args.email, args.plan, expires_at)
    except AppError as e:
        db.rollback()
        logger.error(f"Failed to set plan for {args.email}: {e.message}")
        return 1
    finally:
        db.close()
        engine.dispose()

    print(f"\n[SUCCESS] User {user.email} is now on the {user.subscription_plan} plan")
    return 0


if __name__ == "__main__":
    sys.exit(main())
