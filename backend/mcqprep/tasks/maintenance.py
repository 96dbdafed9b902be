from ..core.celery_app import celery_app
from ..core.database import SessionLocal
from ..core.cache import cache
from ..services.statistics_service import StatisticsService
from ..services.subscription_service import SubscriptionService
import logging

logger = logging.getLogger(__name__)


@celery_app.task(name="reconcile_statistics")
def reconcile_statistics():
    """Rebuild every mock test's statistics from its attempt history"""
    db = SessionLocal()
    try:
        reconciled = StatisticsService(db).reconcile_all_tests()
        cache.delete_pattern("leaderboard:*")
        return {"tests_reconciled": reconciled}
    except Exception as exc:
        db.rollback()
        logger.error(f"Error in reconcile_statistics: {exc}")
        raise
    finally:
        db.close()


@celery_app.task(name="expire_subscriptions")
def expire_subscriptions():
    """Move premium users past their expiry back to the free tier"""
    db = SessionLocal()
    try:
        expired = SubscriptionService(db).expire_lapsed()
        return {"subscriptions_expired": expired}
    except Exception as exc:
        db.rollback()
        logger.error(f"Error in expire_subscriptions: {exc}")
        raise
    finally:
        db.close()
