from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ....core.database import get_db
from ....api.deps import get_current_user
from ....models.user import User
from ....schemas.common import success_response
from ....schemas.subscription import SubscribeRequest
from ....services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("/plans")
async def get_plans(db: Session = Depends(get_db)):
    return success_response({"plans": SubscriptionService(db).list_plans()})


@router.get("/status")
async def get_status(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return success_response({"subscription": SubscriptionService(db).get_status(current_user)})


@router.post("/subscribe")
async def subscribe(
    body: SubscribeRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    subscription = SubscriptionService(db).subscribe(current_user, body.plan_id)
    return success_response({"subscription": subscription}, message="Subscription activated successfully")


@router.post("/cancel")
async def cancel(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    SubscriptionService(db).cancel(current_user)
    return success_response(message="Subscription cancelled successfully")


@router.post("/renew")
async def renew(
    body: SubscribeRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    subscription = SubscriptionService(db).renew(current_user, body.plan_id)
    return success_response({"subscription": subscription}, message="Subscription renewed successfully")
