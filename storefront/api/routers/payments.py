from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_notification_service, ok
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import Envelope, PaymentIn, PaymentMethods, PaymentOut
from storefront.services.notification_service import NotificationService
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/methods", response_model=Envelope[PaymentMethods])
def list_methods():
    return ok({"methods": PaymentService.list_methods()})


@router.post("/process", response_model=Envelope[PaymentOut])
def process_payment(
    payload: PaymentIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
):
    return ok(PaymentService(db, notification_service).process(user.id, payload))
