"""Push subscription routes."""
from fastapi import APIRouter, Depends

from api.dependencies import get_services
from api.models.subscription import PushSubscription
from api.schemas.requests import PushTestRequest
from api.schemas.responses import CountResponse, PushTestResponse, SuccessResponse
from api.services.container import Services


router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])


@router.post("", response_model=SuccessResponse)
async def subscribe(subscription: PushSubscription, services: Services = Depends(get_services)):
    """Register a browser push subscription."""
    await services.push_service.subscribe(subscription)
    return SuccessResponse()


@router.get("/count", response_model=CountResponse)
async def subscription_count(services: Services = Depends(get_services)):
    return CountResponse(count=await services.push_service.get_subscription_count())


@router.post("/test", response_model=PushTestResponse)
async def send_test(request: PushTestRequest, services: Services = Depends(get_services)):
    """Send a test notification to every subscriber."""
    result = await services.push_service.send_test_notification(request.title, request.message)
    return PushTestResponse(sent=result.sent, failed=result.failed, errors=result.errors)
