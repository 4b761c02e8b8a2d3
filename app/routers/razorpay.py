from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from app.core.config import Settings
from app.deps import get_app_settings, get_gateway, require_api_key, validated_body
from app.models.requests import CreateOrderRequest, VerifyPaymentRequest
from app.services import payments as payments_service
from app.services.razorpay import RazorpayGateway

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/create-order", status_code=status.HTTP_201_CREATED)
async def create_order(
    body: CreateOrderRequest = Depends(validated_body(CreateOrderRequest)),
    gateway: RazorpayGateway = Depends(get_gateway),
    settings: Settings = Depends(get_app_settings),
):
    """Create a Razorpay order; amount is in rupees, the order is created in paise."""
    order = await payments_service.create_order(
        gateway,
        body.amount,
        currency=body.currency,
        receipt=body.receipt,
        notes=body.notes,
        partial_payment=body.partial_payment,
        first_payment_min_amount=body.first_payment_min_amount,
        description=settings.order_description,
    )
    return {"success": True, "data": order, "message": "Order created successfully"}


@router.post("/verify-payment")
async def verify_payment(
    body: VerifyPaymentRequest = Depends(validated_body(VerifyPaymentRequest)),
    gateway: RazorpayGateway = Depends(get_gateway),
):
    """Verify the checkout signature, then return the payment from Razorpay."""
    payment = await payments_service.verify_payment(
        gateway,
        body.razorpay_order_id,
        body.razorpay_payment_id,
        body.razorpay_signature,
    )
    return {"success": True, "data": payment, "message": "Payment verified successfully"}


@router.get("/payment/{payment_id}")
async def get_payment(payment_id: str, gateway: RazorpayGateway = Depends(get_gateway)):
    payment = await payments_service.get_payment(gateway, payment_id)
    return {"success": True, "data": payment, "message": "Payment details retrieved successfully"}


@router.get("/order/{order_id}")
async def get_order(order_id: str, gateway: RazorpayGateway = Depends(get_gateway)):
    order = await payments_service.get_order(gateway, order_id)
    return {"success": True, "data": order, "message": "Order details retrieved successfully"}


@router.get("/health")
async def razorpay_health(settings: Settings = Depends(get_app_settings)):
    """Authenticated health check for the Razorpay relay."""
    return {
        "success": True,
        "message": "Razorpay service is healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.razorpay_environment,
    }
