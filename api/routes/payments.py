"""
Payments API routes.

Purchase initiation, the gateway webhook and order queries. Keep this thin:
all rules live in OrderLifecycleService.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies import get_current_user_id, get_order_service
from application.dtos.orders import PurchaseRequest
from application.services.order_service import OrderLifecycleService
from core.response import success_response


router = APIRouter(prefix="/payments", tags=["Payments"])

SIGNATURE_HEADER = "x-webhook-signature"
TIMESTAMP_HEADER = "x-webhook-timestamp"


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_payment(
    body: PurchaseRequest,
    user_id: str = Depends(get_current_user_id),
    service: OrderLifecycleService = Depends(get_order_service),
):
    session = await service.initiate(user_id, body.product_id)
    return success_response(data=session.model_dump(), message="Payment session created")


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    service: OrderLifecycleService = Depends(get_order_service),
):
    # the signature covers the raw bytes exactly as delivered
    raw_body = await request.body()
    ack = await service.handle_callback(
        raw_body,
        request.headers.get(SIGNATURE_HEADER),
        request.headers.get(TIMESTAMP_HEADER),
    )
    # always 200 so the gateway does not retry on business outcomes
    return success_response(data={"status": ack.status}, message=ack.message or "Webhook received")


@router.get("/status/{order_id}")
async def get_payment_status(
    order_id: str,
    user_id: str = Depends(get_current_user_id),
    service: OrderLifecycleService = Depends(get_order_service),
):
    view = await service.query_status(order_id, user_id)
    return success_response(data=view.model_dump())


@router.get("/purchases")
async def list_purchases(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    service: OrderLifecycleService = Depends(get_order_service),
):
    purchases = await service.list_purchases(user_id, skip=skip, limit=limit)
    return success_response(data=[p.model_dump(mode="json") for p in purchases])
