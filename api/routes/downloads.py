"""
Download API routes: mint a single-use token, then redeem it for a redirect.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from api.dependencies import get_current_user_id, get_download_service
from application.dtos.orders import DownloadTokenView
from application.services.download_service import DownloadTokenService
from core.response import success_response


router = APIRouter(prefix="/downloads", tags=["Downloads"])


@router.get("/request/{product_id}")
async def request_download(
    product_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DownloadTokenService = Depends(get_download_service),
):
    token = await service.request_token(user_id, product_id)
    return success_response(data=DownloadTokenView(token=token).model_dump(), message="Download link ready")


@router.get("/{token}", include_in_schema=False)
async def redeem_download(
    token: str,
    service: DownloadTokenService = Depends(get_download_service),
):
    target = await service.redeem(token)
    return RedirectResponse(target, status_code=status.HTTP_302_FOUND)
