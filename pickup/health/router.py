from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from pickup import config
from pickup.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True, "origin": config.BUSINESS_ORIGIN_ADDRESS}

@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return JSONResponse(rate_limit_health_info(request))
