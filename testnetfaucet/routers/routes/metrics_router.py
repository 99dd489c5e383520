from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST
from prometheus_client import REGISTRY
from prometheus_client import generate_latest

TAG = "Metrics"
router = APIRouter(prefix="/metrics")
router.tags = [TAG]


@router.get("", include_in_schema=False)
async def metrics():
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
