import json

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from ..handler import async_handler
from .dto import RunRequest


router = APIRouter()


@router.post("/run")
async def run(req: RunRequest | None = Body(None)) -> JSONResponse:
    # The body doubles as the invocation event and is echoed back in the report
    event = req.model_dump(exclude_unset=True) if req is not None else {}
    response = await async_handler(
        event,
        url=req.url if req is not None else None,
        selector=req.selector if req is not None else None,
    )
    return JSONResponse(
        content=json.loads(response["body"]),
        status_code=response["statusCode"],
    )
