import asyncio
from typing import Optional
from fastapi import Depends, FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from config import check_api_keys_on_startup, logger
from config.constants import PIPELINE_CONFIG
from deps import get_verification_pipeline
from exceptions import VerificationFailed
from middleware.context import RequestContextMiddleware, get_request_id
from models import ImagePayload, VerificationResult
from services import ClaimVerificationPipeline

FAILURE_BODY = {"error": "Failed to verify image"}
NO_IMAGE_BODY = {"error": "No image uploaded"}

app = FastAPI(title="Snapfact API")

@app.on_event("startup")
async def startup_event():
    check_api_keys_on_startup()

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

@app.get("/")
async def health_check():
    return {"status": "ok", "message": "Snapfact API is running."}

@app.get("/healthCheck", response_class=PlainTextResponse)
async def legacy_health_check():
    return "Server working perfectly fine!"

@app.post("/verify-new", response_model=VerificationResult)
async def verify_new(
    image: Optional[UploadFile] = File(None),
    pipeline: ClaimVerificationPipeline = Depends(get_verification_pipeline),
):
    """Verify the claim shown in an uploaded screenshot."""
    if image is None:
        return JSONResponse(status_code=400, content=NO_IMAGE_BODY)

    data = await image.read()
    if not data:
        return JSONResponse(status_code=400, content=NO_IMAGE_BODY)

    payload = ImagePayload(data=data, mime_type=PIPELINE_CONFIG.IMAGE_MIME_TYPE)
    logger.info("Received %d byte image (%s).", len(data), image.filename)

    try:
        return await asyncio.wait_for(pipeline.verify(payload), timeout=PIPELINE_CONFIG.REQUEST_TIMEOUT)
    except VerificationFailed as e:
        logger.error("[%s] Returning generic failure: %s", get_request_id(), e.to_dict())
    except asyncio.TimeoutError:
        logger.error(
            "[%s] Verification exceeded %.0fs budget.",
            get_request_id(), PIPELINE_CONFIG.REQUEST_TIMEOUT
        )
    except Exception:
        logger.exception("Unhandled error during verification.")

    return JSONResponse(status_code=500, content=FAILURE_BODY)
