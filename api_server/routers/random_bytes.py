# api_server/routers/random_bytes.py
import base64
import binascii
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from sp800_random.errors import EntropyUnavailable, MechanismFault
from ..core.generator import SharedGenerator
from ..core.security import verify_api_key
from ..models import (
    GeneralErrorResponse, GeneratorInfoResponse, RandomBytesResponse, ReseedRequest, ReseedResponse
)

logger = logging.getLogger(__name__)

MAX_REQUEST_BYTES = 65536

router = APIRouter(
    prefix="/random",
    tags=["Random Bytes (SP 800-90A DRBG)"],
    dependencies=[Depends(verify_api_key)]
)

ERROR_RESPONSES = {
    400: {"model": GeneralErrorResponse, "description": "Invalid request"},
    500: {"model": GeneralErrorResponse, "description": "Generator failed and is no longer usable"},
    503: {"model": GeneralErrorResponse, "description": "Entropy source unavailable or generator not loaded"},
}


def get_generator(request: Request) -> SharedGenerator:
    generator = getattr(request.app.state, "drbg", None)
    if generator is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="DRBG not initialised.")
    return generator


def handle_drbg_errors(e: Exception, operation_name: str):
    if isinstance(e, EntropyUnavailable):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail=f"{operation_name} failed: entropy unavailable: {e}")
    if isinstance(e, MechanismFault):
        logger.error("[api_server] %s: generator fault: %s", operation_name, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail=f"{operation_name} failed: {e}")
    if isinstance(e, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{operation_name} input error: {e}")
    raise e


@router.get(
    "/bytes",
    response_model=RandomBytesResponse,
    summary="Generate random bytes",
    description="Returns `count` bytes from the server's DRBG, Base64 encoded.",
    responses=ERROR_RESPONSES,
)
def api_random_bytes(count: int = Query(32, ge=1, le=MAX_REQUEST_BYTES),
                     generator: SharedGenerator = Depends(get_generator)):
    try:
        output = generator.generate_bytes(count)
    except (EntropyUnavailable, MechanismFault, ValueError) as e:
        handle_drbg_errors(e, "Random byte generation")
    return RandomBytesResponse(random_b64=base64.b64encode(output).decode(), count=len(output),
                               algorithm=generator.algorithm)


@router.post(
    "/reseed",
    response_model=ReseedResponse,
    summary="Reseed the DRBG",
    description="Reseeds the server's DRBG from its entropy source, optionally mixing in additional input.",
    responses=ERROR_RESPONSES,
)
def api_reseed(request_data: ReseedRequest, generator: SharedGenerator = Depends(get_generator)):
    additional_input = None
    if request_data.additional_input_b64:
        try:
            additional_input = base64.b64decode(request_data.additional_input_b64, validate=True)
        except binascii.Error:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="Invalid base64 encoding in additional_input_b64.")
    try:
        generator.reseed(additional_input)
    except (EntropyUnavailable, MechanismFault, ValueError) as e:
        handle_drbg_errors(e, "Reseed")
    return ReseedResponse(status="reseeded", algorithm=generator.algorithm)


@router.get(
    "/info",
    response_model=GeneratorInfoResponse,
    summary="Describe the DRBG",
)
def api_generator_info(generator: SharedGenerator = Depends(get_generator)):
    return GeneratorInfoResponse(algorithm=generator.algorithm,
                                 prediction_resistant=generator.prediction_resistant,
                                 security_strength=generator.security_strength)
