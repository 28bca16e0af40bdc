# api_server/models.py
from pydantic import BaseModel, Field
from typing import Optional

# --- Common Base Models ---
class BaseRequest(BaseModel):
    """Base model for API requests, can be extended."""
    pass

class BaseResponse(BaseModel):
    """Base model for API responses, can be extended."""
    pass

# --- Random Bytes Models ---
class RandomBytesResponse(BaseResponse):
    """Response model carrying DRBG output."""
    random_b64: str = Field(
        ...,
        description="Base64 encoded random bytes produced by the server's DRBG."
    )
    count: int = Field(..., description="Number of random bytes returned.", examples=[32])
    algorithm: str = Field(
        ...,
        description="Mechanism behind the generator, e.g. HASH-DRBG-SHA256.",
        examples=["HASH-DRBG-SHA256"]
    )

# --- Reseed Models ---
class ReseedRequest(BaseRequest):
    """Request model for an explicit reseed."""
    additional_input_b64: Optional[str] = Field(
        default=None,
        description="Optional Base64 encoded additional input mixed into the reseed.",
        examples=["c2Vzc2lvbi0xMjM="]  # "session-123"
    )

class ReseedResponse(BaseResponse):
    """Response model for a successful reseed."""
    status: str = Field(..., examples=["reseeded"], description="Status of the reseed operation.")
    algorithm: str = Field(..., description="Mechanism that was reseeded.")

# --- Generator Info Models ---
class GeneratorInfoResponse(BaseResponse):
    """Describes the generator the server is running."""
    algorithm: str = Field(..., description="Mechanism behind the generator.")
    prediction_resistant: bool = Field(..., description="Whether every request reseeds from the entropy source.")
    security_strength: int = Field(..., description="Security strength in bits the generator was built for.")

class GeneralErrorResponse(BaseModel): # For documenting error responses in OpenAPI
    """A generic error response model."""
    detail: str
