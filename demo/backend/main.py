# To run this server, use the following command from the root project directory:
# PYTHONPATH=. uvicorn demo.backend.main:app --reload

import base64
import binascii
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from csvscout.data.constants import PREVIEW_ROWS
from csvscout.errors import SniffError
from csvscout.logic.line_stats import read_sample_text
from csvscout.models import FormatDescriptor
from csvscout.sniffer import detect_format, load_frame
from csvscout.utils import get_logger

logger = get_logger(__name__)

app = FastAPI()

# Allow CORS for the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

class FileUploadRequest(BaseModel):
    filename: str
    content: str
    encoding: Literal["text", "base64"] = "text"
    header_row: bool = False
    separator: Optional[str] = None

class DetectResponse(BaseModel):
    filename: str
    format: FormatDescriptor
    preview: List[List[str]]
    warnings: List[str] = []

def _decode_content(request: FileUploadRequest):
    if request.encoding == "text":
        return request.content
    # Data URLs look like "data:text/csv;base64,...."
    encoded = request.content.split(",", 1)[1] if request.content.startswith("data:") else request.content
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid base64 content: {e}")

@app.post("/detect", response_model=DetectResponse)
async def detect(request: FileUploadRequest):
    """
    Detects the delimited-text format of an uploaded sample.
    Returns the format descriptor and a few preview rows loaded with it.
    """
    sample = _decode_content(request)
    try:
        descriptor = detect_format(sample, header_row=request.header_row, separator=request.separator)
    except SniffError as e:
        logger.warning(f"Detection failed for {request.filename}: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    text = sample if isinstance(sample, str) else sample.decode("utf-8")
    df = load_frame(text, descriptor, nrows=PREVIEW_ROWS)
    preview = df.astype(str).values.tolist()

    warnings = []
    data_lines = [line for line in read_sample_text(text) if line.strip()]
    if descriptor.has_header:
        data_lines = data_lines[1:]
    expected = min(PREVIEW_ROWS, len(data_lines))
    if len(preview) < expected:
        message = f"Preview has {len(preview)} of {expected} expected rows; malformed rows may have been skipped."
        logger.warning(f"{request.filename}: {message}")
        warnings.append(message)

    return DetectResponse(filename=request.filename, format=descriptor, preview=preview, warnings=warnings)

@app.get("/health")
async def health():
    return {"status": "ok"}
