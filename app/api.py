"""
FastAPI routes for statement import.
Thin API layer over ImportService; parsed entries are returned to the caller,
which owns identifiers and persistence.
"""
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import Response

from core.config import get_settings
from core.exceptions import DataNotFoundError, FileProcessingError
from core.logger import setup_logger
from core.schema import ImportResponse, TextImportRequest
from services.import_service import ImportResult, ImportService

logger = setup_logger(__name__)
settings = get_settings()

ALLOWED_EXTENSIONS = (".csv", ".txt", ".tsv")

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Turn pasted bank statements, CSV exports and SMS alerts into typed financial records",
    version="1.0.0"
)

# Service instance
import_service = ImportService()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "statement_import",
        "version": "1.0.0"
    }


@app.get("/favicon.ico")
async def favicon():
    """Return empty response for favicon to avoid 404 errors."""
    return Response(status_code=204)


def build_response(result: ImportResult) -> ImportResponse:
    """
    Build API response from an import result.

    Args:
        result: Import result

    Returns:
        ImportResponse
    """
    return ImportResponse(
        count=len(result.entries),
        transaction_count=len(result.transactions),
        account_count=len(result.accounts),
        message=result.message,
        entries=result.entries,
    )


def validate_file_extension(filename: str) -> None:
    """
    Validate file has a text extension.

    Raises:
        HTTPException: If file extension is invalid
    """
    if not filename or not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type: {filename}. Only {', '.join(ALLOWED_EXTENSIONS)} are supported."
        )


@app.post("/import/text", response_model=ImportResponse)
async def import_text(request: TextImportRequest):
    """
    Parse pasted statement text.

    Returns:
        Parsed entries, or 422 when nothing importable was found
    """
    logger.info(f"Received text import ({len(request.text)} chars)")
    try:
        result = await import_service.import_text_async(request.text)
    except DataNotFoundError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return build_response(result)


@app.post("/import/file", response_model=ImportResponse)
async def import_file(file: UploadFile = File(...)):
    """
    Parse an uploaded statement file read as UTF-8 text.

    Returns:
        Parsed entries; 400 for unreadable files, 422 when nothing importable was found
    """
    logger.info(f"Received file: {file.filename}")
    validate_file_extension(file.filename)

    content = await file.read()
    try:
        result = await import_service.import_bytes_async(content, file.filename)
    except FileProcessingError as e:
        logger.warning(f"Rejected upload {file.filename}: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)
    except DataNotFoundError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return build_response(result)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
