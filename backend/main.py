"""
FastAPI backend service for CAMT.053 parsing.
"""
from fastapi import FastAPI, File, UploadFile, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from camt_parser import Camt053Parser, Camt053ParserError, StatementList, detect_document_namespace
from camt_parser.core.detectors import NAMESPACE_TO_XSD

app = FastAPI(title="CAMT.053 Statement Parser", version="2.1.0")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],  # Vite and other dev servers
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

parser = Camt053Parser()


async def _read_xml_upload(file: UploadFile) -> bytes:
    if not file.filename or not file.filename.lower().endswith('.xml'):
        raise HTTPException(status_code=400, detail="File must be an XML document")
    return await file.read()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "CAMT.053 Statement Parser API", "status": "healthy"}


@app.post("/parse")
async def parse_xml(file: UploadFile = File(...)):
    """
    Parse an uploaded CAMT.053 file and return structured data.

    Args:
        file: Uploaded XML file

    Returns:
        Parsed statements as JSON
    """
    data = await _read_xml_upload(file)
    logger.info(f"Processing statement file: {file.filename}")

    try:
        statements = parser.parse(data)
    except Camt053ParserError as e:
        logger.error(f"Error parsing statement file: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    transactions_count = sum(len(statement.transactions) for statement in statements)
    logger.info(f"Successfully parsed {len(statements)} statements, {transactions_count} transactions")

    return JSONResponse(content={
        "success": True,
        "data": StatementList.dump_python(statements, mode="json"),
        "summary": {
            "statements_count": len(statements),
            "transactions_count": transactions_count
        }
    })


@app.post("/detect")
async def detect_version(file: UploadFile = File(...)):
    """
    Detect which CAMT.053 version an uploaded file declares.

    Args:
        file: Uploaded XML file

    Returns:
        Detected namespace and its schema file
    """
    data = await _read_xml_upload(file)

    try:
        namespace = detect_document_namespace(data)
    except Camt053ParserError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if namespace not in NAMESPACE_TO_XSD:
        raise HTTPException(status_code=422, detail=f"Unsupported or missing namespace: {namespace or '(none)'}")

    return JSONResponse(content={
        "success": True,
        "namespace": namespace,
        "schema": NAMESPACE_TO_XSD[namespace]
    })


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
