"""
SIG Guard Gateway
HTTP entry point for the review bot's permission checks.

The pull-request event handler posts the changed files, the current
collaborators and the maintainers; the gateway answers with who may approve
and how many LGTMs are needed.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sigguard.errors import FetchFailure
from sigguard.models import ChangedFile, FileStatus, PermissionQuery
from sigguard.permission import SIG_INFO_FILE_NAME, PermissionService
from sigguard.sig_info import SigInfoFetcher
from sigguard.store import SigStore

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("sigguard.gateway")

# ---------------------------------------------------------------------------
# App + shared services
# ---------------------------------------------------------------------------
app = FastAPI(
    title="SIG Guard",
    version="1.0.0",
)

store = SigStore()
fetcher = SigInfoFetcher()
service = PermissionService(store=store, fetcher=fetcher)

# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class PullFile(BaseModel):
    filename: str
    status: FileStatus
    raw_url: str


class PermissionRequest(BaseModel):
    files: list[PullFile] = []
    sig_info_file_name: str = SIG_INFO_FILE_NAME
    collaborators: list[str] = []
    maintainers: list[str] = []


class PermissionData(BaseModel):
    collaborators: list[str]
    lgtm_number: int


class PermissionResponse(BaseModel):
    data: Optional[PermissionData] = None
    status: int
    message: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health():
    return {"status": "operational", "service": "sigguard"}


@app.post("/permissions")
def list_permissions(body: PermissionRequest):
    """
    Resolve approvers and LGTM threshold for one pull request.

    Returns 200 with a decision for every computed or fallback outcome,
    409 when several governance files are touched, and 502 when the
    governance file cannot be loaded.
    """
    query = PermissionQuery(
        files=[
            ChangedFile(filename=f.filename, status=f.status, raw_url=f.raw_url)
            for f in body.files
        ],
        sig_info_file_name=body.sig_info_file_name,
        collaborators=body.collaborators,
        maintainers=body.maintainers,
    )

    try:
        result = service.list_permissions(query)
    except FetchFailure as exc:
        logger.error("Permission check failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))

    data = None
    if result.data is not None:
        data = PermissionData(
            collaborators=result.data.collaborators,
            lgtm_number=result.data.lgtm_number,
        )

    payload = PermissionResponse(
        data=data,
        status=result.status_code,
        message=result.message,
    )
    return JSONResponse(
        status_code=result.status_code,
        content=payload.model_dump(),
    )
