from __future__ import annotations

import sqlite3
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from miacasa_site.db import get_conn
from miacasa_site.inquiries_db import InquiryInput, create_inquiry

router = APIRouter(tags=["inquiry"])


@router.post("/inquiry")
def submit_inquiry(body: InquiryInput, conn: sqlite3.Connection = Depends(get_conn)) -> Any:
    result = create_inquiry(conn, body)
    if result.ok:
        return {"ok": True, "inquiry": result.inquiry}
    status = 400 if result.errors else 500
    payload: Dict[str, Any] = result.to_dict()
    return JSONResponse(payload, status_code=status)
