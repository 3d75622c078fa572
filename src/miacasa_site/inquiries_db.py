from __future__ import annotations

import re
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from .logging_setup import get_logger


logger = get_logger("inquiries")

REQUIRED_FIELDS = ("name", "email", "message")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_MAX_LENGTHS = {"name": 200, "email": 320, "phone": 50, "message": 5000, "source": 100}


class InquiryInput(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None
    phone: Optional[str] = None
    property_id: Optional[str] = None
    property_custom_id: Optional[str] = None
    source: Optional[str] = None


@dataclass
class InquiryResult:
    ok: bool
    inquiry: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "inquiry": self.inquiry,
            "error": self.error,
            "errors": dict(self.errors),
        }


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def validate_inquiry(data: InquiryInput) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for name in REQUIRED_FIELDS:
        if not _clean(getattr(data, name)):
            errors[name] = f"{name} is required"
    email = _clean(data.email)
    if email and not _EMAIL_RE.match(email):
        errors["email"] = "email is not a valid address"
    for name, cap in _MAX_LENGTHS.items():
        value = _clean(getattr(data, name))
        if value and len(value) > cap and name not in errors:
            errors[name] = f"{name} must be at most {cap} characters"
    return errors


def create_inquiry(
    conn: sqlite3.Connection,
    data: Union[InquiryInput, Mapping[str, Any]],
) -> InquiryResult:
    """Persist a lead as status "new", hidden from agents until revealed.

    Never raises: validation and storage problems come back as a failed result.
    """

    if not isinstance(data, InquiryInput):
        try:
            data = InquiryInput(**{k: _clean(v) for k, v in dict(data or {}).items()})
        except (TypeError, ValueError, ValidationError) as e:
            return InquiryResult(ok=False, error=f"invalid inquiry payload: {e}")

    errors = validate_inquiry(data)
    if errors:
        return InquiryResult(ok=False, error="Required fields are missing or invalid", errors=errors)

    record = {
        "id": uuid.uuid4().hex,
        "property_id": _clean(data.property_id),
        "property_custom_id": _clean(data.property_custom_id),
        "name": _clean(data.name),
        "email": _clean(data.email),
        "phone": _clean(data.phone),
        "message": _clean(data.message),
        "source": _clean(data.source) or "website",
        "status": "new",
        "reveal": False,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    cols = list(record.keys())
    try:
        conn.execute(
            f"INSERT INTO inquiries ({', '.join(cols)}) VALUES ({', '.join(['?'] * len(cols))})",
            [int(record[c]) if c == "reveal" else record[c] for c in cols],
        )
        conn.commit()
    except sqlite3.Error as e:
        logger.warning("create_inquiry failed: %s", e)
        try:
            conn.rollback()
        except sqlite3.Error:
            pass
        return InquiryResult(ok=False, error="Failed to submit inquiry")
    except Exception as e:
        logger.exception("unexpected error in create_inquiry: %s", e)
        return InquiryResult(ok=False, error="Failed to submit inquiry")

    logger.info(
        "inquiry stored",
        extra={"inquiry_id": record["id"], "source": record["source"], "property_id": record["property_id"]},
    )
    return InquiryResult(ok=True, inquiry=record)


def list_inquiries(conn: sqlite3.Connection, limit: int = 50) -> List[Dict[str, Any]]:
    try:
        rows = conn.execute(
            "SELECT * FROM inquiries ORDER BY created_at DESC LIMIT ?", (int(limit),)
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("list_inquiries failed: %s", e)
        return []
    out = []
    for r in rows:
        item = dict(r)
        item["reveal"] = bool(item.get("reveal"))
        out.append(item)
    return out
