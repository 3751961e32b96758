"""Admin audit trail."""

import uuid
from typing import Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from libs.common.rate_limit import get_client_ip
from services.storefront_service.models import AuditLog
from sqlalchemy.ext.asyncio import AsyncSession


async def log_audit(
    db: AsyncSession,
    request: Optional[Request],
    admin_id: Optional[uuid.UUID],
    action: str,
    entity_type: str,
    entity_id: Any = None,
    changes: Optional[dict] = None,
) -> AuditLog:
    """Record an admin action. Committed with the caller's transaction."""
    audit_log = AuditLog(
        admin_id=admin_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        changes=jsonable_encoder(changes) if changes is not None else None,
        ip_address=get_client_ip(request) if request is not None else None,
        user_agent=request.headers.get("user-agent") if request is not None else None,
    )
    db.add(audit_log)
    return audit_log
