# depth_charts/services/permissions.py
"""
Capability gate.

Every route declares the one capability it needs with
``Depends(require(Capability.X))``. The caller's capability set is resolved
once per request (FastAPI caches dependency results within a request) and a
denial is raised before the route body runs, so nothing is written and no
history is recorded.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import FrozenSet, Protocol

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .. import models
from ..db import get_db
from ..errors import AuthorizationError

logger = logging.getLogger("depth_charts.permissions")

Capability = models.Capability
ALL_CAPABILITIES: FrozenSet[Capability] = frozenset(Capability)


def _superusers() -> set[str]:
    raw = os.getenv("DEPTH_CHART_SUPERUSERS") or ""
    return {u.strip() for u in raw.split(",") if u.strip()}


class PermissionService(Protocol):
    def capabilities_for(self, user_id: str) -> FrozenSet[Capability]: ...


class TablePermissionService:
    """Grants stored in `user_capabilities`; env superusers get everything."""

    def __init__(self, db: Session):
        self.db = db

    def capabilities_for(self, user_id: str) -> FrozenSet[Capability]:
        if user_id in _superusers():
            return ALL_CAPABILITIES
        rows = self.db.query(models.UserCapability).filter(models.UserCapability.user_id == user_id).all()
        return frozenset(r.capability for r in rows)


def get_permission_service(db: Session = Depends(get_db)) -> PermissionService:
    return TablePermissionService(db)


@dataclass(frozen=True)
class Caller:
    user_id: str
    capabilities: FrozenSet[Capability]

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities


def get_caller(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    service: PermissionService = Depends(get_permission_service),
) -> Caller:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise AuthorizationError("Missing X-User-Id header")
    return Caller(user_id=user_id, capabilities=frozenset(service.capabilities_for(user_id)))


def authorize(caller: Caller, capability: Capability) -> Caller:
    if not caller.can(capability):
        logger.warning("denied user=%s capability=%s", caller.user_id, capability.value)
        raise AuthorizationError(f"Missing capability '{capability.value}'", required=capability.value)
    return caller


def require(capability: Capability):
    """Route dependency: the resolved caller, provided they hold `capability`."""

    def _dependency(caller: Caller = Depends(get_caller)) -> Caller:
        return authorize(caller, capability)

    _dependency.__name__ = f"require_{capability.value}"
    return _dependency


def grant(db: Session, user_id: str, capabilities: list[Capability]) -> FrozenSet[Capability]:
    """Dev/test seeding of grants; idempotent per (user, capability)."""
    have = {
        r.capability
        for r in db.query(models.UserCapability).filter(models.UserCapability.user_id == user_id).all()
    }
    for cap in capabilities:
        if cap not in have:
            db.add(models.UserCapability(user_id=user_id, capability=cap))
            have.add(cap)
    db.commit()
    return frozenset(have)


def dev_seed_enabled() -> bool:
    return os.getenv("TESTING", "0") == "1" or os.getenv("ALLOW_DEV_SEED", "0") == "1"


def require_dev_seed() -> None:
    """Route dependency for dev/test seeding endpoints (teams, roster, grants)."""
    if not dev_seed_enabled():
        raise AuthorizationError("Seeding endpoints are disabled; set ALLOW_DEV_SEED=1 to enable them")
