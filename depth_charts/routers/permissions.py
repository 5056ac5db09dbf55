from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..services import permissions
from ..services.permissions import Caller, get_caller, require_dev_seed

route = APIRouter(prefix="/permissions", tags=["permissions"])


@route.get("/me", response_model=schemas.PermissionsOut)
def my_permissions(caller: Caller = Depends(get_caller)):
    return schemas.PermissionsOut(
        user_id=caller.user_id,
        capabilities=sorted(caller.capabilities, key=lambda c: c.value),
    )


@route.post("/grant", response_model=schemas.PermissionsOut, dependencies=[Depends(require_dev_seed)])
def grant_permissions(body: schemas.GrantIn, db: Session = Depends(get_db)):
    """Dev/test only: seed capability grants for a user."""
    caps = permissions.grant(db, body.user_id.strip(), body.capabilities)
    return schemas.PermissionsOut(user_id=body.user_id.strip(), capabilities=sorted(caps, key=lambda c: c.value))
