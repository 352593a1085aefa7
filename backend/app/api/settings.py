"""Business settings endpoints, including JSON export and import."""

import json

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from backend.app.core.errors import BillingValidationError, SettingsImportError
from backend.app.core.security import get_current_user
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.business_settings import BusinessSettingsRead, BusinessSettingsUpdate
from backend.app.services.business_settings import (
    export_settings_document,
    get_or_create_business_settings,
    import_settings_document,
    update_business_settings,
)

router = APIRouter(prefix="/settings", tags=["settings"])

EXPORT_FILENAME = "aquabill-settings.json"


@router.get("", response_model=BusinessSettingsRead)
async def get_business_settings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_or_create_business_settings(db, current_user.id)


@router.put("", response_model=BusinessSettingsRead)
async def put_business_settings(
    payload: BusinessSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return update_business_settings(db, current_user.id, payload)
    except BillingValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.get("/export")
async def export_business_settings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    settings = get_or_create_business_settings(db, current_user.id)
    document = export_settings_document(settings)
    return Response(
        content=json.dumps(document, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/import", response_model=BusinessSettingsRead)
async def import_business_settings(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    raw = await request.body()
    try:
        return import_settings_document(db, current_user.id, raw)
    except SettingsImportError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
