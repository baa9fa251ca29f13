"""Settings router - read and update salon-wide configuration"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from .repository import SettingsRepository
from .schemas import SalonConfigResponse, SalonConfigUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=SalonConfigResponse)
async def get_settings(db: Session = Depends(get_db)):
    config = SettingsRepository.get_config(db)
    return SalonConfigResponse(
        cancellationWindowHours=config.cancellation_window_hours,
        strictResize=config.strict_resize,
    )


@router.put("", response_model=SalonConfigResponse)
async def update_settings(data: SalonConfigUpdate, db: Session = Depends(get_db)):
    config = SettingsRepository.get_config(db)
    config = SettingsRepository.update_config(
        db,
        config,
        cancellation_window_hours=data.cancellationWindowHours,
        strict_resize=data.strictResize,
    )
    logger.info(
        f"⚙️ Salon settings updated: window={config.cancellation_window_hours}h, "
        f"strict_resize={config.strict_resize}"
    )
    return SalonConfigResponse(
        cancellationWindowHours=config.cancellation_window_hours,
        strictResize=config.strict_resize,
    )
