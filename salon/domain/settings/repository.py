"""Settings repository - the single SalonConfig row"""

import logging

from sqlalchemy.orm import Session

from ...config import DEFAULT_CANCELLATION_WINDOW_HOURS, STRICT_RESIZE
from ...models import SalonConfig

logger = logging.getLogger(__name__)

SALON_CONFIG_ID = 1


class SettingsRepository:
    @staticmethod
    def get_config(db: Session) -> SalonConfig:
        """Return the salon config, creating it from environment defaults on first read"""
        config = db.query(SalonConfig).filter(SalonConfig.id == SALON_CONFIG_ID).first()
        if config is None:
            config = SalonConfig(
                id=SALON_CONFIG_ID,
                cancellation_window_hours=DEFAULT_CANCELLATION_WINDOW_HOURS,
                strict_resize=STRICT_RESIZE,
            )
            db.add(config)
            db.commit()
            db.refresh(config)
            logger.info(
                f"Initialized salon config (cancellation window {config.cancellation_window_hours}h)"
            )
        return config

    @staticmethod
    def update_config(db: Session, config: SalonConfig, **updates) -> SalonConfig:
        for key, value in updates.items():
            if value is not None:
                setattr(config, key, value)
        db.commit()
        db.refresh(config)
        return config
