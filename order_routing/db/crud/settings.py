from sqlalchemy.orm import Session
from order_routing.db.models.settings import Settings
from order_routing.db.schemas.settings import SettingsUpdate

def get_or_create_settings(db: Session) -> Settings:
    settings = db.query(Settings).first()
    if not settings:
        # Auto-assignment stays off until an admin turns it on
        settings = Settings(auto_assign_enabled=False)
        db.add(settings)
        db.commit()
        db.refresh(settings)
    return settings

def is_auto_assign_enabled(db: Session) -> bool:
    settings = db.query(Settings).first()
    return bool(settings and settings.auto_assign_enabled)

def update_settings(db: Session, settings_data: SettingsUpdate) -> Settings:
    settings = db.query(Settings).first()
    if not settings:
        settings = Settings(auto_assign_enabled=False)
        db.add(settings)

    update_data = settings_data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if value is not None:
            setattr(settings, key, value)

    db.commit()
    db.refresh(settings)
    return settings
