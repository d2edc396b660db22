# init_db.py
from order_routing.database import engine, SessionLocal, Base
from order_routing.db.models.settings import Settings

# Importing the package registers every table on Base.metadata
import order_routing.db.models  # noqa: F401

def seed():
    db = SessionLocal()
    try:
        # Seed settings; auto-assignment starts disabled
        if not db.query(Settings).first():
            db.add(Settings(auto_assign_enabled=False))
        db.commit()
    finally:
        db.close()

def init():
    Base.metadata.create_all(bind=engine)
    print("✅ Tables created")
    seed()
    print("✅ Seed data added")

if __name__ == "__main__":
    init()
