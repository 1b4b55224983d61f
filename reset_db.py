# reset_db.py
from app.models import database  # Make sure this imports your Base
from app.models import *  # registers all models
from app.models.database import engine, SessionLocal
from app.services.stores import ActionCatalog
from app.utils.action_library import SEED_ACTION_TEMPLATES

if __name__ == "__main__":
    print("⚠️ Dropping all existing tables...")
    database.Base.metadata.drop_all(bind=engine)

    print("✅ Recreating tables from models...")
    database.Base.metadata.create_all(bind=engine)

    print("🌱 Seeding action catalogue...")
    db = SessionLocal()
    try:
        added = ActionCatalog(db).seed(SEED_ACTION_TEMPLATES)
    finally:
        db.close()

    print(f"✅ Database reset complete. {added} action templates loaded.")
