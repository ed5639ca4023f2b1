"""
Database initialization script
Creates the schema (optionally dropping it first) and seeds tenants
"""
import sys

from sqlalchemy import create_engine, inspect, select
from sqlalchemy.orm import Session, sessionmaker

from portal.config import get_settings
from portal.database import Base

# Import all models
from portal.tenant.models import Tenant
from portal.report_week.models import ReportWeek, ReportWeekManual  # noqa: F401


def default_tenants() -> list[dict]:
    return [
        {"name": "Demo Tenant", "timezone": get_settings().default_timezone},
    ]


def seed_tenants(db: Session, tenants: list[dict]) -> tuple[int, int]:
    print(f"\nSeeding tenants ({len(tenants)} rows)...")
    names = [item["name"] for item in tenants]
    existing_names = set(
        db.execute(select(Tenant.name).where(Tenant.name.in_(names))).scalars().all()
    )

    inserted = 0
    skipped = 0
    for item in tenants:
        name = item["name"]
        if name in existing_names:
            print(f"  - Tenant {name}: exists, skip")
            skipped += 1
            continue

        db.add(Tenant(**item))
        existing_names.add(name)
        print(f"  - Tenant {name} ({item.get('timezone', '-')}): inserted")
        inserted += 1

    print(f"Tenant seeding done (inserted={inserted}, skipped={skipped}).")
    return inserted, skipped


def init_db(drop: bool = False):
    settings = get_settings()
    engine = create_engine(settings.sqlalchemy_database_uri())

    if drop:
        print("Dropping all tables...")
        Base.metadata.drop_all(bind=engine)

    print("Creating all tables...")
    Base.metadata.create_all(bind=engine)

    SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        future=True,
    )
    db = SessionLocal()
    try:
        seed_tenants(db, default_tenants())
        db.commit()
        print("\nDefault data seeded successfully.")
    except Exception:
        db.rollback()
        print("\nFailed to seed default data (rolled back).")
        raise
    finally:
        db.close()

    inspector = inspect(engine)
    tables = inspector.get_table_names()
    print(f"\nDatabase has {len(tables)} tables:")
    for table in tables:
        print(f"  - {table}")


if __name__ == "__main__":
    init_db(drop="--drop" in sys.argv[1:])
