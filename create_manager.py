#!/usr/bin/env python3
"""
Script to create a manager account and print a bearer token for it.
Run this after the database migration has been completed.

Usage:
    python create_manager.py <email> <name>

Example:
    python create_manager.py owner@example.com "Dana Owner"
"""

import sys
from pathlib import Path

# Add the apps/api directory to the path so we can import shiftplan
api_dir = Path(__file__).parent / "apps" / "api"
sys.path.insert(0, str(api_dir))

from sqlalchemy import select  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from shiftplan.core.database import SessionLocal  # noqa: E402
from shiftplan.models.manager import Manager  # noqa: E402
from shiftplan.routers.auth import create_access_token  # noqa: E402


def create_manager(email: str, name: str) -> bool:
    """Create a manager in the database and print an access token for it."""
    db = SessionLocal()

    try:
        existing = db.execute(select(Manager).where(Manager.email == email.lower())).scalars().first()
        if existing:
            print(f"Manager with email {email} already exists (manager_id={existing.manager_id})")
            return False

        manager = Manager(name=name, email=email.lower(), is_active=True)
        db.add(manager)
        db.commit()
        db.refresh(manager)

        print("Manager created successfully")
        print(f"   Manager ID: {manager.manager_id}")
        print(f"   Name: {manager.name}")
        print(f"   Email: {manager.email}")
        print(f"   Token: {create_access_token({'sub': str(manager.manager_id)})}")
        return True
    except SQLAlchemyError as e:
        db.rollback()
        print(f"Error creating manager: {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python create_manager.py <email> <name>")
        print('Example: python create_manager.py owner@example.com "Dana Owner"')
        sys.exit(1)

    email, name = sys.argv[1].strip(), sys.argv[2].strip()
    if not email or not name:
        print("Email and name are required")
        sys.exit(1)

    sys.exit(0 if create_manager(email, name) else 1)
