#!/usr/bin/env python3
"""
Create the database tables and, when SUPER_ADMIN_EMAIL and SUPER_ADMIN_PASSWORD
are set, the first super admin account.
"""
import os
from sqlalchemy import inspect
from app import create_app
from models.admin import db, AdminPrincipal
from services import auth_service


def init_db():
    """Initialize the database with tables"""
    app = create_app()

    with app.app_context():
        db.create_all()
        tables = inspect(db.engine).get_table_names()
        print("Database tables:")
        for table in tables:
            print(f"  - {table}")

        email = os.environ.get('SUPER_ADMIN_EMAIL')
        password = os.environ.get('SUPER_ADMIN_PASSWORD')
        if not email or not password:
            print("SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD not set, skipping super admin")
            return

        if AdminPrincipal.query.filter_by(email=email.strip().lower()).first():
            print(f"Super admin {email} already exists")
            return

        admin = auth_service.create_admin(email=email, password=password, name='Super Admin', role='super_admin')
        print(f"Super admin created: {admin.email}")


if __name__ == "__main__":
    init_db()
