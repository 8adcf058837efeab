#!/usr/bin/env python3
"""
Grant back-office access to an existing account.

Activates the user and inserts their admins row.
Usage: python grant_admin.py <email>
"""
import sys

from storefront import create_app
from storefront.models import db, User, Admin


def grant_admin(email):
    """Activate a user by email and make them an administrator"""
    app = create_app()

    with app.app_context():
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            print(f"User {email} not found!")
            return False

        user.status = 'active'
        if user.admin is None:
            db.session.add(Admin(user_id=user.id))
        db.session.commit()
        print(f"User {user.email} is now an administrator.")
        print(f"   User ID: {user.user_id}")
        return True


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python grant_admin.py <email>")
        sys.exit(1)

    sys.exit(0 if grant_admin(sys.argv[1]) else 1)
