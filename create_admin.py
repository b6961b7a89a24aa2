import os

from app import create_app
from extensions import db
from models.account import Account

app = create_app()

with app.app_context():
    db.create_all()

    email = os.getenv("ADMIN_EMAIL", "admin@cardoo.com")
    existing_admin = Account.query.filter_by(email=email).first()
    if existing_admin:
        print("⚠️ Admin account already exists!")
    else:
        admin = Account(name="Admin", email=email, role="ADMIN")
        admin.set_password(os.getenv("ADMIN_PASSWORD", "admin123"))
        db.session.add(admin)
        db.session.commit()
        print("Admin account created successfully!")
