from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db

ACCOUNT_ROLES = ("ADMIN", "EMPLOYEE", "MANAGER", "CUSTOMER")


class Account(db.Model, UserMixin):
    __tablename__ = "accounts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, default="")
    email = db.Column(db.String(120), nullable=False, unique=True)
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.Enum(*ACCOUNT_ROLES, name="account_roles"), nullable=False, default="CUSTOMER")
    active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    bookings = db.relationship("Booking", back_populates="account", lazy=True)
    finances = db.relationship("Finance", back_populates="account", lazy=True)
    bank_cards = db.relationship("BankCard", back_populates="account", lazy=True)
    notifications = db.relationship("Notification", back_populates="account", lazy=True)
    excess_actions = db.relationship("ExcessAction", back_populates="account", lazy=True)

    # Flask-Login refuses to log in inactive accounts
    @property
    def is_active(self):
        return bool(self.active)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "active": self.active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
