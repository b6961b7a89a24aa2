from extensions import db

BOOKING_STATUSES = ("PENDING", "PAID", "CONFIRMED", "COMPLETED", "CANCELLED")
RENTAL_TYPES = ("daily", "weekly", "monthly")


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False)

    contract_id = db.Column(db.String(64), nullable=False, unique=True)
    booking_reference = db.Column(db.String(64), unique=True)  # external booking number

    rental_days = db.Column(db.Integer, nullable=False)
    rental_type = db.Column(db.Enum(*RENTAL_TYPES, name="rental_types"), nullable=False)
    daily_rate = db.Column(db.Numeric(12, 2), nullable=False)
    insurance_amount = db.Column(db.Numeric(12, 2), nullable=False)

    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)

    status = db.Column(db.Enum(*BOOKING_STATUSES, name="booking_status"), nullable=False, default="PENDING")

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    account = db.relationship("Account", back_populates="bookings")
    excesses = db.relationship("Excess", back_populates="booking", lazy=True)
    finances = db.relationship("Finance", back_populates="booking", lazy=True)

    def to_dict(self, include_customer=False):
        data = {
            "id": self.id,
            "account_id": self.account_id,
            "contract_id": self.contract_id,
            "booking_reference": self.booking_reference,
            "rental_days": self.rental_days,
            "rental_type": self.rental_type,
            "daily_rate": str(self.daily_rate),
            "insurance_amount": str(self.insurance_amount),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_customer and self.account:
            data["customer"] = {"id": self.account.id, "name": self.account.name, "email": self.account.email}
        return data

    def summary(self):
        return {
            "id": self.id,
            "contract_id": self.contract_id,
            "booking_reference": self.booking_reference,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "rental_type": self.rental_type,
            "customer_name": self.account.name if self.account else None,
        }
