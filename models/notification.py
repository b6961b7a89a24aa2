from extensions import db

NOTIFICATION_TYPES = ("BOOKING_CREATED", "EXCESS_CREATED", "EXCESS_STATUS_CHANGED", "GENERAL")


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False)  # recipient

    type = db.Column(db.String(50), nullable=False, default="GENERAL")
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)

    booking_id = db.Column(db.Integer, db.ForeignKey("bookings.id"), nullable=True)
    excess_id = db.Column(db.Integer, db.ForeignKey("excesses.id"), nullable=True)

    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    account = db.relationship("Account", back_populates="notifications")

    def to_dict(self):
        return {
            "id": self.id,
            "account_id": self.account_id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "booking_id": self.booking_id,
            "excess_id": self.excess_id,
            "is_read": self.is_read,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
