from extensions import db

FINANCE_TYPES = ("CREDIT", "DEBIT")


class Finance(db.Model):
    __tablename__ = "finances"
    __table_args__ = (
        # one approval credit per excess
        db.Index(
            "uq_finances_excess_credit", "excess_id", unique=True,
            sqlite_where=db.text("type = 'CREDIT'"),
            postgresql_where=db.text("type = 'CREDIT'"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False)  # beneficiary
    booking_id = db.Column(db.Integer, db.ForeignKey("bookings.id"), nullable=True)
    excess_id = db.Column(db.Integer, db.ForeignKey("excesses.id"), nullable=True)
    bank_card_id = db.Column(db.Integer, db.ForeignKey("bank_cards.id"), nullable=True)

    amount = db.Column(db.Numeric(12, 2), nullable=False)
    type = db.Column(db.Enum(*FINANCE_TYPES, name="finance_types"), nullable=False)
    description = db.Column(db.String(255))
    reference = db.Column(db.String(100))

    created_at = db.Column(db.DateTime, server_default=db.func.now())

    account = db.relationship("Account", back_populates="finances")
    booking = db.relationship("Booking", back_populates="finances")
    excess = db.relationship("Excess", back_populates="finances")
    bank_card = db.relationship("BankCard", back_populates="finances")

    def to_dict(self):
        return {
            "id": self.id,
            "account_id": self.account_id,
            "booking_id": self.booking_id,
            "excess_id": self.excess_id,
            "bank_card_id": self.bank_card_id,
            "amount": str(self.amount),
            "type": self.type,
            "description": self.description,
            "reference": self.reference,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "booking": {
                "id": self.booking.id,
                "contract_id": self.booking.contract_id,
                "customer_name": self.booking.account.name if self.booking.account else None,
            } if self.booking else None,
            "excess": {"id": self.excess.id, "type": self.excess.type} if self.excess else None,
            "bank_card": self.bank_card.to_dict() if self.bank_card else None,
        }
