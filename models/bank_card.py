from extensions import db


class BankCard(db.Model):
    __tablename__ = "bank_cards"

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False)

    card_number = db.Column(db.String(19), nullable=False)
    card_holder_name = db.Column(db.String(100), nullable=False)
    expiry_date = db.Column(db.String(5), nullable=False)  # MM/YY
    cvv = db.Column(db.String(4))

    balance = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    account = db.relationship("Account", back_populates="bank_cards")
    finances = db.relationship("Finance", back_populates="bank_card", lazy=True)

    @property
    def masked_number(self):
        return "**** **** **** " + self.card_number[-4:]

    def to_dict(self):
        return {
            "id": self.id,
            "account_id": self.account_id,
            "card_number": self.masked_number,
            "card_holder_name": self.card_holder_name,
            "expiry_date": self.expiry_date,
            "balance": str(self.balance),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
