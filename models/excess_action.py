from extensions import db


class ExcessAction(db.Model):
    __tablename__ = "excess_actions"

    id = db.Column(db.Integer, primary_key=True)
    excess_id = db.Column(db.Integer, db.ForeignKey("excesses.id"), nullable=False)
    account_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False)  # actor

    action_type = db.Column(db.String(50), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    details = db.Column(db.Text)

    created_at = db.Column(db.DateTime, server_default=db.func.now())

    excess = db.relationship("Excess", back_populates="actions")
    account = db.relationship("Account", back_populates="excess_actions")

    def to_dict(self):
        return {
            "id": self.id,
            "excess_id": self.excess_id,
            "action_type": self.action_type,
            "description": self.description,
            "details": self.details,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "account": {"id": self.account.id, "name": self.account.name} if self.account else None,
        }
