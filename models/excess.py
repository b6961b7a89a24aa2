from extensions import db

EXCESS_STATUSES = ("NEED_UPDATE", "APPROVED", "DECLINED")

# column name -> (download key, label)
DOCUMENT_FIELDS = {
    "image_identity": ("identity", "Identity document"),
    "image_contract": ("contract", "Contract document"),
    "image_license": ("license", "Driving license"),
    "image_invoice": ("invoice", "Invoice document"),
    "image_company_subscription": ("subscription", "Company subscription"),
}


class Excess(db.Model):
    __tablename__ = "excesses"

    id = db.Column(db.Integer, primary_key=True)
    booking_id = db.Column(db.Integer, db.ForeignKey("bookings.id"), nullable=False)

    type = db.Column(db.String(50), nullable=False)     # damage, traffic_violation, ...
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    description = db.Column(db.Text)
    notes = db.Column(db.Text)

    image_identity = db.Column(db.String(255))
    image_contract = db.Column(db.String(255))
    image_license = db.Column(db.String(255))
    image_invoice = db.Column(db.String(255))
    image_company_subscription = db.Column(db.String(255))

    status = db.Column(db.Enum(*EXCESS_STATUSES, name="excess_status"), nullable=False, default="NEED_UPDATE")

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    booking = db.relationship("Booking", back_populates="excesses")
    actions = db.relationship("ExcessAction", back_populates="excess", lazy=True,
                              order_by="ExcessAction.id")
    finances = db.relationship("Finance", back_populates="excess", lazy=True)

    @property
    def owner_id(self):
        return self.booking.account_id if self.booking else None

    def documents(self):
        return [
            {"type": key, "field": field, "label": label, "filename": getattr(self, field)}
            for field, (key, label) in DOCUMENT_FIELDS.items()
        ]

    def to_dict(self, include_booking=False):
        data = {
            "id": self.id,
            "booking_id": self.booking_id,
            "type": self.type,
            "amount": str(self.amount),
            "description": self.description,
            "notes": self.notes,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        for field in DOCUMENT_FIELDS:
            data[field] = getattr(self, field)
        if include_booking and self.booking:
            data["booking"] = self.booking.summary()
        return data
