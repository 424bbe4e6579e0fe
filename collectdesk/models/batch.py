from collectdesk import db


class Batch(db.Model):
    """Payout batches - a frozen settlement of one collector's pending submissions.

    Amounts are computed from the pricing in force when the batch was
    created and are never recomputed afterwards.
    """

    __tablename__ = "batches"

    id = db.Column(db.Integer, primary_key=True)
    collector_name = db.Column(db.String(100), nullable=False, index=True)
    submissions_count = db.Column(db.Integer, nullable=False, default=0)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    commission_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    net_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    is_delivered = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    delivered_at = db.Column(db.DateTime)

    # Relationships
    submissions = db.relationship("Submission", back_populates="batch")

    def to_dict(self):
        return {
            "id": self.id,
            "collector_name": self.collector_name,
            "submissions_count": self.submissions_count,
            "total_amount": self.total_amount,
            "commission_amount": self.commission_amount,
            "net_amount": self.net_amount,
            "is_delivered": self.is_delivered,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "delivered_at": self.delivered_at.isoformat() if self.delivered_at else None,
        }

    def __repr__(self):
        return f"<Batch {self.id} - {self.collector_name} x{self.submissions_count}>"
