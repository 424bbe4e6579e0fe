from collectdesk import db


class Submission(db.Model):
    """One collected name/phone record.

    A submission is in exactly one of three states: unbatched
    (``batch_id`` is NULL), batched-pending, or batched-delivered.
    """

    __tablename__ = "submissions"

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(100), nullable=False)
    phone_number = db.Column(db.String(20), nullable=False)
    collector_name = db.Column(db.String(100), index=True)
    is_delivered = db.Column(db.Boolean, default=False, nullable=False)
    batch_id = db.Column(db.Integer, db.ForeignKey("batches.id", ondelete="SET NULL"), index=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    # Relationships
    batch = db.relationship("Batch", back_populates="submissions")

    @property
    def status(self):
        if self.batch_id is None:
            return "unbatched"
        return "delivered" if self.is_delivered else "pending"

    def to_dict(self):
        return {
            "id": self.id,
            "full_name": self.full_name,
            "phone_number": self.phone_number,
            "collector_name": self.collector_name,
            "is_delivered": self.is_delivered,
            "batch_id": self.batch_id,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Submission {self.id} - {self.status}>"
