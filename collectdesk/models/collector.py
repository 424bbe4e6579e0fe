from collectdesk import db


class Collector(db.Model):
    """Field agents who collect submissions and are paid commission on them.

    ``name`` is the join key for submissions and batches, so it is treated
    as immutable once created.
    """

    __tablename__ = "collectors"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    password_hash = db.Column(db.String(256))
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    @property
    def has_password(self):
        return bool(self.password_hash)

    def to_identity(self):
        return {"id": self.id, "name": self.name}

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "is_active": self.is_active,
            "has_password": self.has_password,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Collector {self.name}>"
