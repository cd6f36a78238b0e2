from datetime import datetime

from leadflow.extensions import db


class Lead(db.Model):
    __tablename__ = "leads"

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(
        db.Integer,
        db.ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    pipeline_column_id = db.Column(
        db.Integer,
        db.ForeignKey("pipeline_columns.id", ondelete="SET NULL"),
        nullable=True,
    )
    name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    last_message = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    pipeline_column = db.relationship("PipelineColumn", lazy=True)
    tags = db.relationship(
        "Tag",
        backref="lead",
        cascade="all, delete-orphan",
        order_by="Tag.id",
        lazy=True,
    )

    @property
    def tag_names(self):
        return [tag.name for tag in self.tags]

    def has_tag(self, name):
        return name in self.tag_names

    def to_dict(self):
        """Convert lead object to dictionary"""
        return {
            "id": self.id,
            "business_id": self.business_id,
            "pipeline_column_id": self.pipeline_column_id,
            "name": self.name,
            "phone": self.phone,
            "last_message": self.last_message,
            "notes": self.notes,
            "tags": self.tag_names,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class Tag(db.Model):
    __tablename__ = "lead_tags"
    __table_args__ = (
        db.UniqueConstraint("lead_id", "name", name="uq_lead_tag_name"),
    )

    id = db.Column(db.Integer, primary_key=True)
    lead_id = db.Column(
        db.Integer,
        db.ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(100), nullable=False)
