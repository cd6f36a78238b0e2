from leadflow.extensions import db


class PipelineColumn(db.Model):
    """A stage of a business's sales pipeline."""

    __tablename__ = "pipeline_columns"
    __table_args__ = (
        db.UniqueConstraint("business_id", "name", name="uq_pipeline_column_business_name"),
    )

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(
        db.Integer,
        db.ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(100), nullable=False)
    position = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "business_id": self.business_id,
            "name": self.name,
            "position": self.position,
            "is_active": self.is_active,
        }
