from datetime import datetime

from leadflow.extensions import db


class Business(db.Model):
    __tablename__ = "businesses"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    whatsapp_phone_number_id = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    pipeline_columns = db.relationship(
        "PipelineColumn",
        backref="business",
        cascade="all, delete",
        order_by="PipelineColumn.position",
        lazy=True,
    )
    leads = db.relationship(
        "Lead",
        backref="business",
        cascade="all, delete",
        lazy=True,
    )
    automations = db.relationship(
        "AutomationDefinition",
        backref="business",
        cascade="all, delete",
        lazy=True,
    )

    def __repr__(self):
        return f"<Business {self.id} {self.name}>"
