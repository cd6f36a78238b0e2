from datetime import datetime

from leadflow.extensions import db

from .automation_states import (
    JobStatus,
    action_label,
    trigger_label,
)


class AutomationDefinition(db.Model):
    """
    A business's "if trigger then action" rule.

    trigger_value and action_config are free-form JSON. Missing keys in
    action_config are only detected when a job executes.
    """

    __tablename__ = "automation_definitions"
    __table_args__ = (
        db.CheckConstraint("delay_seconds >= 0", name="ck_automation_delay_non_negative"),
        db.Index("ix_automation_definitions_lookup", "business_id", "is_active", "trigger_type"),
    )

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(
        db.Integer,
        db.ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
    )
    name = db.Column(db.String(255), nullable=False)

    trigger_type = db.Column(db.String(50), nullable=False)
    trigger_value = db.Column(db.JSON, nullable=True)
    action_type = db.Column(db.String(50), nullable=False)
    action_config = db.Column(db.JSON, nullable=False, default=dict)

    delay_seconds = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    jobs = db.relationship(
        "AutomationJob",
        backref="automation",
        cascade="all, delete",
        passive_deletes=True,
        lazy=True,
    )
    logs = db.relationship(
        "AutomationLog",
        backref="automation",
        cascade="all, delete",
        passive_deletes=True,
        lazy=True,
    )

    @property
    def trigger_label(self):
        return trigger_label(self.trigger_type)

    @property
    def action_label(self):
        return action_label(self.action_type)

    @classmethod
    def active_for(cls, business_id, trigger_type):
        return cls.query.filter_by(
            business_id=business_id,
            trigger_type=trigger_type,
            is_active=True,
        ).order_by(cls.position.asc(), cls.id.asc())

    def to_dict(self):
        return {
            "id": self.id,
            "business_id": self.business_id,
            "name": self.name,
            "trigger_type": self.trigger_type,
            "trigger_label": self.trigger_label,
            "trigger_value": self.trigger_value,
            "action_type": self.action_type,
            "action_label": self.action_label,
            "action_config": self.action_config,
            "delay_seconds": self.delay_seconds,
            "is_active": self.is_active,
            "position": self.position,
        }


class AutomationJob(db.Model):
    __tablename__ = "automation_jobs"
    __table_args__ = (
        db.Index("ix_automation_jobs_due", "status", "execute_at"),
        db.Index("ix_automation_jobs_automation_lead", "automation_id", "lead_id"),
    )

    id = db.Column(db.Integer, primary_key=True)
    automation_id = db.Column(
        db.Integer,
        db.ForeignKey("automation_definitions.id", ondelete="CASCADE"),
        nullable=False,
    )
    lead_id = db.Column(
        db.Integer,
        db.ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
    )

    execute_at = db.Column(db.DateTime, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=JobStatus.PENDING.value)
    result = db.Column(db.JSON, nullable=True)
    error_message = db.Column(db.Text, nullable=True)
    attempts = db.Column(db.Integer, nullable=False, default=0)

    started_at = db.Column(db.DateTime, nullable=True)
    finished_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    lead = db.relationship(
        "Lead",
        backref=db.backref("automation_jobs", cascade="all, delete", passive_deletes=True),
    )

    @property
    def is_pending(self):
        return self.status == JobStatus.PENDING.value

    def to_dict(self):
        return {
            "id": self.id,
            "automation_id": self.automation_id,
            "lead_id": self.lead_id,
            "status": self.status,
            "execute_at": self.execute_at.isoformat() if self.execute_at else None,
            "result": self.result,
            "error_message": self.error_message,
            "attempts": self.attempts,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class AutomationLog(db.Model):
    """Append-only record of every execution attempt."""

    __tablename__ = "automation_logs"
    __table_args__ = (
        db.Index("ix_automation_logs_automation_lead", "automation_id", "lead_id"),
        db.Index("ix_automation_logs_created_at", "created_at"),
    )

    id = db.Column(db.Integer, primary_key=True)
    automation_id = db.Column(
        db.Integer,
        db.ForeignKey("automation_definitions.id", ondelete="CASCADE"),
        nullable=False,
    )
    lead_id = db.Column(
        db.Integer,
        db.ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
    )

    action_type = db.Column(db.String(50), nullable=False)
    action_value = db.Column(db.JSON, nullable=True)
    status = db.Column(db.String(20), nullable=False)
    error_message = db.Column(db.Text, nullable=True)
    # "metadata" is reserved on declarative models
    details = db.Column("metadata", db.JSON, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    lead = db.relationship(
        "Lead",
        backref=db.backref("automation_logs", cascade="all, delete", passive_deletes=True),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "automation_id": self.automation_id,
            "lead_id": self.lead_id,
            "action_type": self.action_type,
            "action_value": self.action_value,
            "status": self.status,
            "error_message": self.error_message,
            "metadata": self.details,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
