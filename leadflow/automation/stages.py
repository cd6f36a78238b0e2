from sqlalchemy import func

from leadflow.models import PipelineColumn


def normalize_stage(business_id, value):
    """
    Resolve a stage reference to a pipeline column id of the business.

    Accepts a column id (int or numeric string) or a column name
    (case-insensitive, surrounding whitespace ignored). Returns None when
    the reference is empty or does not belong to the business.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        column = PipelineColumn.query.filter_by(id=value, business_id=business_id).first()
        return column.id if column else None

    text = str(value).strip()
    if not text:
        return None

    if text.isdigit():
        column = PipelineColumn.query.filter_by(id=int(text), business_id=business_id).first()
        if column:
            return column.id

    column = PipelineColumn.query.filter(
        PipelineColumn.business_id == business_id,
        func.lower(PipelineColumn.name) == text.lower(),
    ).first()
    return column.id if column else None
