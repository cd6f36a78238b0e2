from .business import Business
from .lead import Lead, Tag
from .pipeline import PipelineColumn

__all__ = ["Business", "Lead", "PipelineColumn", "Tag"]
