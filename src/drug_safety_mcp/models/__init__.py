"""Data models for Drug Safety MCP."""

from drug_safety_mcp.models.model_fda import (
    AdverseEventReport,
    DrugLabel,
    FAERSReport,
    OpenFDAEnvelope,
    RecallRecord,
    SeriousEventReport,
)
from drug_safety_mcp.models.model_tools import ToolAnnotations, ToolDescriptor

__all__ = [
    "AdverseEventReport",
    "DrugLabel",
    "FAERSReport",
    "OpenFDAEnvelope",
    "RecallRecord",
    "SeriousEventReport",
    "ToolAnnotations",
    "ToolDescriptor",
]
