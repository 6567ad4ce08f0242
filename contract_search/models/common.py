"""Common enums shared across document models."""

from enum import Enum


class DocumentStatus(str, Enum):
    """Lifecycle status of a contract document."""

    active = "Active"
    renewal_due = "Renewal Due"
    expired = "Expired"


class RiskLevel(str, Enum):
    """Qualitative risk level assigned outside this service."""

    low = "Low"
    medium = "Medium"
    high = "High"


class ResultType(str, Enum):
    """Origin of a search result."""

    document = "document"
    chunk = "chunk"
