"""
SQLAlchemy database models.
"""

from .admin import AdminAuditLog, AuditAction, AuditTargetType
from .base import Base, TimestampMixin
from .catalogue import Category, CodingCategory, Subcategory
from .content import CodingQuestion, Project, Question, SystemDesignProblem
from .user import BillingInterval, SubscriptionStatus, User, UserStatus, UserSubscription

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "UserStatus",
    "UserSubscription",
    "SubscriptionStatus",
    "BillingInterval",
    "Category",
    "Subcategory",
    "CodingCategory",
    "Question",
    "CodingQuestion",
    "SystemDesignProblem",
    "Project",
    "AdminAuditLog",
    "AuditAction",
    "AuditTargetType",
]
