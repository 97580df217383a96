"""Data models."""
from hba_checker.models.rule_entry import (
    AuthMethod,
    CommentEntry,
    LocalEntry,
    NetworkEntry,
    RuleEntry,
    RuleType,
)
from hba_checker.models.query import Query
from hba_checker.models.cluster import ClusterConfig

__all__ = [
    "AuthMethod",
    "CommentEntry",
    "LocalEntry",
    "NetworkEntry",
    "RuleEntry",
    "RuleType",
    "Query",
    "ClusterConfig",
]
