"""Pydantic models for generated towns and validation results."""
from .town import (
    NPC,
    ApproachType,
    Clue,
    ClueTopicRule,
    ConflictThreshold,
    DefaultTopicRule,
    DiscoveryTopicRule,
    KnowledgeFact,
    Location,
    LocationTopicRule,
    NPCKnowledge,
    NPCRelationship,
    RelationshipType,
    SinLevel,
    SinNode,
    Topic,
    TopicRule,
    TownData,
)
from .validation import ValidationIssue, ValidationResult

__all__ = [
    "NPC",
    "ApproachType",
    "Clue",
    "ClueTopicRule",
    "ConflictThreshold",
    "DefaultTopicRule",
    "DiscoveryTopicRule",
    "KnowledgeFact",
    "Location",
    "LocationTopicRule",
    "NPCKnowledge",
    "NPCRelationship",
    "RelationshipType",
    "SinLevel",
    "SinNode",
    "Topic",
    "TopicRule",
    "TownData",
    "ValidationIssue",
    "ValidationResult",
]
