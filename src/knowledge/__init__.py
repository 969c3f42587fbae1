"""
Knowledge package - The operator-editable handbook.

- models.py  : Protocol, Policy, SchoolInfo and partial update schemas
- store.py   : KnowledgeStore, the mutable in-memory knowledge base
- context.py : build_context() renders the store for the model prompt
- loader.py  : load_knowledge_base() reads the bootstrap handbook
"""
from src.knowledge.context import build_context
from src.knowledge.loader import HandbookLoadError, load_knowledge_base, parse_knowledge_base
from src.knowledge.models import (
    POLICY,
    PROTOCOL,
    EntryType,
    KnowledgeBase,
    Policy,
    PolicyUpdate,
    Protocol,
    ProtocolUpdate,
    SchoolInfo,
)
from src.knowledge.store import KnowledgeStore

__all__ = [
    "build_context",
    "HandbookLoadError",
    "load_knowledge_base",
    "parse_knowledge_base",
    "POLICY",
    "PROTOCOL",
    "EntryType",
    "KnowledgeBase",
    "Policy",
    "PolicyUpdate",
    "Protocol",
    "ProtocolUpdate",
    "SchoolInfo",
    "KnowledgeStore",
]
