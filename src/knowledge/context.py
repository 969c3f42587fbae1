"""
Context Builder - Render the knowledge base as grounding text.

The whole knowledge base is embedded in the system prompt on every model
call (full-context stuffing, no retrieval or ranking). The knowledge base
is expected to stay small enough to fit the model's input budget.
"""
from src.knowledge.models import KnowledgeBase, Policy, Protocol

BLOCK_SEPARATOR = "\n---\n"
DEFAULT_URGENCY_LABEL = "STANDARD"


def render_protocol(protocol: Protocol) -> str:
    """Render one protocol as a single labeled line."""
    urgency = protocol.urgency.upper() if protocol.urgency else DEFAULT_URGENCY_LABEL
    return (
        f"[PROTOCOL - {urgency}] TOPIC: {protocol.topic} "
        f"CONTENT: \"{protocol.content}\" "
        f"SOURCE: {protocol.display_source} "
        f"NOTE: {protocol.operator_action}"
    )


def render_policy(policy: Policy) -> str:
    """Render one policy as a single labeled line."""
    return (
        f"[POLICY] TOPIC: {policy.topic} "
        f"CONTENT: \"{policy.content}\" "
        f"SOURCE: {policy.display_source} "
        f"NOTE: {policy.operator_action}"
    )


def build_context(knowledge_base: KnowledgeBase) -> str:
    """
    Render the knowledge base for the model prompt.

    Output is a pure function of the knowledge base: school name, then
    every protocol, then every policy, blocks separated by '---'.

    Args:
        knowledge_base: Snapshot of the current knowledge base

    Returns:
        Grounding text embedded verbatim in the system prompt
    """
    protocols = BLOCK_SEPARATOR.join(render_protocol(p) for p in knowledge_base.protocols)
    policies = BLOCK_SEPARATOR.join(render_policy(p) for p in knowledge_base.policies)

    return (
        f"SCHOOL NAME: {knowledge_base.school_info.name}\n\n"
        f"PROTOCOLS:\n{protocols}\n\n"
        f"POLICIES:\n{policies}"
    )
