"""
Message formatter for converting a PackResult to LLM message formats.
"""

from typing import List, Dict, Any, Optional, Tuple

from ..core.optimizer import PackResult
from ..core.types import PlacedItem


class MessageFormatter:
    """Converts PackResult items to different LLM message formats."""

    def __init__(self):
        """Initialize message formatter."""
        self.default_role_mapping = {
            "system": "system",
            "query": "user",
            "user": "user",
            "assistant": "assistant",
            "tools": "system",
            "history": "user",
            "memory": "system",
            "rag": "system",
            "examples": "assistant",
        }

    def _messages_for(self, item: PlacedItem, mapping: Dict[str, str]) -> List[Dict[str, str]]:
        """Expand an item into one or more role/content messages."""
        if isinstance(item.value, list) and item.value and all(isinstance(m, dict) for m in item.value):
            # Conversation turn grouped at registration
            return [
                {"role": m.get("role") or mapping.get(item.source, "system"),
                 "content": str(m.get("content") or "").strip()}
                for m in item.value
            ]

        role = item.role or mapping.get(item.source, "system")
        if isinstance(item.value, dict) and isinstance(item.value.get("content"), str):
            content = item.value["content"]
        else:
            content = item.content
        return [{"role": role, "content": content.strip()}]

    def to_openai_messages(
        self,
        result: PackResult,
        role_mapping: Optional[Dict[str, str]] = None,
        include_placement: bool = False
    ) -> List[Dict[str, str]]:
        """
        Convert a PackResult to the OpenAI chat message format.

        Args:
            result: Packed context
            role_mapping: Custom source-to-role mapping
            include_placement: Prefix each message with its placement tag

        Returns:
            List of OpenAI-style messages in packed order
        """
        mapping = role_mapping or self.default_role_mapping
        messages = []

        for item in result.items:
            for message in self._messages_for(item, mapping):
                if not message["content"]:
                    continue
                if include_placement:
                    message["content"] = f"[{item.placement.value}] {message['content']}"
                messages.append(message)

        return messages

    def to_openai_messages_simple(
        self,
        result: PackResult,
        user_sources: Optional[List[str]] = None
    ) -> List[Dict[str, str]]:
        """
        Simplest format: one system message plus one user message.

        Everything except user content is merged into a single system
        message, keeping packed order.

        Args:
            result: Packed context
            user_sources: Sources treated as user content (default: ["query", "user"])

        Returns:
            Message list, at most [system, user]
        """
        user_sources = user_sources or ["query", "user"]

        system_parts = []
        user_parts = []

        for item in result.items:
            content = item.content.strip()
            if not content:
                continue
            if item.source in user_sources:
                user_parts.append(content)
            else:
                system_parts.append(content)

        messages = []
        if system_parts:
            messages.append({"role": "system", "content": "\n\n".join(system_parts)})
        if user_parts:
            messages.append({"role": "user", "content": "\n\n".join(user_parts)})
        return messages

    def to_anthropic_messages(
        self,
        result: PackResult,
        role_mapping: Optional[Dict[str, str]] = None
    ) -> Tuple[str, List[Dict[str, Any]]]:
        """
        Convert to the Anthropic format: a system prompt plus user/assistant messages.

        System-role content is joined into the system prompt. Consecutive
        messages with the same role are merged so roles alternate.

        Returns:
            Tuple of (system prompt, messages)
        """
        mapping = role_mapping or self.default_role_mapping
        system_parts: List[str] = []
        messages: List[Dict[str, Any]] = []

        for item in result.items:
            for message in self._messages_for(item, mapping):
                if not message["content"]:
                    continue
                if message["role"] == "system":
                    system_parts.append(message["content"])
                elif messages and messages[-1]["role"] == message["role"]:
                    messages[-1]["content"] += "\n\n" + message["content"]
                else:
                    messages.append(message)

        return "\n\n".join(system_parts), messages

    def create_custom_mapping(self, source_roles: Dict[str, str]) -> Dict[str, str]:
        """Default mapping updated with caller-defined source roles."""
        custom_mapping = self.default_role_mapping.copy()
        custom_mapping.update(source_roles)
        return custom_mapping

    def get_source_role_summary(
        self,
        result: PackResult,
        role_mapping: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Summarize how packed items map to message roles.

        Returns:
            Dict with total item count, role distribution and per-item details
        """
        mapping = role_mapping or self.default_role_mapping

        role_counts: Dict[str, int] = {}
        details = []

        for item in result.items:
            role = item.role or mapping.get(item.source, "system")
            role_counts[role] = role_counts.get(role, 0) + 1
            details.append({
                "id": item.id,
                "source": item.source,
                "role": role,
                "tokens": item.tokens,
                "placement": item.placement.value
            })

        return {
            "total_items": len(result.items),
            "role_distribution": role_counts,
            "item_details": details
        }
