"""Conversation service - inquiry threads and the deals they carry."""

from edqorta.services.conversation.deals import DealLifecycle
from edqorta.services.conversation.manager import ConversationManager

__all__ = ["ConversationManager", "DealLifecycle"]
