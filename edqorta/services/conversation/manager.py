"""Conversation manager - dedups inquiry threads and appends messages."""

import structlog

from edqorta.core.exceptions import NotFound, ValidationError
from edqorta.models import (
    AudioContent,
    Conversation,
    Message,
    MessageContent,
    MessageType,
    TextContent,
)
from edqorta.storage.base import StorageBackend

logger = structlog.get_logger()


class ConversationManager:
    """Finds or creates conversations and manages their message history.

    Handles:
    - One thread per (property, participant pair); new inquiries reuse it
    - Team threads that bypass property dedup
    - Message append with read-state bookkeeping
    - System joins when an agent is folded into a thread
    """

    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage

    async def find_or_create(
        self,
        property_id: str,
        user_a_id: str,
        user_b_id: str,
        seed_message: MessageContent | None = None,
    ) -> Conversation:
        """Get the inquiry thread for a property and two users, creating it once.

        Args:
            property_id: Property the inquiry is about
            user_a_id: Initiating user (sender of the seed message)
            user_b_id: Other participant, usually the lister
            seed_message: Optional first message from ``user_a_id``

        Returns:
            Existing conversation unchanged, or the newly created one
        """
        async with self.storage.lock:
            return await self._find_or_create(property_id, user_a_id, user_b_id, seed_message)

    async def _find_or_create(
        self,
        property_id: str,
        user_a_id: str,
        user_b_id: str,
        seed_message: MessageContent | None = None,
    ) -> Conversation:
        if user_a_id == user_b_id:
            raise ValidationError(
                "A conversation needs two distinct participants",
                details={"user_id": user_a_id},
            )

        await self.storage.require_property(property_id)
        await self.storage.require_user(user_a_id)
        await self.storage.require_user(user_b_id)

        conversation = await self.storage.find_conversation(property_id, {user_a_id, user_b_id})
        if conversation:
            logger.debug(
                "Found existing conversation",
                conversation_id=conversation.id,
                property_id=property_id,
            )
            return conversation

        now = self.storage.now()
        conversation = Conversation(
            id=self.storage.new_id(),
            participant_ids=[user_a_id, user_b_id],
            property_id=property_id,
            created_at=now,
            updated_at=now,
        )
        if seed_message is not None:
            conversation.messages.append(self._build_message(user_a_id, seed_message))

        await self.storage.save_conversation(conversation)

        logger.info(
            "Created new conversation",
            conversation_id=conversation.id,
            property_id=property_id,
            participants=conversation.participant_ids,
        )

        return conversation

    async def create_team_conversation(
        self,
        team_id: str,
        participant_ids: list[str],
        property_id: str | None = None,
    ) -> Conversation:
        """Create a group thread for a search team. Never deduplicated."""
        async with self.storage.lock:
            unique_ids = list(dict.fromkeys(participant_ids))
            if len(unique_ids) < 2:
                raise ValidationError(
                    "A team conversation needs at least two participants",
                    details={"team_id": team_id},
                )
            for user_id in unique_ids:
                await self.storage.require_user(user_id)
            if property_id is not None:
                await self.storage.require_property(property_id)

            now = self.storage.now()
            conversation = Conversation(
                id=self.storage.new_id(),
                participant_ids=unique_ids,
                property_id=property_id,
                team_id=team_id,
                created_at=now,
                updated_at=now,
            )
            await self.storage.save_conversation(conversation)

            logger.info(
                "Created team conversation",
                conversation_id=conversation.id,
                team_id=team_id,
            )
            return conversation

    async def append_message(
        self,
        conversation_id: str,
        sender_id: str,
        content: MessageContent,
    ) -> Message:
        """Append a user message to a conversation.

        Sending marks the sender's view of the history as read, and the new
        message is read as well since the sender has seen it.

        Raises:
            NotFound: If the conversation is unknown or the sender is not in it
            ValidationError: If the text is empty
        """
        async with self.storage.lock:
            conversation = await self.storage.require_conversation(conversation_id)
            if not conversation.has_participant(sender_id):
                raise NotFound("participant", sender_id)

            message = self._build_message(sender_id, content)

            for previous in conversation.messages:
                previous.read = True
            conversation.messages.append(message)
            await self.storage.save_conversation(conversation)

            logger.info(
                "Appended message",
                conversation_id=conversation_id,
                sender_id=sender_id,
                kind=content.kind,
            )
            return message

    async def add_system_participant(self, conversation_id: str, user_id: str) -> Conversation:
        """Fold a user into a conversation with a system join message."""
        async with self.storage.lock:
            return await self.fold_in(conversation_id, user_id)

    async def fold_in(self, conversation_id: str, user_id: str) -> Conversation:
        """Add a system participant; the caller must hold the store lock."""
        conversation = await self.storage.require_conversation(conversation_id)
        user = await self.storage.require_user(user_id)

        if conversation.has_participant(user.id):
            return conversation

        conversation.participant_ids.append(user.id)
        conversation.joined_participant_ids.append(user.id)
        conversation.messages.append(
            Message(
                id=self.storage.new_id(),
                sender_id=user.id,
                text=f"{user.name} joined the conversation",
                timestamp=self.storage.now(),
                read=False,
                type=MessageType.SYSTEM,
            )
        )
        await self.storage.save_conversation(conversation)

        logger.info(
            "Participant joined conversation",
            conversation_id=conversation.id,
            user_id=user.id,
        )
        return conversation

    async def mark_read(self, conversation_id: str) -> Conversation:
        """Mark every message in a conversation as read."""
        async with self.storage.lock:
            conversation = await self.storage.require_conversation(conversation_id)
            for message in conversation.messages:
                message.read = True
            return await self.storage.save_conversation(conversation)

    async def get(self, conversation_id: str) -> Conversation:
        return await self.storage.require_conversation(conversation_id)

    async def list_for_user(self, user_id: str) -> list[Conversation]:
        return await self.storage.list_conversations(user_id=user_id)

    def _build_message(self, sender_id: str, content: MessageContent) -> Message:
        """Turn a content payload into a user message read by its sender."""
        payload: dict = {}
        if isinstance(content, TextContent):
            text = content.text.strip()
            if not text:
                raise ValidationError("Message text cannot be empty")
            payload["text"] = text
        elif isinstance(content, AudioContent):
            payload["audio"] = content.audio
        else:
            raise ValidationError("Unsupported message content")

        return Message(
            id=self.storage.new_id(),
            sender_id=sender_id,
            timestamp=self.storage.now(),
            read=True,
            type=MessageType.USER,
            **payload,
        )
