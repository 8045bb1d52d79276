"""Abstract base class for storage backends."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from edqorta.core.exceptions import NotFound
from edqorta.core.ids import Clock, IdFactory, new_id, utcnow
from edqorta.models import Conversation, Notification, Property, ScheduledTour, User


class StorageBackend(ABC):
    """Abstract storage backend interface.

    The backend exclusively owns every collection. Workflows serialize their
    mutations by holding ``lock`` for the whole operation; there are no
    version checks, so unguarded concurrent writers could fork a
    conversation or confirm a tour twice.
    """

    def __init__(self, id_factory: IdFactory = new_id, clock: Clock = utcnow) -> None:
        self._id_factory = id_factory
        self._clock = clock
        self.lock = asyncio.Lock()

    def new_id(self) -> str:
        """Mint an id for a new entity."""
        return self._id_factory()

    def now(self) -> datetime:
        """Current time according to the injected clock."""
        return self._clock()

    # ==================== User Operations ====================

    @abstractmethod
    async def get_user(self, user_id: str) -> User | None:
        """Get a user by ID."""
        ...

    @abstractmethod
    async def save_user(self, user: User) -> User:
        """Save or update a user."""
        ...

    @abstractmethod
    async def list_users(self) -> list[User]:
        """List all users."""
        ...

    # ==================== Property Operations ====================

    @abstractmethod
    async def get_property(self, property_id: str) -> Property | None:
        """Get a property by ID."""
        ...

    @abstractmethod
    async def save_property(self, prop: Property) -> Property:
        """Save or update a property. New properties go to the front."""
        ...

    @abstractmethod
    async def list_properties(self, lister_id: str | None = None) -> list[Property]:
        """List properties, most recent first."""
        ...

    # ==================== Conversation Operations ====================

    @abstractmethod
    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        """Get a conversation by ID."""
        ...

    @abstractmethod
    async def find_conversation(
        self,
        property_id: str,
        principal_ids: Iterable[str],
    ) -> Conversation | None:
        """Find the non-team conversation for a property and participant pair."""
        ...

    @abstractmethod
    async def save_conversation(self, conversation: Conversation) -> Conversation:
        """Save or update a conversation. New conversations go to the front."""
        ...

    @abstractmethod
    async def list_conversations(self, user_id: str | None = None) -> list[Conversation]:
        """List conversations, optionally for one participant, most recent first."""
        ...

    # ==================== Tour Operations ====================

    @abstractmethod
    async def get_tour(self, tour_id: str) -> ScheduledTour | None:
        """Get a tour by ID."""
        ...

    @abstractmethod
    async def save_tour(self, tour: ScheduledTour) -> ScheduledTour:
        """Save or update a tour. New tours go to the front."""
        ...

    @abstractmethod
    async def list_tours(self, user_id: str | None = None) -> list[ScheduledTour]:
        """List tours, optionally those involving one user, most recent first."""
        ...

    # ==================== Notification Operations ====================

    @abstractmethod
    async def get_notification(self, notification_id: str) -> Notification | None:
        """Get a notification by ID."""
        ...

    @abstractmethod
    async def save_notification(self, notification: Notification) -> Notification:
        """Save or update a notification. New notifications go to the front."""
        ...

    @abstractmethod
    async def list_notifications(self, recipient_id: str | None = None) -> list[Notification]:
        """List notifications, optionally for one recipient, most recent first."""
        ...

    # ==================== Health Check ====================

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if storage is healthy."""
        ...

    # ==================== Lookup Helpers ====================

    async def require_user(self, user_id: str) -> User:
        user = await self.get_user(user_id)
        if user is None:
            raise NotFound("user", user_id)
        return user

    async def require_property(self, property_id: str) -> Property:
        prop = await self.get_property(property_id)
        if prop is None:
            raise NotFound("property", property_id)
        return prop

    async def require_conversation(self, conversation_id: str) -> Conversation:
        conversation = await self.get_conversation(conversation_id)
        if conversation is None:
            raise NotFound("conversation", conversation_id)
        return conversation

    async def require_tour(self, tour_id: str) -> ScheduledTour:
        tour = await self.get_tour(tour_id)
        if tour is None:
            raise NotFound("tour", tour_id)
        return tour
