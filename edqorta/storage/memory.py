"""In-memory storage backend."""

from collections.abc import Iterable

from edqorta.models import (
    AgentStatus,
    Conversation,
    Notification,
    Property,
    ScheduledTour,
    User,
    VerificationStatus,
)
from edqorta.storage.base import StorageBackend


def _newest_first(items: dict) -> list:
    # dicts keep insertion order and updates keep their slot
    return list(reversed(items.values()))


class InMemoryStorage(StorageBackend):
    """In-memory storage implementation, the process-lifetime store."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._users: dict[str, User] = {}
        self._properties: dict[str, Property] = {}
        self._conversations: dict[str, Conversation] = {}
        self._tours: dict[str, ScheduledTour] = {}
        self._notifications: dict[str, Notification] = {}

    # ==================== User Operations ====================

    async def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def save_user(self, user: User) -> User:
        self._users[user.id] = user
        return user

    async def list_users(self) -> list[User]:
        return list(self._users.values())

    # ==================== Property Operations ====================

    async def get_property(self, property_id: str) -> Property | None:
        return self._properties.get(property_id)

    async def save_property(self, prop: Property) -> Property:
        self._properties[prop.id] = prop
        return prop

    async def list_properties(self, lister_id: str | None = None) -> list[Property]:
        props = _newest_first(self._properties)
        if lister_id:
            props = [p for p in props if p.lister_id == lister_id]
        return props

    # ==================== Conversation Operations ====================

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    async def find_conversation(
        self,
        property_id: str,
        principal_ids: Iterable[str],
    ) -> Conversation | None:
        wanted = frozenset(principal_ids)
        for conv in _newest_first(self._conversations):
            if (
                not conv.is_team
                and conv.property_id == property_id
                and conv.principal_ids == wanted
            ):
                return conv
        return None

    async def save_conversation(self, conversation: Conversation) -> Conversation:
        conversation.updated_at = self.now()
        self._conversations[conversation.id] = conversation
        return conversation

    async def list_conversations(self, user_id: str | None = None) -> list[Conversation]:
        convs = _newest_first(self._conversations)
        if user_id:
            convs = [c for c in convs if c.has_participant(user_id)]
        return convs

    # ==================== Tour Operations ====================

    async def get_tour(self, tour_id: str) -> ScheduledTour | None:
        return self._tours.get(tour_id)

    async def save_tour(self, tour: ScheduledTour) -> ScheduledTour:
        tour.updated_at = self.now()
        self._tours[tour.id] = tour
        return tour

    async def list_tours(self, user_id: str | None = None) -> list[ScheduledTour]:
        tours = _newest_first(self._tours)
        if user_id:
            tours = [t for t in tours if t.involves(user_id)]
        return tours

    # ==================== Notification Operations ====================

    async def get_notification(self, notification_id: str) -> Notification | None:
        return self._notifications.get(notification_id)

    async def save_notification(self, notification: Notification) -> Notification:
        self._notifications[notification.id] = notification
        return notification

    async def list_notifications(self, recipient_id: str | None = None) -> list[Notification]:
        notifications = _newest_first(self._notifications)
        if recipient_id:
            notifications = [n for n in notifications if n.recipient_id == recipient_id]
        return notifications

    # ==================== Health Check ====================

    async def health_check(self) -> bool:
        return True

    # ==================== Development Helpers ====================

    async def clear_all(self) -> None:
        """Clear all data (for testing)."""
        self._users.clear()
        self._properties.clear()
        self._conversations.clear()
        self._tours.clear()
        self._notifications.clear()

    async def seed_demo_data(self) -> Property:
        """Create a lister, an agent, a renter and one Lagos listing the agent verified."""
        lister = await self.save_user(User(id="demo-lister", name="Ada Lister", username="ada"))
        agent = await self.save_user(
            User(
                id="demo-agent",
                name="Tunde Agent",
                username="tunde",
                agent_status=AgentStatus.VERIFIED,
            )
        )
        await self.save_user(User(id="demo-renter", name="Chidi Renter", username="chidi"))

        return await self.save_property(
            Property(
                id="demo-property",
                lister_id=lister.id,
                location="12 Admiralty Way, Lekki, Lagos",
                description="Three bedroom flat with sea view",
                price=4_500_000,
                beds=3,
                baths=3,
                latitude=6.5244,
                longitude=3.3792,
                verification_fee=25_000,
                verification_status=VerificationStatus.VERIFIED,
                verifier_id=agent.id,
                verification_completed_at=self.now(),
            )
        )
