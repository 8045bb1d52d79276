"""Conversation endpoints - inquiry threads, messages and deals."""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from edqorta.api.dependencies import ConversationsDep, DealsDep
from edqorta.models import Conversation, Message, MessageContent, Review

router = APIRouter(prefix="/conversations", tags=["Conversations"])


# ==================== Pydantic Schemas ====================


class ConversationOpen(BaseModel):
    """Schema for finding or creating an inquiry thread."""

    property_id: str
    user_id: str
    other_user_id: str
    seed_message: MessageContent | None = None


class TeamConversationCreate(BaseModel):
    team_id: str
    participant_ids: list[str]
    property_id: str | None = None


class MessageCreate(BaseModel):
    sender_id: str
    content: MessageContent


class ParticipantAdd(BaseModel):
    user_id: str


class ReviewCreate(BaseModel):
    reviewer_id: str
    rating: int = Field(..., ge=1, le=5)
    text: str = ""


class PaymentRecord(BaseModel):
    payer_id: str | None = None


# ==================== Conversation Endpoints ====================


@router.post("", response_model=Conversation)
async def find_or_create_conversation(
    data: ConversationOpen,
    conversations: ConversationsDep,
) -> Conversation:
    """Return the thread for a property and two users, creating it on first contact."""
    return await conversations.find_or_create(
        data.property_id,
        data.user_id,
        data.other_user_id,
        seed_message=data.seed_message,
    )


@router.post("/teams", response_model=Conversation, status_code=status.HTTP_201_CREATED)
async def create_team_conversation(
    data: TeamConversationCreate,
    conversations: ConversationsDep,
) -> Conversation:
    """Create a group thread for a search team."""
    return await conversations.create_team_conversation(
        data.team_id,
        data.participant_ids,
        property_id=data.property_id,
    )


@router.get("", response_model=list[Conversation])
async def list_conversations(user_id: str, conversations: ConversationsDep) -> list[Conversation]:
    """List a user's conversations, most recent first."""
    return await conversations.list_for_user(user_id)


@router.get("/{conversation_id}", response_model=Conversation)
async def get_conversation(conversation_id: str, conversations: ConversationsDep) -> Conversation:
    return await conversations.get(conversation_id)


@router.post(
    "/{conversation_id}/messages",
    response_model=Message,
    status_code=status.HTTP_201_CREATED,
)
async def append_message(
    conversation_id: str,
    data: MessageCreate,
    conversations: ConversationsDep,
) -> Message:
    """Send a text or voice message."""
    return await conversations.append_message(conversation_id, data.sender_id, data.content)


@router.post("/{conversation_id}/participants", response_model=Conversation)
async def add_participant(
    conversation_id: str,
    data: ParticipantAdd,
    conversations: ConversationsDep,
) -> Conversation:
    """Fold a user into the thread with a system message."""
    return await conversations.add_system_participant(conversation_id, data.user_id)


@router.post("/{conversation_id}/read", response_model=Conversation)
async def mark_conversation_read(
    conversation_id: str,
    conversations: ConversationsDep,
) -> Conversation:
    return await conversations.mark_read(conversation_id)


# ==================== Deal Endpoints ====================


@router.post("/{conversation_id}/deal", response_model=Conversation)
async def open_deal(conversation_id: str, deals: DealsDep) -> Conversation:
    """Start a deal on the thread; the renter is asked to pay."""
    return await deals.open_deal(conversation_id)


@router.post("/{conversation_id}/deal/payment", response_model=Conversation)
async def record_payment(
    conversation_id: str,
    data: PaymentRecord,
    deals: DealsDep,
) -> Conversation:
    """Record the renter's payment; the agreement is next."""
    return await deals.record_payment(conversation_id, payer_id=data.payer_id)


@router.post("/{conversation_id}/deal/agreement", response_model=Conversation)
async def sign_agreement(conversation_id: str, deals: DealsDep) -> Conversation:
    """Sign the agreement and release funds to the lister."""
    return await deals.sign_agreement(conversation_id)


@router.post(
    "/{conversation_id}/deal/reviews",
    response_model=Review,
    status_code=status.HTTP_201_CREATED,
)
async def leave_review(
    conversation_id: str,
    data: ReviewCreate,
    deals: DealsDep,
) -> Review:
    """Review the other side of a completed deal."""
    return await deals.leave_review(conversation_id, data.reviewer_id, data.rating, data.text)
