"""User endpoints - registration, follows and verifier activity."""

from typing import Any

import structlog
from fastapi import APIRouter, status
from pydantic import BaseModel

from edqorta.api.dependencies import EngagementDep, StorageDep, VerificationDep
from edqorta.models import AgentStatus, BusinessStatus, User

logger = structlog.get_logger()

router = APIRouter(prefix="/users", tags=["Users"])


# ==================== Pydantic Schemas ====================


class UserCreate(BaseModel):
    """Schema for registering a user."""

    id: str
    name: str
    username: str = ""
    agent_status: AgentStatus = AgentStatus.NONE
    business_status: BusinessStatus = BusinessStatus.NONE


# ==================== User Endpoints ====================


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, engagement: EngagementDep) -> User:
    """Register a user."""
    user = await engagement.register_user(User(**data.model_dump()))
    logger.info("Registered user", user_id=user.id)
    return user


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: str, storage: StorageDep) -> User:
    """Get a specific user."""
    return await storage.require_user(user_id)


@router.post("/{user_id}/follow/{target_id}", response_model=User)
async def follow_user(user_id: str, target_id: str, engagement: EngagementDep) -> User:
    """Follow another user."""
    return await engagement.follow(user_id, target_id)


@router.delete("/{user_id}/follow/{target_id}", response_model=User)
async def unfollow_user(user_id: str, target_id: str, engagement: EngagementDep) -> User:
    """Stop following another user."""
    return await engagement.unfollow(user_id, target_id)


@router.get("/{user_id}/verifications")
async def verifier_summary(
    user_id: str,
    storage: StorageDep,
    verification: VerificationDep,
) -> dict[str, Any]:
    """Pending and completed verifications for an agent, with fees earned."""
    await storage.require_user(user_id)
    assigned = await verification.assigned_to(user_id)
    completed = await verification.completed_by(user_id)
    return {
        "user_id": user_id,
        "assigned": [p.model_dump(mode="json") for p in assigned],
        "completed": [p.model_dump(mode="json") for p in completed],
        "earnings": await verification.earnings(user_id),
    }
