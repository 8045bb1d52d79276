"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from edqorta.core.config import Settings, get_settings
from edqorta.services.conversation.deals import DealLifecycle
from edqorta.services.conversation.manager import ConversationManager
from edqorta.services.engagement.service import EngagementService
from edqorta.services.engine import WorkflowEngine
from edqorta.services.notifications.center import NotificationCenter
from edqorta.services.tours.workflow import TourWorkflow
from edqorta.services.verification.workflow import VerificationWorkflow
from edqorta.storage.base import StorageBackend


def get_engine(request: Request) -> WorkflowEngine:
    """Get the engine built for this application instance."""
    return request.app.state.engine


EngineDep = Annotated[WorkflowEngine, Depends(get_engine)]


def get_storage(engine: EngineDep) -> StorageBackend:
    return engine.storage


def get_conversations(engine: EngineDep) -> ConversationManager:
    return engine.conversations


def get_deals(engine: EngineDep) -> DealLifecycle:
    return engine.deals


def get_tours(engine: EngineDep) -> TourWorkflow:
    return engine.tours


def get_verification(engine: EngineDep) -> VerificationWorkflow:
    return engine.verification


def get_notifications(engine: EngineDep) -> NotificationCenter:
    return engine.notifications


def get_engagement(engine: EngineDep) -> EngagementService:
    return engine.engagement


# Type aliases for cleaner dependency injection
StorageDep = Annotated[StorageBackend, Depends(get_storage)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
ConversationsDep = Annotated[ConversationManager, Depends(get_conversations)]
DealsDep = Annotated[DealLifecycle, Depends(get_deals)]
ToursDep = Annotated[TourWorkflow, Depends(get_tours)]
VerificationDep = Annotated[VerificationWorkflow, Depends(get_verification)]
NotificationsDep = Annotated[NotificationCenter, Depends(get_notifications)]
EngagementDep = Annotated[EngagementService, Depends(get_engagement)]
