"""Tour service - scheduling workflow."""

from edqorta.services.tours.workflow import TourWorkflow

__all__ = ["TourWorkflow"]
