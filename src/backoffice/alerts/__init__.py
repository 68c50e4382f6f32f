"""Staff alert pipeline: polling, de-duplication, presentation and sound."""

from backoffice.alerts.ledger import Deduplicator, InMemorySeenIdStore, JsonFileSeenIdStore, SeenIdStore
from backoffice.alerts.pipeline import AlertPipeline, build_pipeline
from backoffice.alerts.presenter import Alert, AlertPresenter, classify
from backoffice.alerts.sound import SoundSubsystem

__all__ = [
    "Alert",
    "AlertPipeline",
    "AlertPresenter",
    "Deduplicator",
    "InMemorySeenIdStore",
    "JsonFileSeenIdStore",
    "SeenIdStore",
    "SoundSubsystem",
    "build_pipeline",
    "classify",
]
