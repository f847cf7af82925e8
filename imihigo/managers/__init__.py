"""
Managers for the Imihigo tracker.

This package contains focused classes that handle specific aspects of the tracker:
- TemplateBuilder: Level-by-level authoring of a new contract
- mutator: Copy-on-write point updates on a contract
- RollupEngine: Progress aggregation at any level
- TemplateRepository: Ordered collection of contracts plus selection
- StorageManager: Persistence to the data directory
- AutoSaveListener: Save the repository whenever it changes
- EventBus: Event-driven communication between components
- export: CSV report of a contract
"""

from imihigo.managers.events import (
    Event,
    EventBus,
    EventListener,
    EventType,
    RepositoryEvent,
)
from imihigo.managers.repository import EMPTY_CONTRACT, TemplateRepository
from imihigo.managers.builder import BuilderState, TemplateBuilder
from imihigo.managers.rollup import (
    DashboardStats,
    Level,
    LevelRollup,
    NodeProgress,
    QuarterRollup,
    RollupEngine,
    RollupSummary,
    Status,
)
from imihigo.managers.storage_manager import StorageManager, seed_templates
from imihigo.managers.autosave import AutoSaveListener
from imihigo.managers import export, mutator

__all__ = [
    "AutoSaveListener",
    "BuilderState",
    "DashboardStats",
    "EMPTY_CONTRACT",
    "Event",
    "EventBus",
    "EventListener",
    "EventType",
    "Level",
    "LevelRollup",
    "NodeProgress",
    "QuarterRollup",
    "RepositoryEvent",
    "RollupEngine",
    "RollupSummary",
    "Status",
    "StorageManager",
    "TemplateBuilder",
    "TemplateRepository",
    "export",
    "mutator",
    "seed_templates",
]
