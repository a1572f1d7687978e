"""Single owner of the naming template, pending store and orchestrators."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from takeflow.config.models import TakeflowConfig
from takeflow.incoming.events import FileNew
from takeflow.incoming.models import NamingTemplate, PendingFile, UndoEntry
from takeflow.incoming.store import EventChannel, PendingFileStore
from takeflow.naming.models import SuggestedNaming
from takeflow.ranking.classifier import TakeRanking, classify
from takeflow.service.errors import TakeflowError, TemplateValidationError
from takeflow.service.interface import FileService

from .discard import DiscardOrchestrator
from .models import DiscardOutcome, DiscardPrompt, DiscardSummary, RenameOutcome, UndoOutcome
from .rename import RenameOrchestrator
from .undo import UndoLedger

LOGGER = logging.getLogger(__name__)

_EDITABLE_FIELDS = frozenset({"chapter", "sequence", "name", "tags", "custom_tag"})


class NotPendingError(TakeflowError):
    """Raised when an operation names a path that is not pending."""


class IncomingController:
    """Coordinate the incoming-recording lifecycle for one operator.

    The controller holds the one naming template shared by every pending file and
    passes it explicitly to the rename orchestrator. Watcher events enter through
    :attr:`channel`; confirmed renames and discards are applied through the same
    channel so the store has a single writer.
    """

    def __init__(self, service: FileService, config: Optional[TakeflowConfig] = None) -> None:
        self._config = config or TakeflowConfig()
        naming = self._config.naming
        self._service = service
        self._store = PendingFileStore()
        self._channel = EventChannel(self._store)
        self._template = NamingTemplate(
            chapter=naming.default_chapter,
            sequence=naming.default_sequence,
            name=naming.default_name,
        )
        self._renamer = RenameOrchestrator(
            service,
            self._channel,
            extension=naming.extension,
            placeholder=naming.placeholder,
        )
        self._discarder = DiscardOrchestrator(service, self._channel)
        self._ledger = UndoLedger(service)
        self._discard_prompt: Optional[DiscardPrompt] = None

    @property
    def template(self) -> NamingTemplate:
        return self._template

    @property
    def store(self) -> PendingFileStore:
        return self._store

    @property
    def channel(self) -> EventChannel:
        return self._channel

    @property
    def discard_prompt(self) -> Optional[DiscardPrompt]:
        """Return the outstanding discard prompt, if a rename raised one."""
        return self._discard_prompt

    # ------------------------------------------------------------------ #
    # Setup                                                              #
    # ------------------------------------------------------------------ #

    async def initialize(self) -> None:
        """Seed the template from the suggested naming and load pending files."""
        self.reset_template(await self._service.suggested_naming())
        for file in await self._service.list_pending():
            self._channel.dispatch(FileNew(file=file))

    def reset_template(self, suggestion: SuggestedNaming) -> None:
        """Replace the template with one seeded from ``suggestion``."""
        self._template = NamingTemplate.from_suggestion(suggestion)
        LOGGER.info(
            "Naming seeded from %d existing files: %s",
            len(suggestion.existing_files),
            self.preview(),
        )

    # ------------------------------------------------------------------ #
    # Template edits                                                     #
    # ------------------------------------------------------------------ #

    def update_template(self, **changes: Any) -> NamingTemplate:
        """Assign template fields by name; the custom tag is normalized on assignment."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown naming fields: {', '.join(sorted(unknown))}")
        if "tags" in changes:
            self._check_tags(changes["tags"])
        for field, value in changes.items():
            setattr(self._template, field, value)
        return self._template

    def toggle_tag(self, tag: str) -> NamingTemplate:
        self._check_tags([tag])
        self._template.toggle_tag(tag)
        return self._template

    def _check_tags(self, tags: Iterable[str]) -> None:
        available = self._config.naming.available_tags
        for tag in tags:
            if tag not in available:
                raise TemplateValidationError(
                    f"Unknown tag: {tag} (available: {', '.join(available)})"
                )

    def new_chapter(self) -> NamingTemplate:
        self._template.new_chapter()
        return self._template

    def preview(self) -> str:
        """Return the filename the next rename will request."""
        naming = self._config.naming
        return self._template.preview(extension=naming.extension, placeholder=naming.placeholder)

    # ------------------------------------------------------------------ #
    # Reads                                                              #
    # ------------------------------------------------------------------ #

    def pending(self) -> list[PendingFile]:
        return self._store.snapshot()

    def ranking(self) -> TakeRanking:
        """Classify the current pending set."""
        return classify(
            self._store.snapshot(),
            substantial_bytes=self._config.ranking.substantial_bytes,
        )

    # ------------------------------------------------------------------ #
    # Mutations                                                          #
    # ------------------------------------------------------------------ #

    async def rename(self, path: str) -> RenameOutcome:
        """Rename the pending recording at ``path`` with the shared template."""
        file = self._store.get(path)
        if file is None:
            raise NotPendingError(f"File is not pending: {path}")
        outcome = await self._renamer.rename(file, self._template)
        self._discard_prompt = outcome.discard_prompt
        return outcome

    async def discard(self, path: str) -> DiscardOutcome:
        return await self._discarder.discard_one(path)

    async def discard_many(self, paths: Iterable[str]) -> DiscardSummary:
        return await self._discarder.discard_many(paths)

    async def discard_all(self) -> DiscardSummary:
        """Trash every pending recording."""
        return await self._discarder.discard_many(self._store.paths())

    async def accept_discard_prompt(self) -> DiscardSummary:
        """Trash what is pending now, except the recording that raised the prompt."""
        prompt = self._discard_prompt
        self._discard_prompt = None
        if prompt is None:
            return DiscardSummary()
        remaining = [path for path in self._store.paths() if path != prompt.trigger_path]
        return await self._discarder.discard_many(remaining)

    def dismiss_discard_prompt(self) -> None:
        self._discard_prompt = None

    async def undo_entries(self) -> list[UndoEntry]:
        return await self._ledger.entries()

    async def undo(self, rename_id: str) -> UndoOutcome:
        return await self._ledger.undo(rename_id)


__all__ = ["IncomingController", "NotPendingError"]
