"""Rename orchestration for one pending recording."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from takeflow.incoming.events import FileRemoved
from takeflow.incoming.models import NamingTemplate, PendingFile
from takeflow.incoming.store import EventChannel
from takeflow.naming.builder import DEFAULT_EXTENSION, PLACEHOLDER, sanitize_name
from takeflow.naming.rules import validate_chapter, validate_name, validate_sequence
from takeflow.service.errors import OperationError, TemplateValidationError, TransportError
from takeflow.service.interface import FileService, RenameRequest

from .models import DiscardPrompt, RenameOutcome

LOGGER = logging.getLogger(__name__)

RENAME_FAILED = "Rename failed"


def validate_template(template: NamingTemplate) -> None:
    """Raise ``TemplateValidationError`` when ``template`` cannot name a recording."""
    error = (
        validate_chapter(template.chapter)
        or validate_sequence(template.sequence)
        or validate_name(template.name)
    )
    if error is None and not sanitize_name(template.name):
        error = "Name must contain at least one letter or digit"
    if error is not None:
        raise TemplateValidationError(error)


class RenameOrchestrator:
    """Validate the template, call the file service and apply the confirmed result."""

    def __init__(
        self,
        service: FileService,
        channel: EventChannel,
        *,
        extension: str = DEFAULT_EXTENSION,
        placeholder: str = PLACEHOLDER,
    ) -> None:
        self._service = service
        self._channel = channel
        self._extension = extension
        self._placeholder = placeholder

    async def rename(self, file: PendingFile, template: NamingTemplate) -> RenameOutcome:
        """Rename ``file`` using ``template``.

        On success the file leaves the pending store, the template's sequence advances
        by one and, when other recordings remain pending, the outcome carries a discard
        prompt for exactly that residual set.

        Args:
            file: Pending recording to rename.
            template: Shared naming template; its sequence is advanced on success.

        Returns:
            RenameOutcome: Paths, filename and optional discard prompt.

        Raises:
            TemplateValidationError: If the template is invalid; nothing is sent.
            OperationError: If the service reports a failure, with its reason.
            TransportError: If the service call fails.
        """
        validate_template(template)
        preview = template.preview(extension=self._extension, placeholder=self._placeholder)
        request = RenameRequest(
            original_path=file.path,
            chapter=template.chapter,
            sequence=template.sequence or None,
            name=template.name,
            tags=template.all_tags(),
        )

        try:
            response = await self._service.rename(request)
        except TransportError:
            LOGGER.warning("Rename of %s could not reach the file service", file.path)
            raise

        if not response.success:
            reason = response.error or RENAME_FAILED
            LOGGER.warning("Rename of %s refused: %s", file.path, reason)
            raise OperationError(reason)

        self._channel.dispatch(FileRemoved(path=file.path, reason="renamed"))
        template.advance_sequence()

        filename = PurePosixPath(response.new_path).name
        if filename != preview:
            LOGGER.warning("Renamed to %s but the preview showed %s", filename, preview)
        LOGGER.info("Renamed %s -> %s", file.filename, filename)

        remaining = [path for path in self._channel.store.paths() if path != file.path]
        prompt = None
        if remaining:
            prompt = DiscardPrompt(trigger_path=file.path, remaining_count=len(remaining))

        return RenameOutcome(
            original_path=file.path,
            new_path=response.new_path,
            filename=filename,
            preview=preview,
            discard_prompt=prompt,
        )


__all__ = ["RENAME_FAILED", "RenameOrchestrator", "validate_template"]
