from __future__ import annotations

from typing import Protocol, Sequence

from .model import ContractorSubmission


class SubmissionRepository(Protocol):
    """Contractor submissions are append-only: no update, no delete."""

    def list_all(self) -> Sequence[ContractorSubmission]:
        raise NotImplementedError

    def create(self, submission: ContractorSubmission) -> ContractorSubmission:
        raise NotImplementedError
