"""
Repositories mapping interview and owner models onto the document store.
"""
from typing import Any, Dict, List, Optional

from pydantic_core import to_jsonable_python

from ..storage.document_store import DocumentStore
from .models import Interview, Owner

INTERVIEWS = "interviews"
OWNERS = "owners"


class OwnerRepository:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, owner_id: str) -> Optional[Owner]:
        document = self.store.find_by_id(OWNERS, owner_id)
        return Owner.model_validate(document) if document else None

    def create(self, owner: Owner) -> Owner:
        document = self.store.create(OWNERS, owner.model_dump(mode="json"))
        return Owner.model_validate(document)


class InterviewRepository:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, interview_id: str) -> Optional[Interview]:
        document = self.store.find_by_id(INTERVIEWS, interview_id)
        return Interview.model_validate(document) if document else None

    def create(self, interview: Interview) -> Interview:
        document = self.store.create(INTERVIEWS, interview.model_dump(mode="json"))
        return Interview.model_validate(document)

    def update(
        self,
        interview_id: str,
        changes: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> Optional[Interview]:
        """
        Write changed fields of an interview.

        ``changes`` may hold models or plain values; they are serialised the
        same way the full document is.
        """
        serialised = {key: to_jsonable_python(value) for key, value in changes.items()}
        document = self.store.update(
            INTERVIEWS, interview_id, serialised, expected_version=expected_version
        )
        return Interview.model_validate(document) if document else None

    def list_by_owner(self, owner_id: str) -> List[Interview]:
        """Owner's interviews, newest first."""
        interviews = [
            Interview.model_validate(document)
            for document in self.store.find(INTERVIEWS, owner_id=owner_id)
        ]
        return sorted(interviews, key=lambda interview: interview.created_at, reverse=True)
