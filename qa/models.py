"""
qa/models.py -- Domain dataclasses for questions and answers.

Pure data containers. Ownership rules live in auth/policy.py, persistence in
qa/store.py, and the use cases in qa/questions.py and qa/answers.py.

owner_uuid is the public uuid of the user who created the record. It is set
once at creation and never changes; editing a record only ever replaces its
content.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Question:
    uuid: str
    content: str
    owner_uuid: str
    created_at: str = ""  # ISO 8601, set by store on insert
    id: Optional[int] = None


@dataclass
class Answer:
    uuid: str
    content: str
    question_uuid: str
    owner_uuid: str
    created_at: str = ""  # ISO 8601, set by store on insert
    id: Optional[int] = None
