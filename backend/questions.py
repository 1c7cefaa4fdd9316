"""
Read-only question store backed by a JSON file
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from execution.models import Question

logger = logging.getLogger(__name__)


class QuestionStore:
    """
    Serves questions by id from a JSON document.

    The file holds either a list of question objects (each with an ``id``
    or ``_id``) or a mapping of id to question. It is read once, on the
    first lookup; records are validated on access so one malformed
    question does not hide the others.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._records: Optional[Dict[str, Dict[str, Any]]] = None

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if self._records is not None:
            return self._records

        if not self.path.exists():
            logger.warning(f"Question file {self.path} not found, serving no questions")
            self._records = {}
            return self._records

        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if isinstance(data, dict):
            records = {str(key): {**value, 'id': str(key)} for key, value in data.items()}
        elif isinstance(data, list):
            records = {}
            for item in data:
                if not isinstance(item, dict):
                    raise ValueError(f"Question record is not an object: {item!r}")
                question_id = item.get('id', item.get('_id'))
                if question_id is None:
                    raise ValueError("Question record without an id")
                records[str(question_id)] = {**item, 'id': str(question_id)}
        else:
            raise ValueError(f"Unexpected question file layout: {type(data).__name__}")

        logger.info(f"Loaded {len(records)} questions from {self.path}")
        self._records = records
        return records

    def get(self, question_id: str) -> Optional[Question]:
        """
        Look up a question

        Raises:
            ValueError: If the file or the record is malformed
        """
        record = self._load().get(str(question_id))
        if record is None:
            return None
        return Question.model_validate(record)


question_store = QuestionStore(Path(os.getenv('QUESTIONS_FILE', 'questions.json')))
