"""Short random identifiers used as primary keys and invite codes.

Identifiers double as bearer tokens in shareable links, so every character is
drawn from ``secrets``. Uniqueness is checked against the store before use and
enforced again by the primary-key constraint at insert time.
"""
import logging
import secrets
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

BASE62 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
ID_LENGTH = 8
MAX_ID_GENERATION_ATTEMPTS = 10


class GenerationExhausted(Exception):
    """Every candidate drawn within the attempt budget was already taken."""

    def __init__(self, attempts: int):
        super().__init__(f"failed to generate a unique ID after {attempts} attempts")
        self.attempts = attempts


def random_id(alphabet: str, length: int) -> str:
    if not alphabet:
        raise ValueError("alphabet must not be empty")
    if length <= 0:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_unique_id(
    alphabet: str,
    length: int,
    exists: Callable[[str], bool],
    max_attempts: int = MAX_ID_GENERATION_ATTEMPTS,
) -> str:
    """Draw candidates until ``exists`` reports one as free.

    Raises GenerationExhausted after ``max_attempts`` taken candidates.
    """
    for attempt in range(1, max_attempts + 1):
        candidate = random_id(alphabet, length)
        if not exists(candidate):
            return candidate
        logger.warning("ID candidate collision on attempt %d/%d", attempt, max_attempts)
    raise GenerationExhausted(max_attempts)


def id_exists(db: Session, model) -> Callable[[str], bool]:
    """Existence predicate for ``model`` primary keys."""

    def _exists(candidate: str) -> bool:
        return db.query(model.id).filter(model.id == candidate).first() is not None

    return _exists


def insert_with_unique_id(
    db: Session,
    record,
    alphabet: str = BASE62,
    length: int = ID_LENGTH,
    max_attempts: int = MAX_ID_GENERATION_ATTEMPTS,
):
    """Assign a fresh code to ``record.id`` and flush it inside a savepoint.

    Candidates come from ``generate_unique_id``. A concurrent insert of the
    same code surfaces as an IntegrityError on the primary key; the savepoint
    is rolled back and a new code is drawn from what is left of the same
    attempt budget. Any other integrity failure is re-raised. Nothing is
    committed here.
    """
    exists = id_exists(db, type(record))
    attempts = 0

    def _counted_exists(candidate: str) -> bool:
        nonlocal attempts
        attempts += 1
        return exists(candidate)

    while attempts < max_attempts:
        try:
            candidate = generate_unique_id(alphabet, length, _counted_exists, max_attempts - attempts)
        except GenerationExhausted:
            break
        record.id = candidate
        try:
            with db.begin_nested():
                db.add(record)
        except IntegrityError:
            if not exists(candidate):
                raise
            logger.warning(
                "Insert of %s %s lost a race on attempt %d/%d",
                type(record).__name__, candidate, attempts, max_attempts,
            )
            continue
        return record
    raise GenerationExhausted(max_attempts)
