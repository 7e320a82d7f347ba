from typing import Callable, Dict, Iterable, Optional, Tuple

from librlog.book import FIELD_LABELS, REQUIRED_FIELDS

MAX_FIELD_LENGTH = 255

# (ok, reason); reason is empty when ok
Result = Tuple[bool, str]
Predicate = Callable[[str], Result]


class FieldValidator:
    """Small predicates used by the add/edit/borrow prompts and by Library."""

    @staticmethod
    def not_blank(value: Optional[str]) -> Result:
        if value is None or not value.strip():
            return False, "cannot be blank"
        return True, ""

    @staticmethod
    def not_too_long(value: Optional[str]) -> Result:
        if value is not None and len(value.strip()) > MAX_FIELD_LENGTH:
            return False, f"is longer than {MAX_FIELD_LENGTH} characters"
        return True, ""

    @staticmethod
    def unique_accession(existing: Iterable[str]) -> Predicate:
        taken = set(existing)

        def check(value: str) -> Result:
            if value.strip() in taken:
                return False, f"accession number {value.strip()} already exists"
            return True, ""

        return check

    @staticmethod
    def check_all(value: Optional[str], predicates: Iterable[Predicate]) -> Result:
        """Run predicates in order and stop at the first failure."""
        for predicate in predicates:
            ok, reason = predicate(value)
            if not ok:
                return ok, reason
        return True, ""


def predicates_for(field: str) -> Tuple[Predicate, ...]:
    if field in REQUIRED_FIELDS:
        return FieldValidator.not_blank, FieldValidator.not_too_long
    return (FieldValidator.not_too_long,)


def validate_fields(values: Dict[str, str], required: bool = True) -> Dict[str, str]:
    """Return {field: reason} for every value that fails its predicates.

    With ``required=False`` blank values are accepted, as in an edit where a
    blank answer keeps the current value.
    """
    errors = {}
    for field, value in values.items():
        if field not in FIELD_LABELS:
            continue
        predicates = predicates_for(field) if required else (FieldValidator.not_too_long,)
        ok, reason = FieldValidator.check_all(value, predicates)
        if not ok:
            errors[field] = reason
    return errors
