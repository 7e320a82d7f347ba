from librlog.validators import MAX_FIELD_LENGTH, FieldValidator, predicates_for, validate_fields


def test_not_blank():
    assert FieldValidator.not_blank("Dune") == (True, "")
    assert FieldValidator.not_blank("   ") == (False, "cannot be blank")
    assert FieldValidator.not_blank(None)[0] is False


def test_not_too_long_boundary():
    assert FieldValidator.not_too_long("x" * MAX_FIELD_LENGTH)[0] is True
    ok, reason = FieldValidator.not_too_long("x" * (MAX_FIELD_LENGTH + 1))
    assert ok is False
    assert str(MAX_FIELD_LENGTH) in reason


def test_unique_accession():
    check = FieldValidator.unique_accession(["1", "42"])
    assert check("7") == (True, "")
    ok, reason = check(" 42 ")
    assert ok is False
    assert "42 already exists" in reason


def test_check_all_stops_at_first_failure():
    calls = []

    def fail(value):
        calls.append("fail")
        return False, "first"

    def never(value):
        calls.append("never")
        return True, ""

    assert FieldValidator.check_all("x", (fail, never)) == (False, "first")
    assert calls == ["fail"]


def test_required_fields_get_not_blank():
    assert FieldValidator.not_blank in predicates_for("title")
    assert FieldValidator.not_blank in predicates_for("isbn")
    assert FieldValidator.not_blank not in predicates_for("genre")


def test_validate_fields_reports_each_failure():
    errors = validate_fields({"title": "", "author": "Herbert", "genre": "", "isbn": "x" * 300})
    assert errors == {"title": "cannot be blank", "isbn": f"is longer than {MAX_FIELD_LENGTH} characters"}


def test_validate_fields_optional_mode_allows_blank():
    assert validate_fields({"title": "", "author": ""}, required=False) == {}
