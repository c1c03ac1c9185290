import pytest

from protogen.codegen.core.errors import StaticRuleError
from protogen.codegen.core.naming import Name
from protogen.codegen.core.spec import Check, Condition, ConditionKind, SimpleType, Validation
from protogen.codegen.languages.python.validation import build_validator, format_bound


def _validator(simple_type, checks=(), conditions=()):
    validation = Validation(checks=list(checks), conditions=list(conditions))
    return build_validator(Name("user-name"), "UserName", simple_type, validation)


class TestBuildValidator:
    def test_names(self):
        validator = _validator(SimpleType.STR)
        assert validator.enum_name == "UserNameValidationResult"
        assert validator.function_name == "validate_user_name"
        assert [(c.name, c.value) for c in validator.cases] == [("OK", "ok")]
        assert validator.guards == []

    def test_cases_list_checks_first_without_duplicates(self):
        validator = _validator(
            SimpleType.STR,
            checks=[Check.EMAIL],
            conditions=[
                Condition(ConditionKind.LEN_GE, 3),
                Condition(ConditionKind.LEN_LE, 30),
                Condition(ConditionKind.LEN_GE, 5),
            ],
        )
        assert [c.name for c in validator.cases] == ["OK", "EMAIL", "TOO_SHORT", "TOO_LONG"]
        assert [c.value for c in validator.cases] == ["ok", "email", "too_short", "too_long"]

    def test_guards_run_conditions_then_checks(self):
        validator = _validator(
            SimpleType.STR,
            checks=[Check.EMAIL],
            conditions=[Condition(ConditionKind.LEN_GE, 3), Condition(ConditionKind.LEN_EQ, 8)],
        )
        assert [(g.expression, g.case) for g in validator.guards] == [
            ("len(item) < 3", "TOO_SHORT"),
            ("len(item) != 8", "WRONG_LENGTH"),
            ("not runtime.validate_email(item)", "EMAIL"),
        ]

    def test_integer_bounds(self):
        validator = _validator(
            SimpleType.I32,
            conditions=[Condition(ConditionKind.GE, -5), Condition(ConditionKind.LE, 10.0)],
        )
        assert [g.expression for g in validator.guards] == ["item < -5", "item > 10"]
        assert [c.name for c in validator.cases] == ["OK", "TOO_SMALL", "TOO_BIG"]

    def test_float_bounds(self):
        validator = _validator(SimpleType.F64, conditions=[Condition(ConditionKind.LE, 2.5)])
        assert validator.guards[0].expression == "item > 2.5000"

    @pytest.mark.parametrize("simple_type", [SimpleType.U8, SimpleType.F32, SimpleType.ID])
    def test_length_requires_string(self, simple_type):
        with pytest.raises(StaticRuleError, match="requires a string"):
            _validator(simple_type, conditions=[Condition(ConditionKind.LEN_LE, 4)])

    def test_email_requires_string(self):
        with pytest.raises(StaticRuleError, match="Check 'email' on type 'user-name'"):
            _validator(SimpleType.U32, checks=[Check.EMAIL])

    @pytest.mark.parametrize("simple_type", [SimpleType.STR, SimpleType.ID])
    def test_bounds_require_number(self, simple_type):
        with pytest.raises(StaticRuleError, match="requires a number"):
            _validator(simple_type, conditions=[Condition(ConditionKind.GE, 1)])


class TestFormatBound:
    def test_fractional_bound_on_integer_type(self):
        with pytest.raises(StaticRuleError, match="integer bound"):
            format_bound(Name("age"), SimpleType.U8, Condition(ConditionKind.LE, 1.5))

    def test_integer_bound_on_float_type(self):
        assert format_bound(Name("ratio"), SimpleType.F32, Condition(ConditionKind.GE, 1)) == "1.0000"
