"""
Validator construction for simple types.

A validation block becomes an error-case enum and a list of guards. Every
guard appends to one accumulator, so a value reports all of its problems.
"""

from dataclasses import dataclass, field
from typing import List

from ...core.errors import StaticRuleError
from ...core.naming import Name
from ...core.spec import Check, Condition, ConditionKind, SimpleType, Validation

# Comparison that fails each condition, as a format string over the bound
_FAILING_TEST = {
    ConditionKind.LE: "item > {bound}",
    ConditionKind.GE: "item < {bound}",
    ConditionKind.LEN_EQ: "len(item) != {bound}",
    ConditionKind.LEN_LE: "len(item) > {bound}",
    ConditionKind.LEN_GE: "len(item) < {bound}",
}

_FAILING_CHECK = {
    Check.EMAIL: "not runtime.validate_email(item)",
}


@dataclass
class ErrorCase:
    name: str  # enum member
    value: str  # wire value


@dataclass
class Guard:
    expression: str
    case: str


@dataclass
class Validator:
    alias: str
    enum_name: str
    function_name: str
    cases: List[ErrorCase] = field(default_factory=list)
    guards: List[Guard] = field(default_factory=list)


def format_bound(type_name: Name, simple_type: SimpleType, condition: Condition) -> str:
    """Render a condition's bound as a literal of the checked type."""
    value = condition.value
    if condition.kind.is_length or simple_type.is_integer:
        if isinstance(value, float) and not value.is_integer():
            raise StaticRuleError(
                f"Condition '{condition.kind.value}: {value}' on type '{type_name}' "
                f"needs an integer bound for {simple_type.value}"
            )
        return str(int(value))
    return f"{float(value):.4f}"


def check_rules(type_name: Name, simple_type: SimpleType, validation: Validation) -> None:
    """Reject conditions and checks that make no sense for ``simple_type``."""
    for condition in validation.conditions:
        if condition.kind.is_length:
            if simple_type is not SimpleType.STR:
                raise StaticRuleError(
                    f"Condition '{condition.kind.value}' on type '{type_name}' "
                    f"requires a string, got {simple_type.value}"
                )
        elif not simple_type.is_numeric:
            raise StaticRuleError(
                f"Condition '{condition.kind.value}' on type '{type_name}' "
                f"requires a number, got {simple_type.value}"
            )
    for check in validation.checks:
        if simple_type is not SimpleType.STR:
            raise StaticRuleError(
                f"Check '{check.value}' on type '{type_name}' "
                f"requires a string, got {simple_type.value}"
            )


def build_validator(
    type_name: Name, alias: str, simple_type: SimpleType, validation: Validation
) -> Validator:
    """
    Build the validator of a simple type.

    Error cases list checks before conditions, each name once. Guards run
    conditions before checks, in declaration order.
    """
    check_rules(type_name, simple_type, validation)

    validator = Validator(
        alias=alias,
        enum_name=f"{alias}ValidationResult",
        function_name=f"validate_{type_name.snake_case()}",
        cases=[ErrorCase("OK", "ok")],
    )

    seen = set()
    for error_name in [check.get_error_name() for check in validation.checks] + [
        condition.get_error_name() for condition in validation.conditions
    ]:
        if error_name in seen:
            continue
        seen.add(error_name)
        validator.cases.append(
            ErrorCase(error_name.screaming_snake_case(), error_name.snake_case())
        )

    for condition in validation.conditions:
        bound = format_bound(type_name, simple_type, condition)
        validator.guards.append(
            Guard(
                expression=_FAILING_TEST[condition.kind].format(bound=bound),
                case=condition.get_error_name().screaming_snake_case(),
            )
        )
    for check in validation.checks:
        validator.guards.append(
            Guard(
                expression=_FAILING_CHECK[check],
                case=check.get_error_name().screaming_snake_case(),
            )
        )

    return validator
