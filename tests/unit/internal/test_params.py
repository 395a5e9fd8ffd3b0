"""Tests for parameter rules and argument validation."""

import pytest

from classwire._internal.class_loader import ClassLoader
from classwire.exceptions import ClassWireInvalidDeclarationError, ClassWireValidationError
from classwire.params import MISSING, Param, coerce_param, validate_params


@pytest.fixture()
def class_loader() -> ClassLoader:
    return ClassLoader()


class TestParam:
    def test_required_by_default(self) -> None:
        rule = Param()

        assert rule.required
        assert not rule.has_default
        assert rule.default is MISSING

    def test_default_makes_parameter_optional(self) -> None:
        assert not Param(default=None).required
        assert Param(default=None).default_value() is None

    def test_default_factory_is_called(self) -> None:
        rule = Param(default_factory=dict)

        assert rule.default_value() == {}
        assert rule.default_value() is not rule.default_value()

    def test_default_and_factory_are_exclusive(self) -> None:
        with pytest.raises(ClassWireInvalidDeclarationError):
            Param(default=1, default_factory=list)

    def test_type_tuple(self, class_loader: ClassLoader) -> None:
        rule = Param(type=(int, float))

        rule.check(1.5, owner="Owner", name="x", class_loader=class_loader)

        with pytest.raises(ClassWireValidationError, match="allowed types: int, float"):
            rule.check("1", owner="Owner", name="x", class_loader=class_loader)

    def test_isa_with_class(self, class_loader: ClassLoader) -> None:
        rule = Param(isa=int)

        rule.check(True, owner="Owner", name="flag", class_loader=class_loader)

        with pytest.raises(ClassWireValidationError) as exc_info:
            rule.check("x", owner="Owner", name="flag", class_loader=class_loader)

        assert exc_info.value.param == "flag"
        assert exc_info.value.class_name == "Owner"


class TestCoerceParam:
    def test_param_is_returned_as_is(self) -> None:
        rule = Param(type=int)

        assert coerce_param(rule, owner="Owner", name="x") is rule

    @pytest.mark.parametrize(("value", "required"), [(True, True), (False, False)])
    def test_bool(self, value: bool, required: bool) -> None:
        assert coerce_param(value, owner="Owner", name="x").required is required

    def test_mapping(self) -> None:
        assert coerce_param({"optional": True}, owner="Owner", name="x") == Param(optional=True)

    def test_unknown_mapping_key(self) -> None:
        with pytest.raises(ClassWireInvalidDeclarationError, match="Invalid rule for parameter 'x'"):
            coerce_param({"kind": int}, owner="Owner", name="x")

    def test_other_values(self) -> None:
        with pytest.raises(ClassWireInvalidDeclarationError, match="'x' in 'Owner'"):
            coerce_param("int", owner="Owner", name="x")


class TestValidateParams:
    def test_fills_defaults(self, class_loader: ClassLoader) -> None:
        spec = {"a": Param(default=1), "b": Param(optional=True), "c": Param()}

        values = validate_params("Owner", spec, {"c": 3}, class_loader=class_loader)

        assert values == {"a": 1, "b": None, "c": 3}

    def test_supplied_none_is_kept(self, class_loader: ClassLoader) -> None:
        values = validate_params("Owner", {"a": Param(default=1)}, {"a": None}, class_loader=class_loader)

        assert values == {"a": None}

    def test_missing(self, class_loader: ClassLoader) -> None:
        with pytest.raises(ClassWireValidationError, match="Mandatory parameter 'c' missing in call to Owner."):
            validate_params("Owner", {"c": Param()}, {}, class_loader=class_loader)

    def test_unknown(self, class_loader: ClassLoader) -> None:
        with pytest.raises(ClassWireValidationError, match="was passed in the call to Owner") as exc_info:
            validate_params("Owner", {}, {"z": 1}, class_loader=class_loader)

        assert exc_info.value.param == "z"
