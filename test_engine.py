"""Tests for the jsonmatch validation engine."""

from dataclasses import is_dataclass

from jsonmatch import (
    EngineConfig,
    FailureKind,
    MISSING,
    NodeConfig,
    Scope,
    ValidationEngine,
    validate,
)


class TestBasicComparison:
    """Test comparison with the default configuration."""

    def setup_method(self):
        self.engine = ValidationEngine()

    def test_identical_values(self):
        """Test that identical documents match."""
        doc = {"name": "test", "tags": ["a", "b"], "meta": {"n": 1, "ok": True, "x": None}}
        result = self.engine.validate(doc, doc)
        assert result.is_valid is True
        assert result.failures == ()

    def test_extra_keys_allowed(self):
        """Test that actual may contain keys expected does not mention."""
        result = self.engine.validate({"a": 1}, {"a": 1, "b": 2})
        assert result.is_valid is True

    def test_extra_elements_allowed(self):
        """Test that actual arrays may be longer than expected."""
        result = self.engine.validate([1, 2], [1, 2, 3])
        assert result.is_valid is True

    def test_expected_longer_than_actual(self):
        """Test that expected with more elements fails once at the collection."""
        result = self.engine.validate([1, 2, 3], [1, 2])
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.kind == FailureKind.COUNT_MISMATCH
        assert failure.message == "Expected JSON has more elements than Actual JSON."
        assert failure.key_path == ""
        assert failure.expected.startswith("count: 3")
        assert failure.actual.startswith("count: 2")

    def test_missing_key(self):
        """Test that a key present in expected must exist in actual."""
        result = self.engine.validate({"a": 1, "b": 2}, {"a": 1, "c": 3})
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.kind == FailureKind.MISSING
        assert failure.key_path == "b"
        assert failure.message == "Expected JSON is present but Actual JSON is missing."

    def test_missing_actual(self):
        """Test a present expected against an absent actual."""
        result = self.engine.validate({"a": 1}, MISSING)
        assert [f.kind for f in result.failures] == [FailureKind.MISSING]

    def test_missing_expected_is_no_requirement(self):
        """Test that an absent expected passes against anything."""
        assert self.engine.validate(MISSING, {"a": 1}).is_valid
        assert self.engine.validate(MISSING, MISSING).is_valid

    def test_null_expected_is_no_requirement(self):
        """Test that null in expected constrains nothing."""
        assert self.engine.validate({"a": None}, {"a": 5}).is_valid
        assert self.engine.validate({"a": None}, {"b": 1}).is_valid

    def test_value_mismatch(self):
        """Test different primitive values are reported."""
        result = self.engine.validate({"a": "x"}, {"a": "y"})
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.kind == FailureKind.VALUE_MISMATCH
        assert failure.message == "Values do not match."
        assert failure.key_path == "a"
        assert failure.expected == '"x"'
        assert failure.actual == '"y"'

    def test_every_independent_failure_reported(self):
        """Test failures in sibling keys are all collected."""
        result = self.engine.validate({"a": 1, "b": 2}, {"a": 9, "b": 8})
        assert [f.key_path for f in result.failures] == ["a", "b"]


class TestTypeChecks:
    """Test type comparison."""

    def setup_method(self):
        self.engine = ValidationEngine()

    def test_type_mismatch(self):
        """Test different JSON types are reported with type names."""
        result = self.engine.validate({"a": 1}, {"a": "1"})
        failure = result.failures[0]
        assert failure.kind == FailureKind.TYPE_MISMATCH
        assert failure.message == "Expected and Actual types do not match."
        assert failure.expected == "1 (Type: integer)"
        assert failure.actual == '"1" (Type: string)'

    def test_int_and_float_differ(self):
        """Test no numeric coercion between int and float."""
        result = self.engine.validate({"a": 1}, {"a": 1.0})
        assert result.failures[0].kind == FailureKind.TYPE_MISMATCH

    def test_bool_is_not_a_number(self):
        """Test booleans never match integers."""
        result = self.engine.validate({"a": True}, {"a": 1})
        assert result.failures[0].kind == FailureKind.TYPE_MISMATCH

    def test_object_against_array(self):
        """Test containers of different kinds do not match."""
        result = self.engine.validate({"a": {}}, {"a": []})
        assert result.failures[0].kind == FailureKind.TYPE_MISMATCH

    def test_type_match_ignores_values(self):
        """Test type match only compares types."""
        config = NodeConfig()
        config.set_exact_match(False, "a")

        assert self.engine.validate({"a": 1}, {"a": 2}, config).is_valid
        result = self.engine.validate({"a": 1}, {"a": "x"}, config)
        assert result.failures[0].kind == FailureKind.TYPE_MISMATCH

    def test_exact_match_restores_value_check(self):
        """Test exact match re-enables value comparison below a type match subtree."""
        config = NodeConfig()
        config.set_exact_match(False, scope=Scope.SUBTREE)
        config.set_exact_match(True, "id")

        assert self.engine.validate({"id": 1, "ts": 5}, {"id": 1, "ts": 9}, config).is_valid
        result = self.engine.validate({"id": 1, "ts": 5}, {"id": 2, "ts": 9}, config)
        assert [f.key_path for f in result.failures] == ["id"]


class TestKeyPaths:
    """Test key path rendering in failures."""

    def setup_method(self):
        self.engine = ValidationEngine()

    def test_nested_object_path(self):
        result = self.engine.validate({"user": {"name": "a"}}, {"user": {"name": "b"}})
        assert result.failures[0].key_path == "user.name"

    def test_array_path(self):
        result = self.engine.validate({"items": [{"id": 1}]}, {"items": [{"id": 2}]})
        assert result.failures[0].key_path == "items[0].id"

    def test_dotted_key_escaped(self):
        result = self.engine.validate({"a.b": 1}, {"a.b": 2})
        assert result.failures[0].key_path == "a\\.b"

    def test_empty_key_quoted(self):
        result = self.engine.validate({"": 1}, {"": 2})
        assert result.failures[0].key_path == '""'


class TestCounts:
    """Test equal count and element count."""

    def setup_method(self):
        self.engine = ValidationEngine()

    def test_equal_count_on_object(self):
        """Test equal count rejects extra keys."""
        config = NodeConfig()
        config.set_equal_count(True)

        result = self.engine.validate({"a": 1}, {"a": 1, "b": 2}, config)
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.kind == FailureKind.COUNT_MISMATCH
        assert failure.message == "Expected JSON count does not match Actual JSON."
        assert failure.expected == 'count: 1 - {"a": 1}'

    def test_equal_count_single_node_only(self):
        """Test equal count at the root leaves nested collections flexible."""
        config = NodeConfig()
        config.set_equal_count(True)

        result = self.engine.validate({"a": {"x": 1}}, {"a": {"x": 1, "y": 2}}, config)
        assert result.is_valid

    def test_equal_count_subtree(self):
        """Test equal count under subtree scope reaches nested collections."""
        config = NodeConfig()
        config.set_equal_count(True, scope=Scope.SUBTREE)

        result = self.engine.validate({"a": [1]}, {"a": [1, 2]}, config)
        assert [f.key_path for f in result.failures] == ["a"]

    def test_count_failure_stops_children(self):
        """Test a count failure skips comparing the collection's children."""
        config = NodeConfig()
        config.set_equal_count(True)

        result = self.engine.validate([1, 2], [3, 4, 5], config)
        assert len(result.failures) == 1
        assert result.failures[0].kind == FailureKind.COUNT_MISMATCH

    def test_element_count(self):
        """Test element count checks the actual collection size."""
        config = NodeConfig()
        config.set_element_count(2, "items")

        result = self.engine.validate({"items": [1]}, {"items": [1, 2, 3]}, config)
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.kind == FailureKind.ELEMENT_COUNT_MISMATCH
        assert failure.key_path == "items"
        assert failure.expected == "count: 2"
        assert failure.actual == "count: 3"

    def test_element_count_without_expected(self):
        """Test element count applies even where expected says nothing."""
        config = NodeConfig()
        config.set_element_count(0, "errors")

        result = self.engine.validate({}, {"errors": ["boom"]}, config)
        assert [f.kind for f in result.failures] == [FailureKind.ELEMENT_COUNT_MISMATCH]

    def test_element_count_not_inherited(self):
        """Test element count does not apply to nested collections."""
        config = NodeConfig()
        config.set_element_count(1, "items")

        assert self.engine.validate({}, {"items": [[1, 2]]}, config).is_valid

    def test_element_count_on_primitive(self):
        """Test element count on a non-collection is reported as misuse."""
        config = NodeConfig()
        config.set_element_count(1, "name")

        result = self.engine.validate({}, {"name": "x"}, config)
        failure = result.failures[0]
        assert failure.kind == FailureKind.INVALID_USE
        assert failure.key_path == "name"


class TestAnyOrder:
    """Test any-order array matching."""

    def setup_method(self):
        self.engine = ValidationEngine()
        self.config = NodeConfig()
        self.config.set_any_order(True, "[*]")

    def test_one_to_one_match(self):
        """Test each expected element claims a different actual element."""
        assert self.engine.validate([1, 2], [2, 1, 3], self.config).is_valid

    def test_unmatched_element(self):
        """Test an unmatched element is reported with the remaining elements."""
        result = self.engine.validate([1, 2, 99], [2, 1, 3], self.config)
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.kind == FailureKind.NO_ANY_ORDER_MATCH
        assert failure.key_path == ""
        assert failure.message.startswith("Any order exact match found no matches")
        assert failure.expected == "99"
        assert failure.actual == "Remaining unmatched elements: [3]"

    def test_no_reuse_of_claimed_elements(self):
        """Test duplicates in expected need duplicates in actual."""
        result = self.engine.validate([1, 1], [1, 2], self.config)
        assert not result.is_valid

    def test_stops_after_first_unmatched(self):
        """Test only the first unmatched element is reported."""
        result = self.engine.validate([7, 8], [1, 2], self.config)
        assert len(result.failures) == 1
        assert result.failures[0].expected == "7"

    def test_nested_objects(self):
        """Test whole elements must match to be claimed."""
        expected = [{"id": 2, "v": "b"}, {"id": 1, "v": "a"}]
        actual = [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}]
        assert self.engine.validate(expected, actual, self.config).is_valid

    def test_type_match_message(self):
        """Test the failure names the match mode in use."""
        self.config.set_exact_match(False, "[*]")
        result = self.engine.validate([1, "a"], [2, 3], self.config)
        assert result.failures[0].message.startswith("Any order type match")

    def test_type_match_subtree_elements(self):
        """Test any-order with type match on every element field."""
        self.config.set_exact_match(False, "[*]", scope=Scope.SUBTREE)
        result = self.engine.validate([{"id": 1}], [{"id": "x"}, {"id": 7}], self.config)
        assert result.is_valid

    def test_fixed_and_any_order_mixed(self):
        """Test fixed positions are consumed before any-order matching."""
        config = NodeConfig()
        config.set_any_order(True, "[1]")
        assert self.engine.validate([1, 2], [1, 99, 2], config).is_valid

    def test_fixed_position_not_reclaimed(self):
        """Test a failed fixed position is still unavailable to any-order elements."""
        config = NodeConfig()
        config.set_any_order(True, "[1]")
        result = self.engine.validate([5, 1], [1, 3], config)
        kinds = [f.kind for f in result.failures]
        assert kinds == [FailureKind.VALUE_MISMATCH, FailureKind.NO_ANY_ORDER_MATCH]

    def test_strict_order_by_default(self):
        """Test arrays compare positionally without any-order."""
        result = self.engine.validate([1, 2], [2, 1])
        assert [f.key_path for f in result.failures] == ["[0]", "[1]"]


class TestActualConstraints:
    """Test key-must-be-absent and value-not-equal."""

    def setup_method(self):
        self.engine = ValidationEngine()

    def test_key_must_be_absent(self):
        """Test a forbidden key in actual is reported at its path."""
        config = NodeConfig()
        config.set_key_must_be_absent(True, "deleted")

        result = self.engine.validate({"id": 1}, {"id": 1, "deleted": True}, config)
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.kind == FailureKind.KEY_PRESENT
        assert failure.key_path == "deleted"
        assert failure.message == "Actual JSON must not have key with name: deleted"

        assert self.engine.validate({"id": 1}, {"id": 1}, config).is_valid

    def test_key_must_be_absent_in_array_elements(self):
        """Test forbidden keys are checked in every element through a wildcard."""
        config = NodeConfig()
        config.set_key_must_be_absent(True, "users[*].password")

        actual = {"users": [{"name": "a"}, {"name": "b", "password": "x"}]}
        result = self.engine.validate({}, actual, config)
        assert [f.key_path for f in result.failures] == ["users[1].password"]

    def test_actual_constraints_reported_first(self):
        """Test failures from actual-only checks come before comparison failures."""
        config = NodeConfig()
        config.set_key_must_be_absent(True, "deleted")

        result = self.engine.validate({"id": 1}, {"id": 2, "deleted": True}, config)
        kinds = [f.kind for f in result.failures]
        assert kinds == [FailureKind.KEY_PRESENT, FailureKind.VALUE_MISMATCH]

    def test_value_not_equal(self):
        """Test values that must differ."""
        config = NodeConfig()
        config.set_value_not_equal(True, "token")

        assert self.engine.validate({"token": "a"}, {"token": "b"}, config).is_valid
        result = self.engine.validate({"token": "a"}, {"token": "a"}, config)
        failure = result.failures[0]
        assert failure.kind == FailureKind.VALUE_EQUAL
        assert failure.message == "Values must NOT be equal."

    def test_value_not_equal_still_checks_type(self):
        """Test values that must differ still need the same type."""
        config = NodeConfig()
        config.set_value_not_equal(True, "token")

        result = self.engine.validate({"token": "a"}, {"token": 1}, config)
        assert result.failures[0].kind == FailureKind.TYPE_MISMATCH


class TestEngineConfig:
    """Test engine configuration."""

    def test_config_defaults(self):
        """Test engine configuration is a dataclass with usable defaults."""
        config = EngineConfig()
        assert is_dataclass(config)
        assert config.include_snapshots is True
        assert config.snapshot_max_length == 2000
        assert ValidationEngine().config == config

    def test_snapshot_truncation(self):
        """Test long values are truncated in failures."""
        engine = ValidationEngine(EngineConfig(snapshot_max_length=5))
        result = engine.validate({"a": "long string"}, {"a": "other string"})
        assert result.failures[0].expected == '"long...'

    def test_snapshots_disabled(self):
        """Test failures can omit value snapshots."""
        engine = ValidationEngine(EngineConfig(include_snapshots=False))
        result = engine.validate({"a": 1}, {"a": 2})
        assert result.failures[0].expected is None
        assert result.failures[0].actual is None
        assert result.failures[0].key_path == "a"

    def test_module_function(self):
        """Test the convenience function."""
        config = NodeConfig()
        config.set_exact_match(False, "a")
        assert validate({"a": 1}, {"a": 2}, config).is_valid
        assert not validate({"a": 1}, {"a": 2}).is_valid


class TestResultModels:
    """Test result serialization."""

    def test_failure_string(self):
        """Test the failure text block."""
        result = validate({"a": 1}, {"a": 2})
        text = str(result.failures[0])
        assert text.startswith("Values do not match.")
        assert "Expected: 1" in text
        assert "Actual: 2" in text
        assert "Key path: a" in text

    def test_result_to_dict(self):
        """Test the dict form of a result."""
        data = validate({"a": 1}, {"a": 2}).to_dict()
        assert data["is_valid"] is False
        assert data["failures_count"] == 1
        assert data["failures"][0]["kind"] == "VALUE_MISMATCH"
        assert data["failures"][0]["key_path"] == "a"
