import re

import pytest

from counterpart.validators.naming import (
    POLICY_RULE,
    RLS_FUNCTION_RULE,
    Identifier,
    NamingRule,
)


class TestPolicyRule:
    """Tests for the security policy naming rule."""

    def test_extracts_schema_and_object(self):
        assert POLICY_RULE.extract("Security.sales_orders.sql") == Identifier("sales", "orders")

    def test_schema_takes_everything_up_to_last_underscore(self):
        identifier = POLICY_RULE.extract("Security.sales_order_items.sql")
        assert identifier == Identifier("sales_order", "items")

    @pytest.mark.parametrize(
        "filename",
        ["Security.sql", "Security.orders.sql", "sales.orders.sql", "Security.sales_orders.cs"],
    )
    def test_non_matching_names(self, filename):
        assert POLICY_RULE.extract(filename) is None

    def test_unicode_word_characters_do_not_match(self):
        assert POLICY_RULE.extract("Security.sälj_orders.sql") is None


class TestFunctionRule:
    """Tests for the RLS read function naming rule."""

    def test_extracts_schema_and_object(self):
        identifier = RLS_FUNCTION_RULE.extract("Security.fn_RLS_Read_sales_orders.sql")
        assert identifier == Identifier("sales", "orders")

    def test_policy_file_does_not_match(self):
        assert RLS_FUNCTION_RULE.extract("Security.sales_orders.sql") is None

    def test_table_filename(self):
        identifier = RLS_FUNCTION_RULE.extract("Security.fn_RLS_Read_hr_people.sql")
        assert identifier.table_filename == "hr.people.sql"


class TestNamingRule:
    """Tests for generic NamingRule behaviour."""

    def test_unmatched_optional_group_yields_empty_string(self):
        rule = NamingRule(
            name="optional",
            pattern=re.compile(r"Security\.(?:(?P<schema>\w+)_)?(?P<object>[a-z]+)\.sql"),
        )
        assert rule.extract("Security.orders.sql") == Identifier("", "orders")

    def test_missing_group_in_pattern_yields_empty_string(self):
        rule = NamingRule(name="schema_only", pattern=re.compile(r"(?P<schema>\w+)\.sql"))
        assert rule.extract("sales.sql") == Identifier("sales", "")

    def test_extraction_is_independent_per_filename(self):
        names = ["Security.b_y.sql", "other.txt", "Security.a_x.sql"]
        first = [POLICY_RULE.extract(n) for n in names]
        second = [POLICY_RULE.extract(n) for n in reversed(names)]
        assert first == list(reversed(second))
