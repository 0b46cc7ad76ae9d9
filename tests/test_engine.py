"""Tests for whole-schema validation."""

import pytest

from conftest import keyed_table, link
from roaderd_core.config import ValidatorConfig
from roaderd_core.schema import Column, Relationship, RelationType, Schema, Table
from roaderd_core.validation import IssueCode, ValidationEngine, validate_schema


def count(codes, code) -> int:
    return sum(1 for c in codes if c == code)


def cyclic_pair() -> Schema:
    """table1 <-> table2, each pointing at the other's primary key."""
    schema = Schema()
    table1 = keyed_table("table1", Column.create("table2_id", "INT", foreign_key=True))
    table2 = keyed_table("table2", Column.create("table1_id", "INT", foreign_key=True))
    schema.add_table(table1)
    schema.add_table(table2)
    link(schema, table1, "table2_id", table2)
    link(schema, table2, "table1_id", table1)
    return schema


# =============================================================================
# validate_schema
# =============================================================================


def test_empty_schema_is_valid() -> None:
    result = ValidationEngine(Schema()).validate_schema()

    assert result.valid
    assert result.errors == []
    assert result.warnings == []


def test_single_keyed_table_is_valid() -> None:
    schema = Schema()
    schema.add_table(keyed_table("users"))

    result = validate_schema(schema)

    assert result.errors == []
    assert result.warnings == []


def test_duplicate_table_names_flag_only_later_tables() -> None:
    schema = Schema()
    first = keyed_table("users")
    second = keyed_table("users")
    third = keyed_table("USERS")
    for table in (first, second, third):
        schema.add_table(table)

    result = validate_schema(schema)

    duplicates = [e for e in result.errors if e.code == IssueCode.DUPLICATE_TABLE_NAME]
    assert [e.field for e in duplicates] == [second.id, third.id]


def test_two_users_tables_give_exactly_one_duplicate() -> None:
    schema = Schema()
    schema.add_table(Table.create("users"))
    schema.add_table(Table.create("users"))

    result = validate_schema(schema)

    assert not result.valid
    assert count(result.error_codes(), "DUPLICATE_TABLE_NAME") == 1


def test_table_without_columns() -> None:
    schema = Schema()
    schema.add_table(Table.create("empty_table"))

    result = validate_schema(schema)

    assert result.error_codes() == ["TABLE_NO_COLUMNS", "TABLE_NO_PRIMARY_KEY"]


def test_table_without_primary_key() -> None:
    schema = Schema()
    table = Table.create("users")
    table.add_column(Column.create("name", "VARCHAR(50)"))
    schema.add_table(table)

    result = validate_schema(schema)

    assert result.error_codes() == ["TABLE_NO_PRIMARY_KEY"]
    assert result.errors[0].field == table.id


@pytest.mark.parametrize("name", ["", "   "])
def test_blank_table_name(name) -> None:
    schema = Schema()
    schema.add_table(keyed_table(name))

    assert validate_schema(schema).error_codes() == ["TABLE_EMPTY_NAME"]


def test_duplicate_column_names_are_case_insensitive() -> None:
    schema = Schema()
    duplicate = Column.create("ID", "INT")
    table = keyed_table("users", duplicate)
    schema.add_table(table)

    result = validate_schema(schema)

    assert result.error_codes() == ["DUPLICATE_COLUMN_NAME"]
    assert result.errors[0].field == duplicate.id


def test_empty_column_name_and_type() -> None:
    schema = Schema()
    nameless = Column.create("", "VARCHAR(50)")
    typeless = Column.create("bio", " ")
    schema.add_table(keyed_table("users", nameless, typeless))

    result = validate_schema(schema)

    assert result.error_codes() == ["EMPTY_COLUMN_NAME", "EMPTY_COLUMN_TYPE"]
    assert [e.field for e in result.errors] == [nameless.id, typeless.id]


def test_nullable_primary_key() -> None:
    schema = Schema()
    table = Table.create("users")
    table.add_column(Column.create("id", "INT", primary_key=True))
    schema.add_table(table)

    assert validate_schema(schema).error_codes() == ["PRIMARY_KEY_NULLABLE"]


@pytest.mark.parametrize(
    ("type_string", "flagged"),
    [
        ("INT", False),
        ("bigint", False),
        ("DECIMAL(10, 2)", False),
        ("VARCHAR(50)", True),
        ("TEXT", True),
        ("UUID", True),
    ],
)
def test_auto_increment_requires_numeric_type(type_string, flagged) -> None:
    schema = Schema()
    table = Table.create("users")
    table.add_column(Column.create("id", type_string, primary_key=True, nullable=False, auto_increment=True))
    schema.add_table(table)

    result = validate_schema(schema)

    assert result.has_error(IssueCode.AUTO_INCREMENT_NON_NUMERIC) is flagged
    assert result.valid is not flagged


def test_all_passes_run_despite_errors() -> None:
    schema = Schema()
    broken = Table.create("broken")
    schema.add_table(broken)
    schema.add_table(keyed_table("lonely"))
    schema.add_relationship(Relationship.create(RelationType.ONE_TO_MANY, broken.id, "ghost", "x", "y"))

    result = validate_schema(schema)

    assert result.error_codes() == ["TABLE_NO_COLUMNS", "TABLE_NO_PRIMARY_KEY", "TARGET_TABLE_NOT_FOUND"]
    assert result.warning_codes() == ["ORPHAN_TABLE"]


# =============================================================================
# Circular dependencies
# =============================================================================


def test_two_table_cycle_is_a_warning() -> None:
    schema = cyclic_pair()

    result = validate_schema(schema)

    assert result.errors == []
    cycles = [w for w in result.warnings if w.code == IssueCode.CIRCULAR_DEPENDENCY]
    assert len(cycles) == 1
    assert cycles[0].message == "Circular dependency detected: table1 → table2 → table1"
    assert cycles[0].field == next(iter(schema.tables))


def test_self_reference_is_a_cycle() -> None:
    schema = Schema()
    employees = keyed_table("employees", Column.create("manager_id", "INT"))
    schema.add_table(employees)
    link(schema, employees, "manager_id", employees)

    result = validate_schema(schema)

    assert result.warning_codes().count("CIRCULAR_DEPENDENCY") == 1
    assert "employees → employees" in result.warnings[-1].message


def test_table_on_two_cycles_is_reported_twice() -> None:
    schema = Schema()
    a = keyed_table("a", Column.create("b_id", "INT"))
    b = keyed_table("b", Column.create("a_id", "INT"), Column.create("c_id", "INT"))
    c = keyed_table("c", Column.create("a_id", "INT"))
    for table in (a, b, c):
        schema.add_table(table)
    link(schema, a, "b_id", b)
    link(schema, b, "a_id", a)
    link(schema, b, "c_id", c)
    link(schema, c, "a_id", a)

    result = validate_schema(schema)

    cycles = [w for w in result.warnings if w.code == IssueCode.CIRCULAR_DEPENDENCY]
    assert [w.message for w in cycles] == [
        "Circular dependency detected: a → b → a",
        "Circular dependency detected: a → b → c → a",
    ]
    assert {w.field for w in cycles} == {a.id}


def test_explored_tables_are_not_walked_again() -> None:
    schema = Schema()
    tables = [keyed_table(name, Column.create("next_id", "INT")) for name in ("a", "b", "c")]
    for table in tables:
        schema.add_table(table)
    link(schema, tables[0], "next_id", tables[1])
    link(schema, tables[1], "next_id", tables[2])
    link(schema, tables[2], "next_id", tables[0])

    result = validate_schema(schema)

    assert result.warning_codes().count("CIRCULAR_DEPENDENCY") == 1


def test_acyclic_chain_has_no_cycle_warning(schema: Schema, users: Table, posts: Table) -> None:
    comments = keyed_table("comments", Column.create("post_id", "INT"))
    schema.add_table(comments)
    link(schema, comments, "post_id", posts)
    link(schema, posts, "user_id", users)

    assert not validate_schema(schema).has_warning(IssueCode.CIRCULAR_DEPENDENCY)


def test_cycle_through_missing_table_uses_raw_id() -> None:
    schema = Schema()
    users = keyed_table("users", Column.create("ghost_id", "INT"))
    schema.add_table(users)
    schema.add_relationship(Relationship.create(RelationType.ONE_TO_MANY, users.id, "ghost", users.columns[1].id, "g"))
    schema.add_relationship(Relationship.create(RelationType.ONE_TO_MANY, "ghost", users.id, "g", users.columns[0].id))

    result = validate_schema(schema)

    assert result.error_codes() == ["TARGET_TABLE_NOT_FOUND", "SOURCE_TABLE_NOT_FOUND"]
    cycles = [w for w in result.warnings if w.code == IssueCode.CIRCULAR_DEPENDENCY]
    assert [w.message for w in cycles] == ["Circular dependency detected: users → ghost → users"]


def test_cycle_check_can_be_disabled() -> None:
    engine = ValidationEngine(cyclic_pair(), ValidatorConfig(check_circular_dependencies=False))

    assert not engine.validate_schema().has_warning(IssueCode.CIRCULAR_DEPENDENCY)


def test_long_chain_does_not_hit_recursion_limit() -> None:
    schema = Schema()
    tables = [keyed_table(f"t{i}", Column.create("next_id", "INT")) for i in range(3000)]
    for table in tables:
        schema.add_table(table)
    for source, target in zip(tables, tables[1:]):
        link(schema, source, "next_id", target)

    result = validate_schema(schema)

    assert result.errors == []
    assert not result.has_warning(IssueCode.CIRCULAR_DEPENDENCY)


# =============================================================================
# Orphan tables
# =============================================================================


def test_unconnected_table_is_orphan(schema: Schema, users: Table, posts: Table) -> None:
    orphan = keyed_table("orphan")
    schema.add_table(orphan)
    link(schema, posts, "user_id", users)

    result = validate_schema(schema)

    orphans = [w for w in result.warnings if w.code == IssueCode.ORPHAN_TABLE]
    assert len(orphans) == 1
    assert orphans[0].field == orphan.id
    assert "orphan" in orphans[0].message


def test_single_table_skips_orphan_check() -> None:
    schema = Schema()
    schema.add_table(keyed_table("users"))

    assert not validate_schema(schema).has_warning(IssueCode.ORPHAN_TABLE)


def test_no_relationships_makes_every_table_orphan(schema: Schema) -> None:
    assert validate_schema(schema).warning_codes() == ["ORPHAN_TABLE", "ORPHAN_TABLE"]


def test_dangling_relationship_still_connects_existing_endpoint(schema: Schema, users: Table, posts: Table) -> None:
    schema.add_relationship(Relationship.create(RelationType.ONE_TO_ONE, posts.id, "ghost", "x", "y"))

    orphans = [w.field for w in validate_schema(schema).warnings if w.code == IssueCode.ORPHAN_TABLE]

    assert orphans == [users.id]


def test_orphan_check_can_be_disabled(schema: Schema) -> None:
    engine = ValidationEngine(schema, ValidatorConfig(check_orphan_tables=False))

    assert engine.validate_schema().warnings == []


# =============================================================================
# validate_table / validate_relationship
# =============================================================================


def test_validate_table_not_found() -> None:
    result = ValidationEngine(Schema()).validate_table("missing")

    assert not result.valid
    assert result.error_codes() == ["TABLE_NOT_FOUND"]
    assert result.errors[0].field == "missing"
    assert result.warnings == []


def test_validate_table_correct(schema: Schema, users: Table) -> None:
    result = ValidationEngine(schema).validate_table(users.id)

    assert result.valid
    assert result.warnings == []


def test_validate_table_uses_its_own_column_codes() -> None:
    schema = Schema()
    table = keyed_table("users", Column.create("", "VARCHAR(50)"), Column.create("name", ""))
    schema.add_table(table)

    result = ValidationEngine(schema).validate_table(table.id)

    assert result.error_codes() == ["COLUMN_EMPTY_NAME", "COLUMN_EMPTY_TYPE"]


def test_validate_table_ignores_other_tables_names(schema: Schema, users: Table) -> None:
    schema.add_table(keyed_table("users"))

    assert ValidationEngine(schema).validate_table(users.id).valid


@pytest.mark.parametrize(
    ("column", "code"),
    [
        (Column.create("id", "INT", primary_key=True), "PRIMARY_KEY_NULLABLE"),
        (Column.create("id", "TEXT", primary_key=True, nullable=False, auto_increment=True), "AUTO_INCREMENT_NON_NUMERIC"),
    ],
)
def test_validate_table_runs_column_flag_checks(column, code) -> None:
    schema = Schema()
    table = Table.create("users")
    table.add_column(column)
    schema.add_table(table)

    assert ValidationEngine(schema).validate_table(table.id).error_codes() == [code]


def test_validate_relationship_not_found(schema: Schema) -> None:
    result = ValidationEngine(schema).validate_relationship("missing")

    assert result.error_codes() == ["RELATIONSHIP_NOT_FOUND"]
    assert result.errors[0].field == "missing"


def test_validate_relationship_delegates(schema: Schema, users: Table, posts: Table) -> None:
    rel = link(schema, posts, "user_id", users)

    result = ValidationEngine(schema).validate_relationship(rel.id)

    assert result == rel.validate(schema)
    assert result.valid


def test_validate_relationship_missing_column(schema: Schema, users: Table, posts: Table) -> None:
    rel = Relationship.create(RelationType.ONE_TO_MANY, posts.id, users.id, "nope", users.columns[0].id)
    schema.add_relationship(rel)

    result = ValidationEngine(schema).validate_relationship(rel.id)

    assert result.error_codes() == ["SOURCE_COLUMN_NOT_FOUND"]
    assert result.warnings == []


# =============================================================================
# Properties
# =============================================================================


def messy_schema() -> Schema:
    schema = cyclic_pair()
    schema.add_table(Table.create("table1"))
    orphan = keyed_table("orphan", Column.create("code", "VARCHAR(10)", auto_increment=True))
    schema.add_table(orphan)
    schema.add_relationship(Relationship.create(RelationType.MANY_TO_MANY, orphan.id, "ghost", "a", "b"))
    return schema


@pytest.mark.parametrize("factory", [Schema, cyclic_pair, messy_schema])
def test_valid_iff_no_errors(factory) -> None:
    result = validate_schema(factory())

    assert result.valid == (len(result.errors) == 0)
    assert result.to_dict()["valid"] == result.valid


def test_validation_is_idempotent_and_read_only() -> None:
    schema = messy_schema()
    engine = ValidationEngine(schema)
    before = schema.fingerprint()

    first = engine.validate_schema()
    second = engine.validate_schema()

    assert first == second
    assert schema.fingerprint() == before


def test_round_trip_preserves_validation_result() -> None:
    schema = messy_schema()

    assert validate_schema(Schema.from_dict(schema.to_dict())) == validate_schema(schema)


def test_removing_table_clears_its_relationship_findings() -> None:
    schema = cyclic_pair()
    first_id = next(iter(schema.tables))

    schema.remove_table(first_id)
    result = validate_schema(schema)

    assert schema.relationships == {}
    assert result.errors == []
    assert result.warnings == []


def test_unnamed_tables_and_columns_do_not_raise() -> None:
    schema = Schema()
    first = keyed_table("users")
    first.name = None
    second = keyed_table("posts", Column.create(None, "INT"), Column.create(None, "INT"))
    schema.add_table(first)
    schema.add_table(second)

    codes = validate_schema(schema).error_codes()

    assert count(codes, IssueCode.TABLE_EMPTY_NAME) == 1
    assert count(codes, IssueCode.EMPTY_COLUMN_NAME) == 2
    assert count(codes, IssueCode.DUPLICATE_COLUMN_NAME) == 1
