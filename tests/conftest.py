"""Shared fixtures: a small blog schema and table builders."""

from typing import Optional

import pytest

from roaderd_core.schema import Column, Relationship, RelationType, Schema, Table


def keyed_table(name: str, *extra: Column, key_type: str = "INT") -> Table:
    """Table with a NOT NULL primary key ``id`` followed by ``extra`` columns."""
    table = Table.create(name)
    table.add_column(Column.create("id", key_type, primary_key=True, nullable=False))
    for column in extra:
        table.add_column(column)
    return table


def link(
    schema: Schema,
    source: Table,
    source_column: str,
    target: Table,
    target_column: str = "id",
    type: RelationType = RelationType.ONE_TO_MANY,
    rel_id: Optional[str] = None,
) -> Relationship:
    """Add a relationship between named columns and return it."""
    src = source.get_column_by_name(source_column)
    tgt = target.get_column_by_name(target_column)
    rel = Relationship.create(type, source.id, target.id, src.id, tgt.id)
    if rel_id:
        rel.id = rel_id
    schema.add_relationship(rel)
    return rel


@pytest.fixture(name="users")
def users_table() -> Table:
    table = keyed_table("users", Column.create("username", "VARCHAR(50)", nullable=False))
    table.columns[0].auto_increment = True
    return table


@pytest.fixture(name="posts")
def posts_table() -> Table:
    table = keyed_table(
        "posts",
        Column.create("user_id", "INT", foreign_key=True),
        Column.create("title", "VARCHAR(200)"),
    )
    table.columns[0].auto_increment = True
    return table


@pytest.fixture(name="schema")
def blog_schema(users: Table, posts: Table) -> Schema:
    """users and posts, no relationships yet."""
    schema = Schema(name="Test Schema")
    schema.add_table(users)
    schema.add_table(posts)
    return schema
