"""Tests for MySQL statement builder."""

import pytest

from mysqlkit.database.implementations.mysql.statement_builder import (
    MySQLStatementBuilder,
)
from mysqlkit.database.schema import ColumnSpec, ForeignKey
from mysqlkit.exceptions import ValidationError
from mysqlkit.types import ForeignKeyAction

DEFAULT_OPTIONS = "ENGINE=InnoDB PACK_KEYS=1 ROW_FORMAT=COMPRESSED"


@pytest.fixture
def builder() -> MySQLStatementBuilder:
    """Create MySQL statement builder instance."""
    return MySQLStatementBuilder()


@pytest.fixture
def simple_columns() -> list[dict[str, str]]:
    """Two plain columns."""
    return [
        {"name": "c1", "type": "varchar(255)"},
        {"name": "c2", "type": "integer"},
    ]


class TestCreateTable:
    """Test CREATE TABLE generation."""

    def test_basic_table(
        self, builder: MySQLStatementBuilder, simple_columns: list[dict[str, str]]
    ) -> None:
        """Test a table without unique columns or foreign keys."""
        statements = builder.build_create_table("t", simple_columns, ["c1"])

        assert len(statements) == 1
        assert statements[0].sql == (
            "CREATE TABLE IF NOT EXISTS `t` (`c1` VARCHAR(255) NOT NULL, "
            "`c2` INTEGER NOT NULL, PRIMARY KEY (`c1`)) " + DEFAULT_OPTIONS + ";"
        )
        assert statements[0].params == ()
        assert "FOREIGN KEY" not in statements[0].sql

    def test_primary_key_as_string(
        self, builder: MySQLStatementBuilder, simple_columns: list[dict[str, str]]
    ) -> None:
        """Test a bare key name is not split into characters."""
        statements = builder.build_create_table("t", simple_columns, "c1")

        assert "PRIMARY KEY (`c1`)" in statements[0].sql

    def test_percent_without_defaults_is_kept(
        self, builder: MySQLStatementBuilder, simple_columns: list[dict[str, str]]
    ) -> None:
        """Test statements without parameters keep literal %."""
        statements = builder.build_create_table(
            "t", simple_columns, ["c1"], "COMMENT='50% full'"
        )

        assert statements[0].sql.endswith(" COMMENT='50% full';")

    def test_percent_with_defaults_is_doubled(self, builder: MySQLStatementBuilder) -> None:
        """Test statements carrying defaults double literal %."""
        statements = builder.build_create_table(
            "t",
            [{"name": "r%", "type": "int", "default": 0}],
            ["r%"],
            "COMMENT='50% full'",
        )

        assert statements[0].sql == (
            "CREATE TABLE IF NOT EXISTS `t` (`r%%` INT NOT NULL DEFAULT %s, "
            "PRIMARY KEY (`r%%`)) COMMENT='50%% full';"
        )
        assert statements[0].params == (0,)

    def test_composite_primary_key(
        self, builder: MySQLStatementBuilder, simple_columns: list[dict[str, str]]
    ) -> None:
        """Test primary key listing several columns in order."""
        statements = builder.build_create_table("t", simple_columns, ["c2", "c1"])

        assert "PRIMARY KEY (`c2`, `c1`)" in statements[0].sql

    def test_nullable_column(self, builder: MySQLStatementBuilder) -> None:
        """Test nullable columns render NULL."""
        statements = builder.build_create_table(
            "t",
            [ColumnSpec(name="id", type="int"), ColumnSpec(name="note", type="text", nullable=True)],
            ["id"],
        )

        assert "`id` INT NOT NULL" in statements[0].sql
        assert "`note` TEXT NULL" in statements[0].sql

    def test_defaults_are_bound_in_column_order(
        self, builder: MySQLStatementBuilder
    ) -> None:
        """Test default values become parameters instead of literals."""
        statements = builder.build_create_table(
            "t",
            [
                {"name": "id", "type": "int"},
                {"name": "name", "type": "varchar(32)", "default": "x'); DROP TABLE t; --"},
                {"name": "age", "type": "int", "default": 7},
            ],
            ["id"],
        )

        sql = statements[0].sql
        assert "`name` VARCHAR(32) NOT NULL DEFAULT %s" in sql
        assert "`age` INT NOT NULL DEFAULT %s" in sql
        assert "DROP TABLE" not in sql
        assert statements[0].params == ("x'); DROP TABLE t; --", 7)

    def test_falsy_defaults_are_kept(self, builder: MySQLStatementBuilder) -> None:
        """Test zero and False count as defaults."""
        statements = builder.build_create_table(
            "t",
            [
                {"name": "id", "type": "int"},
                {"name": "count", "type": "int", "default": 0},
                {"name": "flag", "type": "boolean", "default": False},
            ],
            ["id"],
        )

        assert statements[0].sql.count("DEFAULT %s") == 2
        assert statements[0].params == (0, False)

    def test_unique_columns_add_indexes(self, builder: MySQLStatementBuilder) -> None:
        """Test one CREATE UNIQUE INDEX per unique column."""
        statements = builder.build_create_table(
            "users",
            [
                {"name": "id", "type": "int"},
                {"name": "email", "type": "varchar(255)", "unique": True},
                {"name": "login", "type": "varchar(64)", "unique": True},
            ],
            ["id"],
        )

        assert len(statements) == 3
        assert statements[1].sql == (
            "CREATE UNIQUE INDEX IF NOT EXISTS `users_unique_email` "
            "ON `users` (`email`)"
        )
        assert statements[2].sql == (
            "CREATE UNIQUE INDEX IF NOT EXISTS `users_unique_login` "
            "ON `users` (`login`)"
        )

    def test_foreign_keys(self, builder: MySQLStatementBuilder) -> None:
        """Test foreign key constraints with referential actions."""
        statements = builder.build_create_table(
            "orders",
            [
                {"name": "id", "type": "int"},
                ColumnSpec(
                    name="user_id",
                    type="int",
                    foreign_key=ForeignKey(
                        table="users",
                        column="id",
                        on_delete=ForeignKeyAction.CASCADE,
                        on_update=ForeignKeyAction.SET_NULL,
                    ),
                ),
                {
                    "name": "shop_id",
                    "type": "int",
                    "foreign_key": {"table": "shops", "column": "id"},
                },
            ],
            ["id"],
        )

        sql = statements[0].sql
        assert (
            "PRIMARY KEY (`id`), CONSTRAINT `orders_user_id_foreign_key` "
            "FOREIGN KEY (`user_id`) REFERENCES `users` (`id`) "
            "ON DELETE CASCADE ON UPDATE SET NULL, "
            "CONSTRAINT `orders_shop_id_foreign_key` FOREIGN KEY (`shop_id`) "
            "REFERENCES `shops` (`id`))"
        ) in sql

    def test_foreign_key_action_from_string(self, builder: MySQLStatementBuilder) -> None:
        """Test actions given by their SQL text."""
        statements = builder.build_create_table(
            "a",
            [
                {"name": "id", "type": "int"},
                {
                    "name": "b_id",
                    "type": "int",
                    "foreign_key": {"table": "b", "column": "id", "on_delete": "NO ACTION"},
                },
            ],
            ["id"],
        )

        assert "ON DELETE NO ACTION" in statements[0].sql

    def test_unknown_foreign_key_action(self, builder: MySQLStatementBuilder) -> None:
        """Test actions outside the fixed set are rejected."""
        with pytest.raises(ValidationError):
            builder.build_create_table(
                "a",
                [
                    {"name": "id", "type": "int"},
                    {
                        "name": "b_id",
                        "type": "int",
                        "foreign_key": {"table": "b", "column": "id", "on_delete": "DROP"},
                    },
                ],
                ["id"],
            )

    def test_custom_table_options(
        self, builder: MySQLStatementBuilder, simple_columns: list[dict[str, str]]
    ) -> None:
        """Test table options replace the default preset."""
        statements = builder.build_create_table(
            "t", simple_columns, ["c1"], table_options="ENGINE=MyISAM"
        )

        assert statements[0].sql.endswith(") ENGINE=MyISAM;")

    def test_empty_table_options(
        self, builder: MySQLStatementBuilder, simple_columns: list[dict[str, str]]
    ) -> None:
        """Test empty options leave no trailing space."""
        statements = builder.build_create_table("t", simple_columns, ["c1"], table_options="")

        assert statements[0].sql.endswith("PRIMARY KEY (`c1`));")

    def test_identifiers_are_quoted(self, builder: MySQLStatementBuilder) -> None:
        """Test hostile identifiers stay inside their quotes."""
        statements = builder.build_create_table(
            "app.t",
            [{"name": "a`b", "type": "int", "unique": True}],
            ["a`b"],
        )

        assert statements[0].sql.startswith("CREATE TABLE IF NOT EXISTS `app`.`t` (`a``b` INT")
        assert statements[1].sql == (
            "CREATE UNIQUE INDEX IF NOT EXISTS `t_unique_a``b` ON `app`.`t` (`a``b`)"
        )

    def test_empty_primary_key(
        self, builder: MySQLStatementBuilder, simple_columns: list[dict[str, str]]
    ) -> None:
        """Test an empty primary key is rejected."""
        with pytest.raises(ValidationError):
            builder.build_create_table("t", simple_columns, [])

    def test_no_columns(self, builder: MySQLStatementBuilder) -> None:
        """Test a table needs columns."""
        with pytest.raises(ValidationError):
            builder.build_create_table("t", [], ["c1"])

    def test_malformed_column(self, builder: MySQLStatementBuilder) -> None:
        """Test a column without a type is rejected."""
        with pytest.raises(ValidationError):
            builder.build_create_table("t", [{"name": "c1"}], ["c1"])


class TestMultiInsert:
    """Test multi-row INSERT generation."""

    def test_placeholder_groups_and_params(self, builder: MySQLStatementBuilder) -> None:
        """Test one group per row and row-major parameters."""
        rows = [["a", 1], ["b", 2], ["c", 3]]

        statement = builder.build_multi_insert("t", ["c1", "c2"], rows)

        assert statement.sql == (
            "INSERT INTO `t` (`c1`, `c2`) VALUES (%s,%s),(%s,%s),(%s,%s)"
        )
        assert statement.params == ("a", 1, "b", 2, "c", 3)

    @pytest.mark.parametrize("row_count,column_count", [(1, 1), (4, 3), (25, 2)])
    def test_counts(
        self, builder: MySQLStatementBuilder, row_count: int, column_count: int
    ) -> None:
        """Test placeholder and parameter counts follow the input shape."""
        columns = [f"c{i}" for i in range(column_count)]
        rows = [[f"{r}-{c}" for c in range(column_count)] for r in range(row_count)]

        statement = builder.build_multi_insert("t", columns, rows)

        values = statement.sql.split(" VALUES ", 1)[1]
        assert values.count("(") == row_count
        assert values.count("%s") == row_count * column_count
        assert list(statement.params) == [value for row in rows for value in row]

    def test_without_columns(self, builder: MySQLStatementBuilder) -> None:
        """Test positional insert takes its width from the first row."""
        statement = builder.build_multi_insert("t", [], [(1, 2, 3), (4, 5, 6)])

        assert statement.sql == "INSERT INTO `t` VALUES (%s,%s,%s),(%s,%s,%s)"
        assert statement.params == (1, 2, 3, 4, 5, 6)

    def test_without_columns_uneven_rows(self, builder: MySQLStatementBuilder) -> None:
        """Test positional rows must all be as wide as the first."""
        with pytest.raises(ValidationError):
            builder.build_multi_insert("t", [], [(1, 2), (3,)])

    def test_empty_rows(self, builder: MySQLStatementBuilder) -> None:
        """Test inserting nothing is rejected."""
        with pytest.raises(ValidationError):
            builder.build_multi_insert("t", ["c1"], [])

    def test_row_width_mismatch(self, builder: MySQLStatementBuilder) -> None:
        """Test rows must match the column list."""
        with pytest.raises(ValidationError, match="Row 1"):
            builder.build_multi_insert("t", ["c1", "c2"], [["a", 1], ["b"]])

    def test_qmark_paramstyle(self) -> None:
        """Test placeholders follow the driver paramstyle."""
        builder = MySQLStatementBuilder("qmark")

        statement = builder.build_multi_insert("t", ["c1"], [["a"], ["b"]])

        assert statement.sql == "INSERT INTO `t` (`c1`) VALUES (?),(?)"

    def test_percent_in_identifiers_is_doubled(
        self, builder: MySQLStatementBuilder
    ) -> None:
        """Test literal % survives the driver's %-formatting."""
        statement = builder.build_multi_insert("t%", ["rate%"], [[1]])

        assert statement.sql == "INSERT INTO `t%%` (`rate%%`) VALUES (%s)"
        assert statement.sql % statement.params == "INSERT INTO `t%` (`rate%`) VALUES (1)"

    def test_percent_kept_for_qmark(self) -> None:
        """Test % is left alone when the driver does not %-format."""
        builder = MySQLStatementBuilder("qmark")

        statement = builder.build_multi_insert("t%", ["rate%"], [[1]])

        assert statement.sql == "INSERT INTO `t%` (`rate%`) VALUES (?)"

    def test_unsupported_paramstyle(self) -> None:
        """Test named paramstyles are not supported."""
        with pytest.raises(ValueError):
            MySQLStatementBuilder("named")


class TestMultiUpdate:
    """Test upsert generation."""

    def test_update_clause_skips_key_columns(self, builder: MySQLStatementBuilder) -> None:
        """Test the update clause lists non-key columns in order."""
        statement = builder.build_multi_update(
            "t", ["c1"], ["c3", "c1", "c2"], [["x", "a", 9]]
        )

        assert statement.sql == (
            "INSERT INTO `t` (`c3`, `c1`, `c2`) VALUES (%s,%s,%s) "
            "ON DUPLICATE KEY UPDATE `c3` = VALUES(`c3`), `c2` = VALUES(`c2`)"
        )
        assert statement.params == ("x", "a", 9)

    def test_composite_key(self, builder: MySQLStatementBuilder) -> None:
        """Test every key column is left out of the update clause."""
        statement = builder.build_multi_update(
            "t", ["a", "b"], ["a", "b", "c"], [[1, 2, 3], [4, 5, 6]]
        )

        clause = statement.sql.split("ON DUPLICATE KEY UPDATE ", 1)[1]
        assert clause == "`c` = VALUES(`c`)"
        assert statement.params == (1, 2, 3, 4, 5, 6)

    def test_empty_columns(self, builder: MySQLStatementBuilder) -> None:
        """Test columns are required."""
        with pytest.raises(ValidationError):
            builder.build_multi_update("t", ["c1"], [], [["a"]])

    def test_empty_primary_key(self, builder: MySQLStatementBuilder) -> None:
        """Test a primary key is required."""
        with pytest.raises(ValidationError):
            builder.build_multi_update("t", [], ["c1"], [["a"]])

    def test_primary_key_as_string(self, builder: MySQLStatementBuilder) -> None:
        """Test a bare key name is one column, not a sequence of characters."""
        statement = builder.build_multi_update(
            "t", "c1", ["c1", "c2"], [["a", 9]]
        )

        clause = statement.sql.split("ON DUPLICATE KEY UPDATE ", 1)[1]
        assert clause == "`c2` = VALUES(`c2`)"

    def test_percent_in_update_clause(self, builder: MySQLStatementBuilder) -> None:
        """Test update assignments double literal %."""
        statement = builder.build_multi_update("t", ["c1"], ["c1", "r%"], [["a", 1]])

        assert statement.sql.endswith("ON DUPLICATE KEY UPDATE `r%%` = VALUES(`r%%`)")

    def test_only_key_columns(self, builder: MySQLStatementBuilder) -> None:
        """Test an upsert needs something to update."""
        with pytest.raises(ValidationError):
            builder.build_multi_update("t", ["c1"], ["c1"], [["a"]])

    def test_empty_rows(self, builder: MySQLStatementBuilder) -> None:
        """Test row validation is shared with inserts."""
        with pytest.raises(ValidationError):
            builder.build_multi_update("t", ["c1"], ["c1", "c2"], [])


class TestOtherStatements:
    """Test drop, list and use statements."""

    def test_drop_single_table(self, builder: MySQLStatementBuilder) -> None:
        """Test dropping one table."""
        assert builder.build_drop_table("t").sql == "DROP TABLE IF EXISTS `t`;"

    def test_drop_several_tables(self, builder: MySQLStatementBuilder) -> None:
        """Test dropping several tables at once."""
        statement = builder.build_drop_table(["a", "db.b"])

        assert statement.sql == "DROP TABLE IF EXISTS `a`, `db`.`b`;"

    def test_drop_nothing(self, builder: MySQLStatementBuilder) -> None:
        """Test an empty table list is rejected."""
        with pytest.raises(ValidationError):
            builder.build_drop_table([])

    def test_list_tables(self, builder: MySQLStatementBuilder) -> None:
        """Test listing tables."""
        assert builder.build_list_tables().sql == "SHOW TABLES"

    def test_use_database(self, builder: MySQLStatementBuilder) -> None:
        """Test switching schema quotes the name."""
        assert builder.build_use_database("my.db").sql == "USE `my.db`"

    def test_use_empty_database(self, builder: MySQLStatementBuilder) -> None:
        """Test an empty schema name is rejected."""
        with pytest.raises(ValidationError):
            builder.build_use_database("")
