"""
DuckDB-based reference data for country, subdivision and change lookups.

This module keeps the three reference tables in an in-memory DuckDB
database and answers lookups with exact-match SQL queries. Tables can be
loaded from another reference or from CSV exports written by export_csv().
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import duckdb

from .reference import (
    CountryChange,
    CountryRecord,
    ReferenceData,
    SubdivisionRecord,
    TableReference,
    check_field,
)

logger = logging.getLogger(__name__)

COUNTRIES_CSV = "countries.csv"
SUBDIVISIONS_CSV = "subdivisions.csv"
CHANGES_CSV = "country_changes.csv"


def _sql_string(path: Path) -> str:
    """Quote a path as a SQL string literal."""
    return "'" + str(path).replace("'", "''") + "'"


# "numeric" is a type name in DuckDB
_COLUMNS = {
    "alpha2": "alpha2",
    "alpha3": "alpha3",
    "numeric": '"numeric"',
    "name": "name",
}


class DuckDBReference(ReferenceData):
    """
    Reference data implementation using DuckDB.

    One instance owns one connection; DuckDB connections are not meant to
    be shared across threads, so create one reference per thread.
    """

    def __init__(self):
        self._con = duckdb.connect(":memory:")
        self._create_tables()

    def _create_tables(self) -> None:
        """Create empty reference tables."""
        self._con.execute("""
            CREATE TABLE countries (
                alpha2 VARCHAR,
                alpha3 VARCHAR,
                "numeric" VARCHAR,
                name VARCHAR
            )
        """)
        self._con.execute("""
            CREATE TABLE subdivisions (
                code VARCHAR,
                name VARCHAR,
                parent VARCHAR
            )
        """)
        # side is 'former' (seq 0) or 'successor' (seq 0..n-1)
        self._con.execute("""
            CREATE TABLE country_changes (
                change_id INTEGER,
                side VARCHAR,
                seq INTEGER,
                alpha2 VARCHAR,
                alpha3 VARCHAR,
                "numeric" VARCHAR,
                name VARCHAR
            )
        """)

    def load_tables(self, source: TableReference) -> None:
        """
        Copy the tables of an in-memory reference into DuckDB.

        Args:
            source: Reference whose tables are copied
        """
        if source.countries:
            self._con.executemany(
                "INSERT INTO countries VALUES (?, ?, ?, ?)",
                [[c.alpha2, c.alpha3, c.numeric, c.name] for c in source.countries],
            )
        if source.subdivisions:
            self._con.executemany(
                "INSERT INTO subdivisions VALUES (?, ?, ?)",
                [[s.code, s.name, s.parent] for s in source.subdivisions],
            )

        rows = []
        for change_id, change in enumerate(source.changes):
            f = change.former
            rows.append([change_id, "former", 0, f.alpha2, f.alpha3, f.numeric, f.name])
            for seq, s in enumerate(change.successors):
                rows.append([change_id, "successor", seq, s.alpha2, s.alpha3, s.numeric, s.name])
        if rows:
            self._con.executemany(
                "INSERT INTO country_changes VALUES (?, ?, ?, ?, ?, ?, ?)", rows
            )

        logger.debug(
            "Loaded %d countries, %d subdivisions, %d change rows into DuckDB",
            len(source.countries), len(source.subdivisions), len(rows),
        )

    def load_csv(self, data_dir: Path) -> None:
        """
        Load reference tables from CSV exports.

        Args:
            data_dir: Directory containing the files written by export_csv()
        """
        paths = {
            name: data_dir / name
            for name in (COUNTRIES_CSV, SUBDIVISIONS_CSV, CHANGES_CSV)
        }
        for path in paths.values():
            if not path.exists():
                raise FileNotFoundError(f"Could not find {path.name} in {data_dir}")

        self._con.execute(f"""
            INSERT INTO countries
            SELECT alpha2, alpha3, "numeric", name
            FROM read_csv({_sql_string(paths[COUNTRIES_CSV])}, header = true, all_varchar = true)
        """)
        self._con.execute(f"""
            INSERT INTO subdivisions
            SELECT code, name, parent
            FROM read_csv({_sql_string(paths[SUBDIVISIONS_CSV])}, header = true, all_varchar = true)
        """)
        self._con.execute(f"""
            INSERT INTO country_changes
            SELECT CAST(change_id AS INTEGER), side, CAST(seq AS INTEGER),
                   alpha2, alpha3, "numeric", name
            FROM read_csv({_sql_string(paths[CHANGES_CSV])}, header = true, all_varchar = true)
        """)

    def export_csv(self, data_dir: Path) -> None:
        """
        Write the reference tables as CSV files.

        Args:
            data_dir: Existing directory to write into
        """
        for table, filename in (
            ("countries", COUNTRIES_CSV),
            ("subdivisions", SUBDIVISIONS_CSV),
            ("country_changes", CHANGES_CSV),
        ):
            self._con.execute(
                f"COPY (SELECT * FROM {table} ORDER BY rowid) "
                f"TO {_sql_string(data_dir / filename)} (HEADER, DELIMITER ',')"
            )

    def find_country(self, alpha2: str) -> Optional[CountryRecord]:
        result = self._con.execute("""
            SELECT alpha2, alpha3, "numeric", name
            FROM countries
            WHERE alpha2 = ?
            ORDER BY rowid
            LIMIT 1
        """, [alpha2]).fetchone()

        if result:
            return CountryRecord(*result)
        return None

    def find_subdivision(self, parent: str, name: str) -> Optional[SubdivisionRecord]:
        result = self._con.execute("""
            SELECT code, name, parent
            FROM subdivisions
            WHERE parent = ? AND name = ?
            ORDER BY rowid
            LIMIT 1
        """, [parent, name]).fetchone()

        if result:
            return SubdivisionRecord(*result)
        return None

    def successors(self, field: str, value: str) -> List[str]:
        column = _COLUMNS[check_field(field)]
        rows = self._con.execute(f"""
            SELECT s.{column}
            FROM country_changes f
            JOIN country_changes s
              ON s.change_id = f.change_id AND s.side = 'successor'
            WHERE f.side = 'former'
              AND f.{column} = ?
              AND s.{column} IS NOT NULL
            ORDER BY f.change_id, s.seq
        """, [value]).fetchall()

        if rows:
            return [row[0] for row in rows]
        return [value]

    def get_changes(self) -> List[CountryChange]:
        """Reassemble the change table into CountryChange records."""
        rows = self._con.execute("""
            SELECT change_id, side, alpha2, alpha3, "numeric", name
            FROM country_changes
            ORDER BY change_id, side, seq
        """).fetchall()

        formers: Dict[int, CountryRecord] = {}
        successors: Dict[int, List[CountryRecord]] = {}
        for change_id, side, *fields in rows:
            record = CountryRecord(*fields)
            if side == "former":
                formers[change_id] = record
            else:
                successors.setdefault(change_id, []).append(record)

        return [
            CountryChange(former, tuple(successors.get(change_id, ())))
            for change_id, former in sorted(formers.items())
        ]

    def get_country_count(self) -> int:
        """Get the number of countries loaded."""
        return self._con.execute("SELECT COUNT(*) FROM countries").fetchone()[0]

    def close(self) -> None:
        """Close the database connection."""
        if getattr(self, "_con", None):
            self._con.close()
            self._con = None

    def __del__(self):
        """Cleanup on garbage collection."""
        self.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_reference_from_tables(source: TableReference) -> DuckDBReference:
    """
    Convenience function to create a DuckDB reference from in-memory tables.

    Args:
        source: Reference whose tables are copied

    Returns:
        Loaded DuckDBReference instance
    """
    reference = DuckDBReference()
    reference.load_tables(source)
    return reference


def create_reference_from_csv(data_dir: Path) -> DuckDBReference:
    """
    Convenience function to create a DuckDB reference from CSV exports.

    Args:
        data_dir: Directory containing countries.csv, subdivisions.csv and
            country_changes.csv

    Returns:
        Loaded DuckDBReference instance
    """
    reference = DuckDBReference()
    try:
        reference.load_csv(Path(data_dir))
    except Exception:
        reference.close()
        raise
    return reference
