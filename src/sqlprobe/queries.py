"""Statement templates for every probe.

``{ph}`` marks a bound parameter and ``{for_update}`` the optional row-lock
clause; :meth:`sqlprobe.dialect.Dialect.render` fills both in.
"""

from __future__ import annotations

TABLE_A = "A"
TABLE_B = "B"
TABLES = (TABLE_A, TABLE_B)

UPDATED_DATA = "Updated"

DROP_IF_EXISTS = ("DROP TABLE IF EXISTS A", "DROP TABLE IF EXISTS B")
CREATE = (
    "CREATE TABLE A (id INT PRIMARY KEY, data TEXT)",
    "CREATE TABLE B (id INT PRIMARY KEY, data TEXT)",
)

SEED = (
    "INSERT INTO A (id, data) VALUES (1, 'hello_1')",
    "INSERT INTO A (id, data) VALUES (2, 'hello_2')",
    "INSERT INTO A VALUES (3, 'hello_3')",
    "INSERT INTO B VALUES (1, 'hello_1')",
)

INSERT_A = "INSERT INTO A (id, data) VALUES ({ph}, {ph})"
INSERT_B = "INSERT INTO B (id, data) VALUES ({ph}, {ph})"
INSERT_INTO = {TABLE_A: INSERT_A, TABLE_B: INSERT_B}

AGG_COUNT = "SELECT COUNT(*) FROM A"
AGG_COUNT_BY_ID = "SELECT COUNT(*) FROM A WHERE id = {ph}"

SEQ_SCAN = "SELECT id, data FROM A"
INDEX_SCAN = "SELECT id, data FROM A WHERE id = {ph}"
BITMAP_SCAN = "SELECT id, data FROM A WHERE id > {ph} AND id < {ph}"

UPDATE_BY_INDEX_SCAN = "UPDATE A SET data = {ph} WHERE id = {ph}"
UPDATE_BY_SEQ_SCAN = "UPDATE A SET data = {ph}"
DELETE_BY_INDEX_SCAN = "DELETE FROM A WHERE data = {ph}"

SELECT_FOR_UPDATE = "SELECT id, data FROM A WHERE id = {ph}{for_update}"
UNION = "SELECT id, data FROM A WHERE id = {ph} UNION SELECT id, data FROM B WHERE id = {ph}"

PING = "SELECT 1"


def row_data(table: str, row_id: int) -> str:
    """Payload written by the insert probes."""
    return f"{table} says hello world and id = {row_id}"
