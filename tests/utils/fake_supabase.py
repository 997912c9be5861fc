"""In-memory stand-in for the supabase client's query builder."""

from typing import Any, Callable, Optional
import itertools


class FakeResult:
    def __init__(self, data: list[dict]):
        self.data = data


class FakePostgrest:
    """Keeps the Authorization header across queries like the SDK session does."""

    def __init__(self, anon_key: str = "test-anon-key"):
        self.tokens: list[str] = []
        self.headers: dict[str, str] = {"Authorization": f"Bearer {anon_key}"}

    def auth(self, token: str) -> None:
        self.tokens.append(token)
        self.headers["Authorization"] = f"Bearer {token}"


def _ilike(value: Any, pattern: str) -> bool:
    if not isinstance(value, str):
        return False
    return pattern.strip("%").lower() in value.lower()


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload: Optional[dict] = None
        self.filters: list[Callable[[dict], bool]] = []
        self.order_by: Optional[tuple[str, bool]] = None
        self.window: Optional[tuple[int, int]] = None
        self.authorization = db.postgrest.headers.get("Authorization")

    def select(self, *columns: str) -> "FakeQuery":
        self.op = "select"
        return self

    def insert(self, row: dict) -> "FakeQuery":
        self.op = "insert"
        self.payload = row
        return self

    def update(self, row: dict) -> "FakeQuery":
        self.op = "update"
        self.payload = row
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def is_(self, column: str, value: str) -> "FakeQuery":
        assert value == "null"
        self.filters.append(lambda r: r.get(column) is None)
        return self

    def or_(self, expression: str) -> "FakeQuery":
        clauses = []
        for clause in expression.split(","):
            column, operator, pattern = clause.split(".", 2)
            assert operator == "ilike"
            clauses.append((column, pattern))
        self.filters.append(lambda r: any(_ilike(r.get(c), p) for c, p in clauses))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (column, desc)
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.window = (start, end + 1)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.window = (0, count)
        return self

    def _matching(self) -> list[dict]:
        return [r for r in self.db.tables.setdefault(self.table, []) if all(f(r) for f in self.filters)]

    def execute(self) -> FakeResult:
        self.db.calls.append((self.op, self.table, self.payload))
        self.db.authorizations.append(self.authorization)
        failure = self.db.failures.get((self.op, self.table))
        if failure is not None:
            raise failure

        if self.op == "insert":
            row = {"id": self.db.next_id(self.table), **self.payload}
            self.db.tables.setdefault(self.table, []).append(row)
            return FakeResult([dict(row)])

        if self.op == "update":
            updated = []
            for row in self._matching():
                row.update(self.payload)
                updated.append(dict(row))
            return FakeResult(updated)

        rows = self._matching()
        if self.order_by:
            column, desc = self.order_by
            rows = sorted(rows, key=lambda r: r.get(column) or 0, reverse=desc)
        if self.window:
            rows = rows[self.window[0]:self.window[1]]
        return FakeResult([dict(r) for r in rows])


class FakeSupabase:
    """Records every executed query as (operation, table, payload)."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str, Optional[dict]]] = []
        self.authorizations: list[Optional[str]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self.postgrest = FakePostgrest()
        self._ids = itertools.count(1)

    def next_id(self, table: str) -> str:
        return f"{table}-{next(self._ids)}"

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, *rows: dict) -> None:
        self.tables.setdefault(table, []).extend(dict(r) for r in rows)

    def calls_to(self, op: str, table: str) -> list[Optional[dict]]:
        return [payload for o, t, payload in self.calls if o == op and t == table]
