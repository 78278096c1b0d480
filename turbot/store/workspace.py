"""Workspace store backed by SQLite."""

import json
import sqlite3
import uuid
from datetime import datetime, timezone

from .errors import DuplicateEntryError, NotFoundError
from .paths import resolve_db_path
from .types import (
    Evidence,
    EvidenceType,
    Message,
    MessageRole,
    Node,
    Notebook,
    NotebookEntry,
    Output,
    OutputType,
    Persona,
    Thread,
    ThoughtProduct,
    ThoughtProductState,
    ThoughtProductType,
    Workspace,
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS workspaces (
  id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS threads (
  id TEXT PRIMARY KEY,
  workspace_id TEXT NOT NULL,
  title TEXT,
  created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS messages (
  id TEXT PRIMARY KEY,
  thread_id TEXT NOT NULL,
  role TEXT NOT NULL CHECK(role IN ('user','assistant','system')),
  content TEXT NOT NULL,
  model TEXT,
  created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS nodes (
  id TEXT PRIMARY KEY,
  thread_id TEXT NOT NULL,
  message_ids TEXT NOT NULL DEFAULT '[]',
  position INTEGER NOT NULL,
  summary TEXT,
  created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS thought_products (
  id TEXT PRIMARY KEY,
  workspace_id TEXT NOT NULL,
  source_node_id TEXT,
  type TEXT NOT NULL CHECK(type IN ('insight','idea','claim','assumption','decision','question','tension','principle')),
  content TEXT NOT NULL,
  state TEXT NOT NULL CHECK(state IN ('surfaced','claimed','supported','challenged','validated','superseded','abandoned')),
  confidence REAL NOT NULL DEFAULT 0.5,
  influenced_by TEXT NOT NULL DEFAULT '[]',
  influences TEXT NOT NULL DEFAULT '[]',
  superseded_by TEXT,
  citation_count INTEGER NOT NULL DEFAULT 0,
  created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS evidence (
  id TEXT PRIMARY KEY,
  workspace_id TEXT NOT NULL,
  thought_product_id TEXT NOT NULL,
  type TEXT NOT NULL CHECK(type IN ('quote','observation','data')),
  content TEXT NOT NULL,
  source TEXT,
  supports INTEGER NOT NULL,
  created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS personas (
  id TEXT PRIMARY KEY,
  workspace_id TEXT NOT NULL,
  source_node_id TEXT,
  name TEXT NOT NULL,
  traits TEXT NOT NULL DEFAULT '{}',
  voice TEXT,
  created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS outputs (
  id TEXT PRIMARY KEY,
  workspace_id TEXT NOT NULL,
  type TEXT NOT NULL,
  content TEXT NOT NULL DEFAULT '{}',
  depends_on TEXT NOT NULL DEFAULT '[]',
  establishes TEXT NOT NULL DEFAULT '[]',
  created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS notebooks (
  id TEXT PRIMARY KEY,
  workspace_id TEXT NOT NULL,
  name TEXT NOT NULL,
  description TEXT,
  notes TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS notebook_entries (
  notebook_id TEXT NOT NULL,
  thought_product_id TEXT NOT NULL,
  position INTEGER NOT NULL,
  annotation TEXT,
  added_at TEXT NOT NULL,
  PRIMARY KEY (notebook_id, thought_product_id)
);

CREATE INDEX IF NOT EXISTS idx_tp_workspace ON thought_products(workspace_id);
CREATE INDEX IF NOT EXISTS idx_tp_state ON thought_products(state);
CREATE INDEX IF NOT EXISTS idx_threads_workspace ON threads(workspace_id);
CREATE INDEX IF NOT EXISTS idx_messages_thread ON messages(thread_id);
CREATE INDEX IF NOT EXISTS idx_evidence_tp ON evidence(thought_product_id);
CREATE INDEX IF NOT EXISTS idx_personas_workspace ON personas(workspace_id);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class WorkspaceStore:
    """Workspace store backed by SQLite."""

    def __init__(self, db_path: str | None = None) -> None:
        self.db = sqlite3.connect(db_path or resolve_db_path())
        self.db.row_factory = sqlite3.Row
        self.db.execute("PRAGMA journal_mode = WAL")
        self.db.executescript(SCHEMA)

    def __enter__(self) -> "WorkspaceStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- workspaces ---------------------------------------------------------

    def create_workspace(self, name: str) -> Workspace:
        workspace = Workspace(id=str(uuid.uuid4()), name=name, created_at=_now())
        self.db.execute(
            "INSERT INTO workspaces (id, name, created_at) VALUES (?, ?, ?)",
            (workspace.id, workspace.name, workspace.created_at),
        )
        self.db.commit()
        return workspace

    def list_workspaces(self) -> list[Workspace]:
        rows = self.db.execute(
            "SELECT * FROM workspaces ORDER BY created_at DESC"
        ).fetchall()
        return [Workspace(id=r["id"], name=r["name"], created_at=r["created_at"]) for r in rows]

    def get_workspace(self, workspace_id: str) -> Workspace | None:
        row = self.db.execute(
            "SELECT * FROM workspaces WHERE id = ?", (workspace_id,)
        ).fetchone()
        if not row:
            return None
        return Workspace(id=row["id"], name=row["name"], created_at=row["created_at"])

    # -- threads, messages, nodes --------------------------------------------

    def create_thread(self, workspace_id: str, title: str | None = None) -> Thread:
        thread = Thread(
            id=str(uuid.uuid4()),
            workspace_id=workspace_id,
            title=title,
            created_at=_now(),
        )
        self.db.execute(
            "INSERT INTO threads (id, workspace_id, title, created_at) VALUES (?, ?, ?, ?)",
            (thread.id, thread.workspace_id, thread.title, thread.created_at),
        )
        self.db.commit()
        return thread

    def get_thread(self, thread_id: str) -> Thread | None:
        row = self.db.execute("SELECT * FROM threads WHERE id = ?", (thread_id,)).fetchone()
        if not row:
            return None
        return Thread(
            id=row["id"],
            workspace_id=row["workspace_id"],
            title=row["title"],
            created_at=row["created_at"],
        )

    def add_message(
        self,
        thread_id: str,
        role: MessageRole,
        content: str,
        model: str | None = None,
    ) -> Message:
        message = Message(
            id=str(uuid.uuid4()),
            thread_id=thread_id,
            role=role,
            content=content,
            model=model,
            created_at=_now(),
        )
        self.db.execute(
            "INSERT INTO messages (id, thread_id, role, content, model, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            (message.id, thread_id, role, content, model, message.created_at),
        )
        self.db.commit()
        return message

    def list_messages(self, thread_id: str) -> list[Message]:
        """Messages of a thread, oldest first."""
        rows = self.db.execute(
            "SELECT * FROM messages WHERE thread_id = ? ORDER BY created_at ASC, rowid ASC",
            (thread_id,),
        ).fetchall()
        return [_row_to_message(r) for r in rows]

    def create_node(self, thread_id: str, message_ids: list[str], position: int) -> Node:
        node = Node(
            id=str(uuid.uuid4()),
            thread_id=thread_id,
            message_ids=message_ids,
            position=position,
            summary=None,
            created_at=_now(),
        )
        self.db.execute(
            "INSERT INTO nodes (id, thread_id, message_ids, position, created_at) VALUES (?, ?, ?, ?, ?)",
            (node.id, thread_id, json.dumps(message_ids), position, node.created_at),
        )
        self.db.commit()
        return node

    def set_node_summary(self, node_id: str, summary: str) -> None:
        self.db.execute("UPDATE nodes SET summary = ? WHERE id = ?", (summary, node_id))
        self.db.commit()

    def get_node(self, node_id: str) -> Node | None:
        row = self.db.execute("SELECT * FROM nodes WHERE id = ?", (node_id,)).fetchone()
        if not row:
            return None
        return Node(
            id=row["id"],
            thread_id=row["thread_id"],
            message_ids=json.loads(row["message_ids"]),
            position=row["position"],
            summary=row["summary"],
            created_at=row["created_at"],
        )

    # -- thought products ----------------------------------------------------

    def insert_thought_product(
        self,
        workspace_id: str,
        type_: ThoughtProductType,
        content: str,
        source_node_id: str | None = None,
        state: ThoughtProductState = "surfaced",
        confidence: float = 0.5,
    ) -> ThoughtProduct:
        """Insert a new thought product, returns it with generated id/timestamp."""
        tp = ThoughtProduct(
            id=str(uuid.uuid4()),
            workspace_id=workspace_id,
            type=type_,
            content=content,
            state=state,
            confidence=_clamp(confidence),
            citation_count=0,
            created_at=_now(),
            source_node_id=source_node_id,
        )
        self.db.execute(
            """
            INSERT INTO thought_products (id, workspace_id, source_node_id, type, content, state, confidence, citation_count, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)
            """,
            (
                tp.id,
                workspace_id,
                source_node_id,
                type_,
                content,
                state,
                tp.confidence,
                tp.created_at,
            ),
        )
        self.db.commit()
        return tp

    def get_thought_product(self, tp_id: str) -> ThoughtProduct | None:
        row = self.db.execute(
            "SELECT * FROM thought_products WHERE id = ?", (tp_id,)
        ).fetchone()
        return _row_to_thought_product(row) if row else None

    def get_thought_products(self, tp_ids: list[str]) -> list[ThoughtProduct]:
        if not tp_ids:
            return []
        placeholders = ", ".join("?" for _ in tp_ids)
        rows = self.db.execute(
            f"SELECT * FROM thought_products WHERE id IN ({placeholders})",
            tp_ids,
        ).fetchall()
        return [_row_to_thought_product(r) for r in rows]

    def list_thought_products(
        self,
        workspace_id: str,
        type_: ThoughtProductType | None = None,
        state: ThoughtProductState | None = None,
        limit: int | None = None,
    ) -> list[ThoughtProduct]:
        """List thought products newest first, optionally filtered."""
        conditions = ["workspace_id = ?"]
        params: list[object] = [workspace_id]

        if type_:
            conditions.append("type = ?")
            params.append(type_)
        if state:
            conditions.append("state = ?")
            params.append(state)

        sql = f"SELECT * FROM thought_products WHERE {' AND '.join(conditions)} ORDER BY created_at DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        rows = self.db.execute(sql, params).fetchall()
        return [_row_to_thought_product(r) for r in rows]

    def list_context_thought_products(self, workspace_id: str) -> list[ThoughtProduct]:
        """All non-abandoned thought products of a workspace (context assembly input)."""
        rows = self.db.execute(
            "SELECT * FROM thought_products WHERE workspace_id = ? AND state != 'abandoned'",
            (workspace_id,),
        ).fetchall()
        return [_row_to_thought_product(r) for r in rows]

    def list_grounding_thought_products(
        self, workspace_id: str, limit: int = 20
    ) -> list[ThoughtProduct]:
        """Most confident surfaced/supported/validated thought products."""
        rows = self.db.execute(
            """
            SELECT * FROM thought_products
            WHERE workspace_id = ? AND state IN ('surfaced', 'validated', 'supported')
            ORDER BY confidence DESC, created_at DESC
            LIMIT ?
            """,
            (workspace_id, limit),
        ).fetchall()
        return [_row_to_thought_product(r) for r in rows]

    def search_thought_products(
        self, workspace_id: str, query: str, limit: int = 10
    ) -> list[ThoughtProduct]:
        """Case-insensitive substring search, abandoned excluded."""
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        rows = self.db.execute(
            """
            SELECT * FROM thought_products
            WHERE workspace_id = ? AND state != 'abandoned'
              AND lower(content) LIKE lower(?) ESCAPE '\\'
            ORDER BY created_at DESC
            LIMIT ?
            """,
            (workspace_id, f"%{escaped}%", limit),
        ).fetchall()
        return [_row_to_thought_product(r) for r in rows]

    def update_state(
        self,
        tp_id: str,
        state: ThoughtProductState,
        confidence: float | None = None,
    ) -> ThoughtProduct:
        """Update lifecycle state and, optionally, confidence (clamped to [0, 1])."""
        if confidence is None:
            cursor = self.db.execute(
                "UPDATE thought_products SET state = ? WHERE id = ?", (state, tp_id)
            )
        else:
            cursor = self.db.execute(
                "UPDATE thought_products SET state = ?, confidence = ? WHERE id = ?",
                (state, _clamp(confidence), tp_id),
            )
        self.db.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Thought product", tp_id)
        tp = self.get_thought_product(tp_id)
        if not tp:
            raise NotFoundError("Thought product", tp_id)
        return tp

    def increment_citation_count(self, tp_id: str) -> None:
        """Record that another artifact references this thought product."""
        self.db.execute(
            "UPDATE thought_products SET citation_count = citation_count + 1 WHERE id = ?",
            (tp_id,),
        )
        self.db.commit()

    def link(self, from_id: str, to_id: str) -> tuple[ThoughtProduct, ThoughtProduct]:
        """Record that from_id influences to_id; both become cited."""
        from_tp = self.get_thought_product(from_id)
        if not from_tp:
            raise NotFoundError("Source thought product", from_id)
        to_tp = self.get_thought_product(to_id)
        if not to_tp:
            raise NotFoundError("Target thought product", to_id)

        if to_id not in from_tp.influences:
            from_tp.influences.append(to_id)
        if from_id not in to_tp.influenced_by:
            to_tp.influenced_by.append(from_id)

        self.db.execute(
            "UPDATE thought_products SET influences = ?, citation_count = citation_count + 1 WHERE id = ?",
            (json.dumps(from_tp.influences), from_id),
        )
        self.db.execute(
            "UPDATE thought_products SET influenced_by = ?, citation_count = citation_count + 1 WHERE id = ?",
            (json.dumps(to_tp.influenced_by), to_id),
        )
        self.db.commit()
        return from_tp, to_tp

    # -- evidence -------------------------------------------------------------

    def add_evidence(
        self,
        workspace_id: str,
        tp_id: str,
        type_: EvidenceType,
        content: str,
        supports: bool,
        source: str | None = None,
    ) -> Evidence:
        """Attach evidence to a thought product, which counts as a citation."""
        if not self.get_thought_product(tp_id):
            raise NotFoundError("Thought product", tp_id)

        evidence = Evidence(
            id=str(uuid.uuid4()),
            workspace_id=workspace_id,
            thought_product_id=tp_id,
            type=type_,
            content=content,
            source=source,
            supports=supports,
            created_at=_now(),
        )
        self.db.execute(
            """
            INSERT INTO evidence (id, workspace_id, thought_product_id, type, content, source, supports, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                evidence.id,
                workspace_id,
                tp_id,
                type_,
                content,
                source,
                int(supports),
                evidence.created_at,
            ),
        )
        self.db.commit()
        self.increment_citation_count(tp_id)
        return evidence

    def list_evidence(
        self,
        workspace_id: str | None = None,
        tp_id: str | None = None,
    ) -> list[Evidence]:
        conditions: list[str] = []
        params: list[object] = []

        if workspace_id:
            conditions.append("workspace_id = ?")
            params.append(workspace_id)
        if tp_id:
            conditions.append("thought_product_id = ?")
            params.append(tp_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = self.db.execute(
            f"SELECT * FROM evidence {where} ORDER BY created_at ASC", params
        ).fetchall()
        return [_row_to_evidence(r) for r in rows]

    # -- personas -------------------------------------------------------------

    def create_persona(
        self,
        workspace_id: str,
        name: str,
        traits: dict[str, str],
        voice: str | None = None,
    ) -> Persona:
        persona = Persona(
            id=str(uuid.uuid4()),
            workspace_id=workspace_id,
            name=name,
            traits=traits,
            voice=voice,
            created_at=_now(),
        )
        self.db.execute(
            "INSERT INTO personas (id, workspace_id, name, traits, voice, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            (persona.id, workspace_id, name, json.dumps(traits), voice, persona.created_at),
        )
        self.db.commit()
        return persona

    def get_persona(self, persona_id: str) -> Persona | None:
        row = self.db.execute("SELECT * FROM personas WHERE id = ?", (persona_id,)).fetchone()
        return _row_to_persona(row) if row else None

    def find_persona_by_name(self, workspace_id: str, name: str) -> Persona | None:
        row = self.db.execute(
            "SELECT * FROM personas WHERE workspace_id = ? AND name = ? LIMIT 1",
            (workspace_id, name),
        ).fetchone()
        return _row_to_persona(row) if row else None

    def list_personas(self, workspace_id: str, limit: int | None = None) -> list[Persona]:
        """Personas newest first."""
        sql = "SELECT * FROM personas WHERE workspace_id = ? ORDER BY created_at DESC, rowid DESC"
        params: list[object] = [workspace_id]
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        rows = self.db.execute(sql, params).fetchall()
        return [_row_to_persona(r) for r in rows]

    # -- outputs --------------------------------------------------------------

    def insert_output(
        self,
        workspace_id: str,
        type_: OutputType,
        content: dict,
        depends_on: list[str],
    ) -> Output:
        """Store a generated output; every dependency gets cited."""
        output = Output(
            id=str(uuid.uuid4()),
            workspace_id=workspace_id,
            type=type_,
            content=content,
            depends_on=depends_on,
            establishes=[],
            created_at=_now(),
        )
        self.db.execute(
            """
            INSERT INTO outputs (id, workspace_id, type, content, depends_on, establishes, created_at)
            VALUES (?, ?, ?, ?, ?, '[]', ?)
            """,
            (
                output.id,
                workspace_id,
                type_,
                json.dumps(content),
                json.dumps(depends_on),
                output.created_at,
            ),
        )
        self.db.commit()
        for tp_id in depends_on:
            self.increment_citation_count(tp_id)
        return output

    def list_outputs(self, workspace_id: str, type_: OutputType | None = None) -> list[Output]:
        sql = "SELECT * FROM outputs WHERE workspace_id = ?"
        params: list[object] = [workspace_id]
        if type_:
            sql += " AND type = ?"
            params.append(type_)
        sql += " ORDER BY created_at DESC"
        rows = self.db.execute(sql, params).fetchall()
        return [_row_to_output(r) for r in rows]

    # -- notebooks ------------------------------------------------------------

    def create_notebook(
        self, workspace_id: str, name: str, description: str | None = None
    ) -> Notebook:
        now = _now()
        notebook = Notebook(
            id=str(uuid.uuid4()),
            workspace_id=workspace_id,
            name=name,
            description=description,
            notes=None,
            created_at=now,
            updated_at=now,
        )
        self.db.execute(
            """
            INSERT INTO notebooks (id, workspace_id, name, description, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (notebook.id, workspace_id, name, description, now, now),
        )
        self.db.commit()
        return notebook

    def get_notebook(self, notebook_id: str) -> Notebook | None:
        row = self.db.execute("SELECT * FROM notebooks WHERE id = ?", (notebook_id,)).fetchone()
        return _row_to_notebook(row) if row else None

    def list_notebooks(self, workspace_id: str) -> list[tuple[Notebook, int]]:
        """Notebooks most recently updated first, each with its entry count."""
        rows = self.db.execute(
            """
            SELECT n.*, COUNT(e.thought_product_id) AS entry_count
            FROM notebooks n
            LEFT JOIN notebook_entries e ON e.notebook_id = n.id
            WHERE n.workspace_id = ?
            GROUP BY n.id
            ORDER BY n.updated_at DESC
            """,
            (workspace_id,),
        ).fetchall()
        return [(_row_to_notebook(r), r["entry_count"]) for r in rows]

    def add_notebook_entry(
        self, notebook_id: str, tp_id: str, annotation: str | None = None
    ) -> NotebookEntry:
        """Append a thought product to a notebook; the thought product gets cited."""
        row = self.db.execute(
            "SELECT MAX(position) AS max_pos FROM notebook_entries WHERE notebook_id = ?",
            (notebook_id,),
        ).fetchone()
        position = 0 if row["max_pos"] is None else row["max_pos"] + 1

        entry = NotebookEntry(
            notebook_id=notebook_id,
            thought_product_id=tp_id,
            position=position,
            annotation=annotation,
            added_at=_now(),
        )
        try:
            self.db.execute(
                """
                INSERT INTO notebook_entries (notebook_id, thought_product_id, position, annotation, added_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (notebook_id, tp_id, position, annotation, entry.added_at),
            )
        except sqlite3.IntegrityError as err:
            self.db.rollback()
            raise DuplicateEntryError(
                f"Thought product {tp_id} is already in notebook {notebook_id}"
            ) from err
        self.db.execute(
            "UPDATE notebooks SET updated_at = ? WHERE id = ?", (entry.added_at, notebook_id)
        )
        self.db.commit()
        self.increment_citation_count(tp_id)
        return entry

    def list_notebook_entries(self, notebook_id: str) -> list[NotebookEntry]:
        rows = self.db.execute(
            "SELECT * FROM notebook_entries WHERE notebook_id = ? ORDER BY position ASC",
            (notebook_id,),
        ).fetchall()
        return [
            NotebookEntry(
                notebook_id=r["notebook_id"],
                thought_product_id=r["thought_product_id"],
                position=r["position"],
                annotation=r["annotation"],
                added_at=r["added_at"],
            )
            for r in rows
        ]

    def remove_notebook_entry(self, notebook_id: str, tp_id: str) -> bool:
        cursor = self.db.execute(
            "DELETE FROM notebook_entries WHERE notebook_id = ? AND thought_product_id = ?",
            (notebook_id, tp_id),
        )
        self.db.commit()
        return cursor.rowcount > 0

    def update_notebook_notes(self, notebook_id: str, notes: str) -> Notebook:
        cursor = self.db.execute(
            "UPDATE notebooks SET notes = ?, updated_at = ? WHERE id = ?",
            (notes, _now(), notebook_id),
        )
        self.db.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Notebook", notebook_id)
        notebook = self.get_notebook(notebook_id)
        if not notebook:
            raise NotFoundError("Notebook", notebook_id)
        return notebook

    # -- context reads ----------------------------------------------------------

    def recent_assistant_messages(self, workspace_id: str, limit: int = 5) -> list[str]:
        """Most recent assistant message texts across the workspace's threads."""
        rows = self.db.execute(
            """
            SELECT m.content FROM messages m
            JOIN threads t ON t.id = m.thread_id
            WHERE t.workspace_id = ? AND m.role = 'assistant'
            ORDER BY m.created_at DESC, m.rowid DESC
            LIMIT ?
            """,
            (workspace_id, limit),
        ).fetchall()
        return [r["content"] for r in rows]

    def stats(self, workspace_id: str) -> dict:
        """Get aggregate statistics for a workspace."""
        by_type: dict[str, int] = {}
        for row in self.db.execute(
            "SELECT type, COUNT(*) as cnt FROM thought_products WHERE workspace_id = ? GROUP BY type ORDER BY type",
            (workspace_id,),
        ):
            by_type[row["type"]] = row["cnt"]

        by_state: dict[str, int] = {}
        for row in self.db.execute(
            "SELECT state, COUNT(*) as cnt FROM thought_products WHERE workspace_id = ? GROUP BY state ORDER BY state",
            (workspace_id,),
        ):
            by_state[row["state"]] = row["cnt"]

        return {"total": sum(by_type.values()), "byType": by_type, "byState": by_state}

    def close(self) -> None:
        """Close the database connection."""
        self.db.close()


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _row_to_message(row: sqlite3.Row) -> Message:
    return Message(
        id=row["id"],
        thread_id=row["thread_id"],
        role=row["role"],
        content=row["content"],
        model=row["model"],
        created_at=row["created_at"],
    )


def _row_to_thought_product(row: sqlite3.Row) -> ThoughtProduct:
    return ThoughtProduct(
        id=row["id"],
        workspace_id=row["workspace_id"],
        type=row["type"],
        content=row["content"],
        state=row["state"],
        confidence=row["confidence"],
        citation_count=row["citation_count"],
        created_at=row["created_at"],
        source_node_id=row["source_node_id"],
        influenced_by=json.loads(row["influenced_by"]),
        influences=json.loads(row["influences"]),
        superseded_by=row["superseded_by"],
    )


def _row_to_evidence(row: sqlite3.Row) -> Evidence:
    return Evidence(
        id=row["id"],
        workspace_id=row["workspace_id"],
        thought_product_id=row["thought_product_id"],
        type=row["type"],
        content=row["content"],
        source=row["source"],
        supports=bool(row["supports"]),
        created_at=row["created_at"],
    )


def _row_to_persona(row: sqlite3.Row) -> Persona:
    return Persona(
        id=row["id"],
        workspace_id=row["workspace_id"],
        name=row["name"],
        traits=json.loads(row["traits"]),
        voice=row["voice"],
        created_at=row["created_at"],
    )


def _row_to_output(row: sqlite3.Row) -> Output:
    return Output(
        id=row["id"],
        workspace_id=row["workspace_id"],
        type=row["type"],
        content=json.loads(row["content"]),
        depends_on=json.loads(row["depends_on"]),
        establishes=json.loads(row["establishes"]),
        created_at=row["created_at"],
    )


def _row_to_notebook(row: sqlite3.Row) -> Notebook:
    return Notebook(
        id=row["id"],
        workspace_id=row["workspace_id"],
        name=row["name"],
        description=row["description"],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
