# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# SQLite storage for mindmap ideas, branches and positions.

"""
SQLite-backed :class:`~ideaweaver.mindmap.persistence.MindmapBackend`.

Tables:
- ideas: one row per idea, including its persisted x/y
- branches: branch name, parent link and colour slot
- node_positions: last written position of every node (branches included)

Position writes arrive from the persistence worker thread, so the
connection is shared across threads behind a lock.
"""

import os
import sqlite3
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

from .model import (
    ROOT_ID,
    BranchRecord,
    IdeaRecord,
    Positions,
    branch_name_from_id,
    branch_node_id,
)


class SqliteMindmapStore:
    """Database layer for one mindmap."""

    SCHEMA_VERSION = 1

    def __init__(self, db_path: Union[str, Path]):
        """Open (and create if needed) the database at ``db_path``."""
        self.db_path = str(db_path)
        if self.db_path != ':memory:':
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)

        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._init_schema()

    def _init_schema(self):
        """Create tables if they don't exist."""
        with self._lock:
            cursor = self.conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS ideas (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    idea_id TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL DEFAULT '',
                    parent_idea_id TEXT,
                    branch_label TEXT,
                    x REAL,
                    y REAL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS branches (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    parent_link TEXT,
                    color_slot INTEGER,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS node_positions (
                    node_id TEXT PRIMARY KEY,
                    x REAL NOT NULL,
                    y REAL NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_info (
                    version INTEGER NOT NULL
                )
            """)
            cursor.execute("SELECT COUNT(*) FROM schema_info")
            if cursor.fetchone()[0] == 0:
                cursor.execute("INSERT INTO schema_info (version) VALUES (?)",
                               (self.SCHEMA_VERSION,))

            self.conn.commit()

    def close(self):
        """Close database connection."""
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # =========================================================================
    # Ideas and branches
    # =========================================================================

    def add_idea(self, idea: IdeaRecord) -> None:
        """Insert or replace an idea, keeping its first insertion order."""
        with self._lock:
            self.conn.execute("""
                INSERT INTO ideas (idea_id, title, parent_idea_id, branch_label, x, y)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(idea_id) DO UPDATE SET
                    title = excluded.title,
                    parent_idea_id = excluded.parent_idea_id,
                    branch_label = excluded.branch_label,
                    x = excluded.x,
                    y = excluded.y
            """, (idea.id, idea.title, idea.parent_idea_id, idea.branch_label,
                  idea.x, idea.y))
            self.conn.commit()

    def remove_idea(self, idea_id: str) -> None:
        with self._lock:
            self.conn.execute("DELETE FROM ideas WHERE idea_id = ?", (idea_id,))
            self.conn.execute("DELETE FROM node_positions WHERE node_id = ?", (idea_id,))
            self.conn.commit()

    def load_ideas(self) -> List[IdeaRecord]:
        with self._lock:
            rows = self.conn.execute("SELECT * FROM ideas ORDER BY seq").fetchall()
        return [IdeaRecord(id=row['idea_id'], title=row['title'],
                           parent_idea_id=row['parent_idea_id'],
                           branch_label=row['branch_label'], x=row['x'], y=row['y'])
                for row in rows]

    def load_branches(self) -> List[BranchRecord]:
        with self._lock:
            rows = self.conn.execute("SELECT * FROM branches ORDER BY seq").fetchall()
        return [BranchRecord(name=row['name'], parent_link=row['parent_link'],
                             color_slot=row['color_slot'])
                for row in rows]

    def load_positions(self) -> Positions:
        """Last written position of every node."""
        with self._lock:
            rows = self.conn.execute("SELECT node_id, x, y FROM node_positions").fetchall()
        return {row['node_id']: (row['x'], row['y']) for row in rows}

    # =========================================================================
    # MindmapBackend
    # =========================================================================

    def update_position(self, node_id: str, x: float, y: float) -> None:
        with self._lock:
            self.conn.execute("""
                INSERT INTO node_positions (node_id, x, y) VALUES (?, ?, ?)
                ON CONFLICT(node_id) DO UPDATE SET
                    x = excluded.x, y = excluded.y, updated_at = CURRENT_TIMESTAMP
            """, (node_id, x, y))
            self.conn.execute("UPDATE ideas SET x = ?, y = ? WHERE idea_id = ?",
                              (x, y, node_id))
            self.conn.commit()

    def create_branch(self, name: str, parent_link: Optional[str],
                      color_slot: Optional[int]) -> None:
        with self._lock:
            self.conn.execute("""
                INSERT INTO branches (name, parent_link, color_slot) VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    parent_link = excluded.parent_link,
                    color_slot = excluded.color_slot
            """, (name, parent_link, color_slot))
            self.conn.commit()

    def rename_branch(self, old: str, new: str) -> None:
        old_id, new_id = branch_node_id(old), branch_node_id(new)
        with self._lock:
            cursor = self.conn.cursor()
            cursor.execute("UPDATE branches SET name = ? WHERE name = ?", (new, old))
            cursor.execute("UPDATE branches SET parent_link = ? WHERE parent_link = ?",
                           (new_id, old_id))
            cursor.execute("UPDATE ideas SET branch_label = ? WHERE TRIM(branch_label) = ?",
                           (new, old))
            cursor.execute("UPDATE node_positions SET node_id = ? WHERE node_id = ?",
                           (new_id, old_id))
            self.conn.commit()

    def delete_branch(self, name: str) -> None:
        """Delete a branch; ideas still labelled with it move to its parent branch."""
        with self._lock:
            cursor = self.conn.cursor()
            row = cursor.execute("SELECT parent_link FROM branches WHERE name = ?",
                                 (name,)).fetchone()
            parent_link = row['parent_link'] if row else None
            parent_name = branch_name_from_id(parent_link)
            if parent_link is not None and parent_name is None:
                idea = cursor.execute("SELECT branch_label FROM ideas WHERE idea_id = ?",
                                      (parent_link,)).fetchone()
                parent_name = idea['branch_label'] if idea else None
            cursor.execute("UPDATE ideas SET branch_label = ? WHERE TRIM(branch_label) = ?",
                           (parent_name, name))
            cursor.execute("DELETE FROM branches WHERE name = ?", (name,))
            cursor.execute("DELETE FROM node_positions WHERE node_id = ?",
                           (branch_node_id(name),))
            self.conn.commit()

    def update_parent(self, node_id: str, new_parent_id: Optional[str]) -> None:
        parent = None if new_parent_id in (None, ROOT_ID) else new_parent_id
        name = branch_name_from_id(node_id)
        with self._lock:
            cursor = self.conn.cursor()
            if name is not None:
                cursor.execute("UPDATE branches SET parent_link = ? WHERE name = ?",
                               (parent, name))
                if cursor.rowcount == 0:
                    cursor.execute("INSERT INTO branches (name, parent_link) VALUES (?, ?)",
                                   (name, parent))
            elif parent is None:
                cursor.execute("""
                    UPDATE ideas SET parent_idea_id = NULL, branch_label = NULL
                    WHERE idea_id = ?
                """, (node_id,))
            elif branch_name_from_id(parent) is not None:
                cursor.execute("""
                    UPDATE ideas SET parent_idea_id = NULL, branch_label = ?
                    WHERE idea_id = ?
                """, (branch_name_from_id(parent), node_id))
            else:
                row = cursor.execute("SELECT branch_label FROM ideas WHERE idea_id = ?",
                                     (parent,)).fetchone()
                label = row['branch_label'] if row else None
                cursor.execute("""
                    UPDATE ideas SET parent_idea_id = ?, branch_label = ?
                    WHERE idea_id = ?
                """, (parent, label, node_id))
            self.conn.commit()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            cursor = self.conn.cursor()
            return {
                table: cursor.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                for table in ('ideas', 'branches', 'node_positions')
            }
