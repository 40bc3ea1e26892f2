import os
import sqlite3
from datetime import datetime
from typing import List

from .config import settings
from .models import SessionRecord, Word, WrongAnswerRecord


def get_db_connection():
    """Establishes a connection to the SQLite database."""
    db_path = os.path.join(settings.DB_DIR, settings.DB_FILE)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def create_log_table():
    """Creates the log table if it doesn't exist."""
    conn = get_db_connection()
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
                level TEXT,
                logger TEXT,
                message TEXT
            );
        """
        )
    conn.close()


def create_session_table():
    """Creates the table of completed practice sessions."""
    conn = get_db_connection()
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS study_sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                completed_at TEXT NOT NULL,
                variant TEXT NOT NULL,
                total_questions INTEGER NOT NULL,
                correct_count INTEGER NOT NULL,
                wrong_count INTEGER NOT NULL,
                duration_seconds REAL NOT NULL,
                accuracy REAL NOT NULL
            );
        """
        )
    conn.close()


def create_wrong_answer_table():
    """Creates the wrong-answer ledger kept for each stored session."""
    conn = get_db_connection()
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS session_wrong_answers (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id INTEGER NOT NULL REFERENCES study_sessions(id),
                position INTEGER NOT NULL,
                word_id TEXT NOT NULL,
                english TEXT NOT NULL,
                word TEXT NOT NULL,
                user_answer TEXT NOT NULL,
                correct_answer TEXT NOT NULL
            );
        """
        )
    conn.close()


def init_db():
    """Initializes the database and creates necessary tables."""
    if not os.path.exists(settings.DB_DIR):
        os.makedirs(settings.DB_DIR)
    create_log_table()
    create_session_table()
    create_wrong_answer_table()


def save_session(record: SessionRecord) -> int:
    """Stores a completed session with its wrong answers and returns its row id."""
    conn = get_db_connection()
    with conn:
        cursor = conn.execute(
            """
            INSERT INTO study_sessions (
                completed_at, variant, total_questions, correct_count,
                wrong_count, duration_seconds, accuracy
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.completed_at.isoformat(),
                record.variant.value,
                record.total_questions,
                record.correct_count,
                record.wrong_count,
                record.duration_seconds,
                record.accuracy,
            ),
        )
        row_id = cursor.lastrowid
        conn.executemany(
            """
            INSERT INTO session_wrong_answers (
                session_id, position, word_id, english, word,
                user_answer, correct_answer
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    row_id,
                    position,
                    wrong.word.id,
                    wrong.word.english,
                    wrong.word.model_dump_json(),
                    wrong.user_answer,
                    wrong.correct_answer,
                )
                for position, wrong in enumerate(record.wrong_answers)
            ],
        )
    conn.close()
    return row_id


def _wrong_answers_for(conn, session_id: int) -> List[WrongAnswerRecord]:
    rows = conn.execute(
        "SELECT * FROM session_wrong_answers WHERE session_id = ? ORDER BY position",
        (session_id,),
    ).fetchall()
    return [
        WrongAnswerRecord(
            word=Word.model_validate_json(row["word"]),
            user_answer=row["user_answer"],
            correct_answer=row["correct_answer"],
        )
        for row in rows
    ]


def list_sessions(limit: int = 50) -> List[SessionRecord]:
    """Most recently completed sessions first."""
    conn = get_db_connection()
    rows = conn.execute(
        "SELECT * FROM study_sessions ORDER BY completed_at DESC, id DESC LIMIT ?",
        (limit,),
    ).fetchall()
    records = [
        SessionRecord(
            id=row["id"],
            variant=row["variant"],
            total_questions=row["total_questions"],
            correct_count=row["correct_count"],
            wrong_count=row["wrong_count"],
            wrong_answers=_wrong_answers_for(conn, row["id"]),
            duration_seconds=row["duration_seconds"],
            accuracy=row["accuracy"],
            completed_at=datetime.fromisoformat(row["completed_at"]),
        )
        for row in rows
    ]
    conn.close()
    return records
