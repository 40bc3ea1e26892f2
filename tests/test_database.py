import logging
from datetime import datetime

from lingoquiz import database
from lingoquiz.log_handler import SQLiteHandler
from lingoquiz.models import SessionRecord, Word, WordCategory, WrongAnswerRecord
from lingoquiz.models import TestVariant as Variant


def make_record(variant, correct, total, completed_at):
    return SessionRecord(
        variant=variant,
        total_questions=total,
        correct_count=correct,
        wrong_count=total - correct,
        duration_seconds=30.5,
        accuracy=correct / total * 100,
        completed_at=completed_at,
    )


def test_save_and_list_sessions(tmp_settings):
    database.init_db()
    first = make_record(Variant.MULTIPLE_CHOICE, 3, 5, datetime(2025, 12, 14, 9, 0))
    second = make_record(Variant.FILL_IN_BLANK, 4, 4, datetime(2025, 12, 15, 9, 0))

    first_id = database.save_session(first)
    second_id = database.save_session(second)
    assert second_id > first_id

    history = database.list_sessions()
    assert [r.id for r in history] == [second_id, first_id]
    assert history[0].variant == Variant.FILL_IN_BLANK
    assert history[0].completed_at == datetime(2025, 12, 15, 9, 0)
    assert history[1].accuracy == 60.0
    assert history[1].wrong_count == 2

    assert len(database.list_sessions(limit=1)) == 1


def test_wrong_answers_are_stored_with_the_session(tmp_settings):
    database.init_db()
    harbor = Word(id="w7", english="harbor", chinese="港口", category=WordCategory.CET6, difficulty=3)
    island = Word(id="w8", english="island", chinese="岛屿", phonetic="/ˈaɪlənd/")
    record = make_record(Variant.FILL_IN_BLANK, 1, 3, datetime(2025, 12, 16, 9, 0))
    record.wrong_answers = [
        WrongAnswerRecord(word=harbor, user_answer="harber", correct_answer="harbor"),
        WrongAnswerRecord(word=island, user_answer="", correct_answer="island"),
    ]
    database.save_session(record)
    database.save_session(make_record(Variant.LISTENING, 2, 2, datetime(2025, 12, 15, 9, 0)))

    latest, earlier = database.list_sessions()
    assert latest.wrong_answers == record.wrong_answers
    assert latest.wrong_answers[0].word.category == WordCategory.CET6
    assert latest.wrong_answers[1].user_answer == ""
    assert earlier.wrong_answers == []


def test_sqlite_handler_writes_log_rows(tmp_settings):
    database.init_db()
    logger = logging.getLogger("lingoquiz.tests.sqlite")
    logger.setLevel(logging.INFO)
    handler = SQLiteHandler()
    logger.addHandler(handler)
    try:
        logger.info("Session completed")
        logger.debug("not stored")
    finally:
        logger.removeHandler(handler)

    conn = database.get_db_connection()
    rows = conn.execute("SELECT level, logger, message FROM logs").fetchall()
    conn.close()
    assert [tuple(r) for r in rows] == [("INFO", "lingoquiz.tests.sqlite", "Session completed")]
