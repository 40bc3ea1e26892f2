from blinker import Namespace

_signals = Namespace()

# Fired when a new question becomes current (after start/next_question)
# Arguments: sender=session, index, total
question_changed = _signals.signal("question-changed")

# Fired once per question when it is resolved, by the user or by timeout
# Arguments: sender=session, index, correct, user_answer, correct_answer, timed_out
answer_resolved = _signals.signal("answer-resolved")

# Fired when the last question has been advanced past
# Arguments: sender=session, summary
session_completed = _signals.signal("session-completed")
