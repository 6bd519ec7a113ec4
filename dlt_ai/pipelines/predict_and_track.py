"""
Generate numbers, keep generation records and score confirmed selections
"""
from datetime import datetime, timedelta
from dlt_ai.config import DRAW_DAYS, logger
from dlt_ai.core.generator import generate_all_numbers
from dlt_ai.core.scoring import ScoreManager
from dlt_ai.core.tracker import DrawTracker, GenerationTracker


def get_next_draw_date(today=None):
    """Next draw date (Monday, Wednesday or Saturday)"""
    today = today or datetime.now()
    days_ahead = 0
    while True:
        days_ahead += 1
        next_date = today + timedelta(days=days_ahead)
        if next_date.weekday() in DRAW_DAYS:
            return next_date.strftime('%Y-%m-%d')


def generate_and_record(rng=None, draws=None, generations=None, scores=None):
    """
    Run the engine on the stored history and save the generation record.

    Returns the GenerationResult, or None while a confirmed selection is
    waiting for its draw.
    """
    draws = draws or DrawTracker()
    generations = generations or GenerationTracker()
    scores = scores or ScoreManager()

    if generations.has_confirmed():
        logger.warning("Numbers already confirmed; add the draw or cancel the confirmation first")
        return None

    result = generate_all_numbers(draws.list_draws(), scores.get_blocked(), rng=rng)
    if not result.insufficient_data:
        generations.save_generation(result.display_text)
    return result


def record_draw_and_score(issue_number, draw_date, front, back,
                          draws=None, generations=None, scores=None):
    """
    Store a new draw; if a selection is confirmed, score it against the
    draw. The confirmation stays until it is cancelled.

    Returns (draw_id, WinningResult or None).
    """
    draws = draws or DrawTracker()
    generations = generations or GenerationTracker()
    scores = scores or ScoreManager()

    draw_id = draws.add_draw(issue_number, draw_date, front, back)
    if draw_id is None:
        return None, None

    confirmed = generations.get_confirmed()
    if not confirmed:
        return draw_id, None

    return draw_id, scores.calculate_winning_scores(confirmed, draws.get_draw(draw_id))
