"""
Streamlit UI for DLT AI - v1.0
Draw history, 13-group generator and group scores
"""
import streamlit as st
import sys
import tempfile
from pathlib import Path
import pandas as pd

current_dir = Path(__file__).parent
project_root = current_dir.parent.parent
sys.path.insert(0, str(project_root))

from dlt_ai.core.db import init_db
from dlt_ai.core.tracker import DrawTracker, GenerationTracker, parse_front, parse_back
from dlt_ai.core.scoring import ScoreManager
from dlt_ai.core.formatter import parse_generation, FORMAT_VERSION
from dlt_ai.core.generator import GROUP_RULES
from dlt_ai.core.math_engine import expected_score_per_ticket, prize_text, uniformity_check
from dlt_ai.features.features import (
    draws_to_dataframe, import_history_csv,
    window_frequency_table, number_summary
)
from dlt_ai.pipelines.predict_and_track import (
    generate_and_record, record_draw_and_score, get_next_draw_date
)
from dlt_ai.config import (
    GAME_NAME, TOTAL_GROUPS, TOTAL_COMBINATIONS, SCORE_CHANGES, MISS_PENALTY, logger
)

init_db()

draws = DrawTracker()
generations = GenerationTracker()
scores = ScoreManager()

st.set_page_config(
    page_title="DLT AI - Super Lotto",
    page_icon="🎰",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        text-align: center;
        padding: 1.5rem 0;
        background: linear-gradient(90deg, #c9082a 0%, #17408b 100%);
        color: white;
        border-radius: 10px;
        margin-bottom: 2rem;
    }
    .front-ball, .back-ball {
        display: inline-block;
        color: white;
        font-weight: bold;
        padding: 0.4rem 0.7rem;
        border-radius: 50%;
        margin: 0.15rem;
        min-width: 40px;
        text-align: center;
    }
    .front-ball { background: #c9082a; }
    .back-ball { background: #17408b; }
    .honest-box {
        background: #f8d7da;
        padding: 1rem;
        border-radius: 8px;
        border-left: 4px solid #dc3545;
        margin: 0.5rem 0;
    }
</style>
""", unsafe_allow_html=True)

st.markdown(f"""
<div class="main-header">
    <h1>🎰 DLT AI - {GAME_NAME}</h1>
    <p style="font-size: 1.1rem; margin: 0;">13 number groups from your draw history</p>
</div>
""", unsafe_allow_html=True)


def balls_html(front, back):
    front_html = ''.join(f'<span class="front-ball">{n:02d}</span>' for n in front)
    back_html = ''.join(f'<span class="back-ball">{n:02d}</span>' for n in back)
    return f"{front_html} &nbsp;+&nbsp; {back_html}"


def show_groups(text):
    for group in parse_generation(text):
        col_label, col_balls = st.columns([1.5, 8.5])
        col_label.markdown(f"**Group {group.index}**")
        if group.blocked:
            col_balls.caption("[blocked] no numbers generated")
        else:
            col_balls.markdown(balls_html(group.front, group.back), unsafe_allow_html=True)


# ============================================================================
# SIDEBAR
# ============================================================================
with st.sidebar:
    st.markdown("### ⚙️ Navigation")
    page = st.radio("📄 Page", [
        "🎲 Generator",
        "📝 Draw History",
        "🏆 Group Scores",
        "📊 Statistics",
        "📁 Import / Export"
    ])

    st.markdown("---")
    st.markdown("### ⏰ Next Draw")
    st.info(get_next_draw_date())
    st.caption(f"Stored draws: {len(draws.list_draws())}")

    st.markdown("---")
    st.markdown("""
    <div class="honest-box">
    ⚠️ No method predicts a lottery draw. Scores are points, not money.
    </div>
    """, unsafe_allow_html=True)

# ============================================================================
# PAGE: GENERATOR
# ============================================================================
if page == "🎲 Generator":
    st.markdown("### 🎲 Generate Numbers")

    confirmed = generations.get_confirmed()
    if confirmed:
        st.success("✅ Numbers confirmed for the next draw. Add the draw result to score them.")
        show_groups(confirmed)
        if st.button("❌ Cancel confirmation"):
            generations.cancel_confirmation()
            st.session_state.pop('last_generation', None)
            st.rerun()
    else:
        if st.button("🎲 GENERATE", type="primary"):
            try:
                result = generate_and_record(draws=draws, generations=generations, scores=scores)
                if result is None:
                    st.warning("Numbers are already confirmed.")
                elif result.insufficient_data:
                    st.warning(result.display_text)
                else:
                    st.session_state.last_generation = result.display_text
            except Exception as e:
                logger.error(f"Error generating numbers: {e}")
                st.error(f"❌ Error: {str(e)}")

        last = st.session_state.get('last_generation')
        if last:
            st.markdown("---")
            show_groups(last)
            st.code(last, language=None)
            st.caption(f"Display format v{FORMAT_VERSION}")
            if st.button("✅ Confirm these numbers"):
                generations.confirm_numbers(last)
                st.rerun()

    with st.expander("📖 Group rules"):
        blocked = scores.get_blocked()
        for index in range(1, TOTAL_GROUPS + 1):
            flag = " *(blocked)*" if index in blocked else ""
            st.markdown(f"**Group {index}**{flag}: {GROUP_RULES[index]}")

    with st.expander("🕘 Generation records"):
        records = generations.list_generations()
        if not records:
            st.caption("No generation records yet")
        for created_at, text in reversed(records):
            st.markdown(f"**{created_at}**")
            st.code(text, language=None)

# ============================================================================
# PAGE: DRAW HISTORY
# ============================================================================
elif page == "📝 Draw History":
    st.markdown("### 📝 Add Draw Result")

    with st.form("add_draw"):
        col1, col2 = st.columns(2)
        issue = col1.text_input("Issue", value=draws.next_issue_number())
        draw_date = col2.text_input("Date (YYYY-MM-DD)", value="")
        front_text = st.text_input("Front numbers (5, e.g. 01 19 22 25 27)")
        back_text = st.text_input("Back numbers (2, e.g. 03 11)")
        submitted = st.form_submit_button("💾 Save draw")

    if submitted:
        try:
            front = parse_front(front_text)
            back = parse_back(back_text)
            draw_id, result = record_draw_and_score(issue, draw_date, front, back,
                                                    draws, generations, scores)
            if draw_id is None:
                st.error("❌ Could not save the draw")
            else:
                st.success(f"✅ Saved draw {issue}")
                if result is not None:
                    if result.success:
                        st.info(result.message)
                    else:
                        st.error(result.message)
        except ValueError as e:
            st.error(f"❌ {e}")

    st.markdown("---")
    st.markdown("### ✏️ Edit Draw")
    history = draws.list_draws()
    if history:
        editing = st.selectbox(
            "Draw", list(reversed(history)),
            format_func=lambda r: f"{r.issue_number} {r.draw_date} | {r.front_string()} + {r.back_string()}"
        )
        with st.form(f"edit_draw_{editing.draw_id}"):
            col1, col2 = st.columns(2)
            new_issue = col1.text_input("Issue", value=editing.issue_number)
            new_date = col2.text_input("Date (YYYY-MM-DD)", value=editing.draw_date)
            new_front = st.text_input("Front numbers", value=editing.front_string())
            new_back = st.text_input("Back numbers", value=editing.back_string())
            saved = st.form_submit_button("💾 Save changes")

        if saved:
            try:
                if draws.update_draw(editing.draw_id, new_issue, new_date,
                                     parse_front(new_front), parse_back(new_back)):
                    st.rerun()
                else:
                    st.error("❌ Could not update the draw")
            except ValueError as e:
                st.error(f"❌ {e}")

    st.markdown("---")
    st.markdown("### 📜 History")
    history = draws.list_draws()
    if not history:
        st.info("No draws stored yet")
    for record in reversed(history):
        col_info, col_balls, col_block, col_delete = st.columns([2, 6, 1, 1])
        label = f"**{record.issue_number}** {record.draw_date}"
        if record.blocked:
            label += " 🚫"
        col_info.markdown(label)
        col_balls.markdown(balls_html(record.front, record.back), unsafe_allow_html=True)
        if col_block.button("Unblock" if record.blocked else "Block", key=f"block_{record.draw_id}"):
            draws.toggle_blocked(record.draw_id)
            st.rerun()
        if col_delete.button("🗑️", key=f"delete_{record.draw_id}"):
            draws.delete_draw(record.draw_id)
            st.rerun()

# ============================================================================
# PAGE: GROUP SCORES
# ============================================================================
elif page == "🏆 Group Scores":
    st.markdown("### 🏆 Group Scores")

    group_scores = scores.get_scores()
    blocked = scores.get_blocked()
    st.metric("Total score", f"{sum(group_scores.values()):,}")

    rows = []
    for index in range(1, TOTAL_GROUPS + 1):
        best, count = scores.get_best_prize(index)
        rows.append({
            'Group': index,
            'Score': group_scores[index],
            'Best': f"{prize_text(best)} ({count}x)" if best else "none",
            'Wins': len(scores.get_prize_history(index)),
            'Blocked': index in blocked,
        })
    st.dataframe(pd.DataFrame(rows), hide_index=True)

    st.markdown("---")
    col_group, col_action = st.columns(2)
    with col_group:
        selected = st.selectbox("Group", list(range(1, TOTAL_GROUPS + 1)))
    with col_action:
        if selected in blocked:
            if st.button(f"Unblock group {selected}"):
                scores.unblock(selected)
                st.rerun()
        elif st.button(f"Block group {selected}"):
            scores.block(selected)
            st.rerun()

    history = scores.get_prize_history(selected)
    if history:
        st.dataframe(pd.DataFrame(
            [{'Issue': issue, 'Prize': prize_text(level)} for issue, level in history]
        ), hide_index=True)
    else:
        st.caption(f"Group {selected} has not won yet")

    st.markdown("---")
    if st.checkbox("I want to reset every score"):
        if st.button("♻️ Clear all scores", type="primary"):
            scores.clear_all_scores()
            st.rerun()

# ============================================================================
# PAGE: STATISTICS
# ============================================================================
elif page == "📊 Statistics":
    history = draws.list_draws()
    st.markdown("### 📊 Last 10 Draws")
    if not history:
        st.info("No draws stored yet")
    else:
        table = window_frequency_table(history)
        col_front, col_back = st.columns(2)
        with col_front:
            st.markdown("**Front**")
            front = table[table['zone'] == 'front'].set_index('number')['count']
            st.bar_chart(front.sort_index())
        with col_back:
            st.markdown("**Back**")
            back = table[table['zone'] == 'back'].set_index('number')['count']
            st.bar_chart(back.sort_index())

        st.markdown("### 🔢 Number Summary")
        st.dataframe(number_summary(history), hide_index=True)

        st.markdown("### 🔬 Uniformity Test")
        for zone in ("front", "back"):
            check = uniformity_check([r for r in history if not r.blocked], zone)
            if check:
                verdict = "consistent with uniform" if check['is_uniform'] else "deviates from uniform"
                st.write(f"{zone}: χ² = {check['statistic']:.2f}, "
                         f"p = {check['p_value']:.3f} ({verdict})")

    st.markdown("### 🧮 Prize Odds")
    ev = expected_score_per_ticket()
    rows = []
    for level, info in ev['breakdown'].items():
        rows.append({
            'Prize': prize_text(level),
            'Odds': info['odds'],
            'Score change': SCORE_CHANGES.get(level, MISS_PENALTY),
        })
    st.dataframe(pd.DataFrame(rows), hide_index=True)
    st.caption(f"{TOTAL_COMBINATIONS:,} combinations | "
               f"expected score per group: {ev['expected_score']:+.2f}")

# ============================================================================
# PAGE: IMPORT / EXPORT
# ============================================================================
elif page == "📁 Import / Export":
    st.markdown("### 📤 Export")
    history = draws.list_draws()
    if history:
        csv_text = draws_to_dataframe(history).drop(columns=['blocked']).to_csv(index=False)
        st.download_button("⬇️ Download CSV", csv_text, file_name="dlt_history.csv",
                           mime="text/csv")
    else:
        st.caption("Nothing to export")

    st.markdown("### 📥 Import")
    st.caption("Columns: issue,date,front1,front2,front3,front4,front5,back1,back2. "
               "Importing replaces the stored history.")
    uploaded = st.file_uploader("CSV file", type=["csv"])
    if uploaded is not None and st.button("Import", type="primary"):
        with tempfile.NamedTemporaryFile(suffix=".csv", delete=False) as tmp:
            tmp.write(uploaded.getvalue())
            tmp_path = tmp.name
        records, errors = import_history_csv(tmp_path)
        Path(tmp_path).unlink(missing_ok=True)

        if records:
            draws.replace_all(records)
            st.success(f"✅ Imported {len(records)} draws")
        else:
            st.error("❌ No valid draws found")
        for error in errors[:20]:
            st.warning(error)
