import streamlit as st
import pandas as pd
import numpy as np
import altair as alt
import plotly.graph_objects as go

from pinhigh import benchmarks, calibration, clubs, dispersion, putting, settings, stats
from pinhigh import geodesy as geo
from pinhigh.conditions import (
    Conditions,
    adjust_yardage_for_conditions,
    wind_direction_label,
    wind_effect_description,
)
from pinhigh.course import demo_course
from pinhigh.errors import PinHighError
from pinhigh.geometry import Circle, Polygon, bounding_circle
from pinhigh.simulation import course_options, simulate_hole, simulate_rounds
from pinhigh.skill import NAMED_TIERS, parse_skill

# ------------------------------------------------------------
# Page config
# ------------------------------------------------------------
st.set_page_config(
    page_title="PinHigh Simulator",
    page_icon="⛳",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ------------------------------------------------------------
# Session state defaults
# ------------------------------------------------------------

CFG = settings.load_settings()

DEFAULTS = {
    "skill": "10",                # handicap or tier name
    "hole": 1,
    "seed": 0,
    "runs": 20,
    "wind_mph": 0.0,
    "wind_from": 0.0,
    "slope_deg": 0.0,
    "temp_f": 75.0,
    "calibration_loaded": False,
    "last_outcome": None,
}


def init_session_state():
    for k, v in DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = v
    if not st.session_state.calibration_loaded:
        dispersion.set_calibration(settings.load_calibration(CFG["calibration_path"]))
        st.session_state.calibration_loaded = True


init_session_state()


@st.cache_resource
def _course():
    return demo_course()


COURSE = _course()

st.markdown(
    """
    <style>
    .stApp { background-color: #05070b; }
    h1, h2, h3, h4, h5, h6 { color: #f5f5f5; }
    .stMarkdown, .stText, .stCaption, label { color: #e6e6e6 !important; }
    </style>
    """,
    unsafe_allow_html=True,
)

# ------------------------------------------------------------
# Sidebar controls
# ------------------------------------------------------------

with st.sidebar:
    st.header("Settings")

    st.markdown("**Golfer**")
    skill_mode = st.radio("Skill type", ["Handicap", "Named tier"], index=0)
    if skill_mode == "Handicap":
        hcp = st.slider("Handicap (negative = plus)", -5.0, 25.0, 10.0, 0.5)
        st.session_state.skill = str(hcp)
    else:
        st.session_state.skill = st.selectbox("Tier", list(NAMED_TIERS), index=0)

    st.markdown("---")
    st.markdown("**Conditions**")
    st.session_state.wind_mph = st.slider("Wind (mph)", 0.0, 30.0, float(st.session_state.wind_mph), 1.0)
    st.session_state.wind_from = st.slider("Wind from (deg)", 0.0, 359.0, float(st.session_state.wind_from), 1.0)
    st.caption(f"Wind from {wind_direction_label(st.session_state.wind_from)}")
    st.session_state.slope_deg = st.slider("Slope (deg, uphill +)", -5.0, 5.0, float(st.session_state.slope_deg), 0.5)
    st.session_state.temp_f = st.slider("Temperature (°F)", 30.0, 105.0, float(st.session_state.temp_f), 1.0)

    st.markdown("---")
    cal = dispersion.get_calibration()
    st.markdown("**Calibration**")
    st.caption(f"dispersion × {cal.dispersion_scale:.2f} • chip × {cal.chip_multiplier_scale:.2f}")
    if st.button("Reset to identity"):
        dispersion.reset_calibration()


def current_skill():
    try:
        return parse_skill(st.session_state.skill)
    except PinHighError as exc:
        st.error(str(exc))
        st.stop()


def current_conditions():
    if not (st.session_state.wind_mph or st.session_state.slope_deg or st.session_state.temp_f != 75.0):
        return None
    return Conditions(
        wind_speed_mph=st.session_state.wind_mph,
        wind_direction_deg=st.session_state.wind_from,
        slope_deg=st.session_state.slope_deg,
        temperature_f=st.session_state.temp_f,
    )


# ------------------------------------------------------------
# Chart helpers
# ------------------------------------------------------------

def _region_frame(origin, region, name, steps=36):
    """Outline of a region in local meters."""
    if isinstance(region, Circle):
        pts = [geo.direct(region.center, b, region.radius_m) for b in np.linspace(0, 360, steps)]
    else:
        pts = list(region.vertices) + [region.vertices[0]]
    rows = []
    for i, p in enumerate(pts):
        x, y = geo.to_local_xy(origin, p)
        rows.append({"x": x, "y": y, "order": i, "feature": name})
    return rows


def draw_hole(hole, result):
    origin = hole.tee
    g = hole.geometry
    feature_rows = []
    for idx, (name, regions) in enumerate([
        ("fairway", g.fairways),
        ("bunker", g.bunkers),
        ("water", g.water),
        ("green", [g.green]),
        ("tree", [t.canopy for t in g.trees]),
    ]):
        for j, region in enumerate(regions):
            for row in _region_frame(origin, region, name):
                row["shape"] = f"{name}-{j}"
                feature_rows.append(row)
    features = pd.DataFrame(feature_rows)
    shots = stats.shots_frame(result, origin=origin)

    palette = alt.Scale(
        domain=["fairway", "bunker", "water", "green", "tree"],
        range=["#2e7d32", "#e0c080", "#1e88e5", "#66bb6a", "#1b5e20"],
    )
    outlines = (
        alt.Chart(features)
        .mark_line(strokeWidth=2)
        .encode(
            x=alt.X("x:Q", title="East (m)"),
            y=alt.Y("y:Q", title="North (m)"),
            detail="shape:N",
            order="order:Q",
            color=alt.Color("feature:N", scale=palette),
        )
    )
    legs = (
        alt.Chart(shots)
        .mark_rule(color="#f1c40f", strokeWidth=2)
        .encode(x="from_x:Q", y="from_y:Q", x2="to_x:Q", y2="to_y:Q", tooltip=["shot", "club", "commentary"])
    )
    stops = (
        alt.Chart(shots)
        .mark_circle(size=60, color="#ffffff")
        .encode(x="to_x:Q", y="to_y:Q", tooltip=["shot", "lie_after", "actual_yds"])
    )
    chart = (
        alt.layer(outlines, legs, stops)
        .properties(height=520)
        .configure_view(stroke=None, fill="#05070b")
        .configure_axis(labelColor="#f5f5f5", titleColor="#f5f5f5")
    )
    st.altair_chart(chart, use_container_width=True)


def draw_score_gauge(strokes, par):
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number+delta",
            value=strokes,
            delta={"reference": par, "relative": False, "position": "top"},
            title={"text": f"<b>Score (par {par})</b>", "font": {"size": 20}},
            gauge={
                "axis": {"range": [1, 3 * par]},
                "bar": {"color": "green" if strokes <= par else "red"},
                "threshold": {"line": {"color": "white", "width": 4}, "thickness": 0.8, "value": par},
            },
        )
    )
    fig.update_layout(height=260, margin=dict(t=60, b=10, l=10, r=10))
    st.plotly_chart(fig, use_container_width=True)


# ------------------------------------------------------------
# Tabs
# ------------------------------------------------------------

tab_play, tab_batch, tab_calibrate, tab_dispersion, tab_putting, tab_info = st.tabs(
    ["Play a Hole", "Batch", "Calibration", "Dispersion", "Putting", "Info"]
)

with tab_play:
    st.subheader(f"{COURSE.name} – shot by shot")
    c1, c2 = st.columns(2)
    with c1:
        st.session_state.hole = st.number_input("Hole", 1, len(COURSE.holes), int(st.session_state.hole))
    with c2:
        st.session_state.seed = st.number_input("Seed", 0, 10_000_000, int(st.session_state.seed))

    hole = COURSE.holes[int(st.session_state.hole) - 1]
    skill = current_skill()
    conditions = current_conditions()
    result = simulate_hole(hole, skill, int(st.session_state.seed), course_options(COURSE, conditions=conditions))

    left, right = st.columns([3, 2])
    with left:
        draw_hole(hole, result)
    with right:
        draw_score_gauge(result.strokes, hole.par)
        if conditions is not None:
            raw = hole.length_m * geo.YARDS_PER_METER
            line = geo.bearing(hole.tee, hole.pin)
            adj = adjust_yardage_for_conditions(raw, conditions, line)
            wind = wind_effect_description(conditions.wind_speed_mph, conditions.wind_direction_deg, line)
            st.caption(f"Hole plays {adj['adjusted_yards']} yds (raw {raw:.0f}) • {wind}")
        if not result.holed:
            st.warning("Picked up at the shot cap.")

    table = stats.shots_frame(result)[["shot", "kind", "club", "lie_before", "lie_after",
                                       "intended_yds", "actual_yds", "penalty", "commentary"]]
    st.dataframe(table, use_container_width=True, hide_index=True)

with tab_batch:
    st.subheader("Batch rounds vs benchmark")
    st.session_state.runs = st.slider("Rounds", 5, 200, int(st.session_state.runs), 5)
    if st.button("Run batch"):
        skill = current_skill()
        rounds = simulate_rounds(COURSE, skill, range(st.session_state.runs), conditions=current_conditions())
        summary = stats.summarize(skill.label, rounds)
        bench = benchmarks.stats_for_handicap(max(0.0, dispersion.DispersionMapper(skill).handicap))
        compare = pd.DataFrame(
            {
                "Simulated": [summary.avg_score, summary.fairway_pct, summary.gir_pct,
                              summary.putts_per_round, summary.three_putt_pct, summary.scrambling_pct],
                "Benchmark": [None, bench.fairway_pct, bench.gir_pct,
                              bench.putts_per_round, bench.three_putt_pct, bench.scrambling_pct],
            },
            index=["Score", "Fairways %", "GIR %", "Putts / round", "3-putt %", "Scrambling %"],
        )
        st.dataframe(compare.round(1), use_container_width=True)

        df = stats.rounds_frame(skill.label, rounds)
        hist = (
            alt.Chart(df)
            .mark_bar(cornerRadiusTopLeft=5, cornerRadiusTopRight=5, color="#3498db")
            .encode(x=alt.X("score:Q", bin=alt.Bin(maxbins=20), title="Score"), y=alt.Y("count():Q", title="Rounds"))
            .properties(height=260)
            .configure_view(stroke=None, fill="#05070b")
            .configure_axis(labelColor="#f5f5f5", titleColor="#f5f5f5")
        )
        st.altair_chart(hist, use_container_width=True)
        st.download_button("Download rounds CSV", df.to_csv(index=False), file_name="rounds.csv")

with tab_calibrate:
    st.subheader("Calibration loop")
    st.caption("Runs seeded rounds at 0/5/10/15/20 and nudges the global multipliers until every check passes.")
    runs = st.slider("Rounds per handicap", 5, 50, 10, 5)
    attempts = st.slider("Max attempts", 1, 60, 10)
    if st.button("Calibrate"):
        with st.spinner("Simulating..."):
            outcome = calibration.calibrate(COURSE, initial=dispersion.get_calibration(),
                                            max_attempts=attempts, runs=runs)
        st.session_state.last_outcome = outcome
        if outcome.passed:
            settings.save_calibration(CFG["calibration_path"], outcome.calibration)
    outcome = st.session_state.last_outcome
    if outcome is not None:
        (st.success if outcome.passed else st.error)(outcome.message().splitlines()[-1])
        st.code(outcome.message())
        hist = pd.DataFrame(
            [{"attempt": i + 1, "dispersion": c.dispersion_scale, "chip": c.chip_multiplier_scale}
             for i, c in enumerate(outcome.history)]
        ).melt("attempt", var_name="scale", value_name="value")
        st.altair_chart(
            alt.Chart(hist).mark_line(point=True).encode(x="attempt:Q", y="value:Q", color="scale:N"),
            use_container_width=True,
        )

with tab_dispersion:
    st.subheader("Dispersion by skill")
    rows = [dispersion.describe(parse_skill(h)) for h in range(-5, 26, 5)]
    rows += [dispersion.describe(parse_skill(name)) for name in NAMED_TIERS]
    st.dataframe(pd.DataFrame(rows).round(2), use_container_width=True, hide_index=True)

    skill = current_skill()
    params = dispersion.DispersionMapper(skill).full_shot()
    table = clubs.yardages_for(skill)
    carry = float(table["7i"])
    n = 180
    depth = np.random.normal(loc=carry, scale=carry * params.distance_error_pct, size=n)
    lateral = depth * np.tan(np.radians(np.random.normal(0.0, params.angular_error_deg, size=n)))
    scatter = (
        alt.Chart(pd.DataFrame({"x": lateral, "y": depth}))
        .mark_circle(size=28, opacity=0.25, color="#3498db")
        .encode(x=alt.X("x:Q", title="Lateral miss (yds)"), y=alt.Y("y:Q", title="Carry (yds)", scale=alt.Scale(zero=False)))
        .properties(height=320, title=f"7-iron, {skill.label}")
    )
    st.altair_chart(scatter, use_container_width=True)
    bench_df = pd.DataFrame({t: b.as_dict() for t, b in benchmarks.BENCHMARK_TABLE.items()}).T
    st.markdown("### Benchmark table")
    st.dataframe(bench_df, use_container_width=True)

with tab_putting:
    st.subheader("Make probability by distance")
    feet = np.linspace(1, 40, 79)
    skill = current_skill()
    curve = pd.DataFrame({
        "feet": np.concatenate([feet, feet]),
        "p": [putting.best_make_probability(f) for f in feet] + [putting.make_probability(f, skill) for f in feet],
        "profile": ["Best tier"] * len(feet) + [skill.label] * len(feet),
    })
    chart = (
        alt.Chart(curve)
        .mark_line()
        .encode(
            x=alt.X("feet:Q", title="Distance (ft)"),
            y=alt.Y("p:Q", title="Make probability", axis=alt.Axis(format="%")),
            color="profile:N",
        )
        .properties(height=300)
    )
    st.altair_chart(chart, use_container_width=True)

with tab_info:
    st.markdown(
        """
        **How a hole is played**

        * Every stroke classifies the lie (out of bounds, water, green, bunker, fairway, rough).
        * On the green the ball is putted with a distance-banded make probability; misses finish 1–3 ft away.
        * Off the green, the golfer picks a target (pin, fairway landing zone or a chip-out spot), and the
          shot is perturbed by a distance and direction error drawn from the skill's dispersion.
        * Trees the ball cannot fly over stop it and kick it 2–7 m sideways.
        * Water and out of bounds cost a penalty stroke and the shot is replayed from the same spot.
        """
    )
    boundary = COURSE.holes[0].geometry.boundaries[0] if COURSE.holes[0].geometry.boundaries else None
    if isinstance(boundary, Polygon):
        st.caption(f"Course boundary radius ≈ {bounding_circle(boundary).radius_m:.0f} m")
