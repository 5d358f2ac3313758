"""
Page Replacement Visualizer — FIFO, LRU & Optimal

This application steps through the decisions an operating system makes while
servicing a page reference string with a fixed number of physical frames:
    - FIFO: evict in the order frames were filled
    - LRU: evict the page not referenced for the longest time
    - Optimal: evict the page whose next reference is furthest away

The simulation itself lives in engine.py / playback.py / session.py; this
module only renders it. Built with Streamlit for the web interface and
Plotly for visualizations.

Run with:  streamlit run app.py
"""

# =============================================================================
# IMPORTS
# =============================================================================

import time                                  # For pacing auto-play reruns

import plotly.graph_objects as go            # Interactive plotting library
import streamlit as st                       # Web application framework

from engine import Policy, compare_policies
from playback import PlaybackMode
from session import SimulationSession
from settings import (DEFAULT_FRAME_COUNT, DEFAULT_REFERENCE_STRING, DEFAULT_SPEED,
                      EVENT_LOG_DISPLAY, MAX_FRAME_COUNT, MAX_SPEED, MIN_FRAME_COUNT,
                      MIN_SPEED, SPEED_STEP)
from stats import fault_details
from utils import format_frames, frame_labels, get_color


# Configure the Streamlit page
st.set_page_config(page_title="Page Replacement Visualizer", layout="wide")

# -----------------------------------------------------------------------------
# SIDEBAR NAVIGATION
# -----------------------------------------------------------------------------

page = st.sidebar.radio("Choose View", ["Simulator", "Concepts"])

st.title("Page Replacement Visualizer — FIFO, LRU & Optimal")

# =============================================================================
# CONCEPTS PAGE - Educational Content
# =============================================================================

if page == "Concepts":
    st.header("Page Replacement Concepts")
    st.markdown(
        """
        ### **Page**
        - A fixed-size block of virtual memory, identified here by an integer.

        ### **Frame**
        - A physical memory slot that can hold exactly one page.

        ### **Page Fault**
        - The referenced page is not in any frame and must be loaded.
        - If a frame is empty the page goes there, otherwise a *victim* is evicted.

        ### **Hit Ratio**
        - Share of references that found their page already resident.
        """
    )
    for policy in Policy:
        st.subheader(policy.value)
        st.write(policy.description)
    st.stop()

# =============================================================================
# SIMULATOR PAGE - Main Interactive Interface
# =============================================================================

# -----------------------------------------------------------------------------
# SIDEBAR - Simulation Settings
# -----------------------------------------------------------------------------

st.sidebar.header("Simulation Settings")

policy = st.sidebar.selectbox(
    "Replacement Policy",
    options=[p.value for p in Policy],
)

frame_count = st.sidebar.number_input(
    "Number of frames",
    min_value=MIN_FRAME_COUNT,
    max_value=MAX_FRAME_COUNT,
    value=DEFAULT_FRAME_COUNT,
    step=1,
)

reference_text = st.sidebar.text_area(
    "Reference string (page numbers separated by commas or spaces)",
    value=DEFAULT_REFERENCE_STRING,
)

st.sidebar.markdown("---")
st.sidebar.header("Playback")

speed = st.sidebar.slider(
    "Playback speed (x)",
    min_value=MIN_SPEED,
    max_value=MAX_SPEED,
    value=DEFAULT_SPEED,
    step=SPEED_STEP,
)

show_details = st.sidebar.checkbox("Show details", value=True)

# -----------------------------------------------------------------------------
# SESSION STATE - Simulation Persistence
# -----------------------------------------------------------------------------

# One session per browser tab; it survives Streamlit reruns
if 'session' not in st.session_state:
    st.session_state.session = SimulationSession(reference_text, frame_count, policy, speed)
    st.session_state.toast_cursor = -1

session: SimulationSession = st.session_state.session

# Any changed input rebuilds the trace and stops playback
session.configure(reference_text=reference_text, capacity=frame_count, policy=policy)

try:
    session.set_speed(speed)
except ValueError as e:
    st.sidebar.error(str(e))

if session.parse_failed:
    st.warning("Invalid reference string: every entry must be an integer page number.")

st.info(session.policy.description)

# =============================================================================
# MAIN CONTENT AREA - Two Column Layout
# =============================================================================

col1, col2 = st.columns([2, 1])

# -----------------------------------------------------------------------------
# LEFT COLUMN - Controls, Frames and Step Details
# -----------------------------------------------------------------------------

with col1:
    st.subheader("Simulation")

    b_reset, b_play, b_step = st.columns(3)
    if b_reset.button("Reset"):
        session.reset()
    play_label = "Pause" if session.state.mode is PlaybackMode.PLAYING else "Play"
    if b_play.button(play_label, key="play_pause"):
        session.toggle()
    if b_step.button("Step"):
        session.step()

    # Deliver any timer ticks that came due since the last rerun
    session.poll()

    state = session.state
    step = session.current_step
    st.caption(f"{state.step_label} — {state.mode.value}")

    if not session.trace:
        st.write("Enter a reference string to start the simulation")
    elif step is None:
        st.write("Click Play or Step to start the simulation")
    else:
        # ----- Reference string with the current position highlighted -----
        cells = []
        for i, ref in enumerate(session.references):
            if i == state.cursor:
                cells.append(f"**[{ref}]**")
            elif i < state.cursor:
                cells.append(f"~~{ref}~~")
            else:
                cells.append(str(ref))
        st.markdown(" ".join(cells))

        # ----- Physical Frames Visualization -----
        labels = frame_labels(step.frames)
        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=list(range(len(step.frames))),
            y=[1] * len(step.frames),
            text=labels,
            marker_color=[get_color(p, step) for p in step.frames],
            hovertext=labels,
            hoverinfo='text',
        ))
        fig.update_layout(
            height=180,
            showlegend=False,
            yaxis=dict(showticklabels=False),
            xaxis=dict(title="Frame"),
        )
        st.plotly_chart(fig, use_container_width=True)

        # Toast once per cursor position that lands on a hit
        if step.is_hit and st.session_state.toast_cursor != state.cursor:
            st.toast(f"Hit! Page {step.reference} was found in memory.")
        st.session_state.toast_cursor = state.cursor

        if show_details:
            if step.is_hit:
                st.success(f"HIT: {step.details}")
            else:
                st.error(f"PAGE FAULT: {step.details}")

    # ----- Event Log (most recent first) -----
    st.subheader("Event Log")
    for ev in session.event_log[-EVENT_LOG_DISPLAY:][::-1]:
        st.write(ev)

# -----------------------------------------------------------------------------
# RIGHT COLUMN - Statistics
# -----------------------------------------------------------------------------

with col2:
    st.subheader("Statistics")
    stats = session.statistics

    m_hits, m_faults = st.columns(2)
    m_hits.metric("Hits", stats.hits)
    m_faults.metric("Page Faults", stats.misses)
    st.progress(stats.fault_ratio, text=f"Page fault ratio: {stats.fault_percent}%")
    st.metric("Hit Ratio", stats.hit_ratio)

    if step is not None:
        st.write(fault_details(step))

    fig2 = go.Figure()
    fig2.add_trace(go.Bar(
        x=["Hits", "Page Faults"],
        y=[stats.hits, stats.misses],
        marker_color=["#1db954", "#ef4444"],
    ))
    fig2.update_layout(height=300, title="Hits vs Page Faults")
    st.plotly_chart(fig2, use_container_width=True)

    st.caption(f"{session.policy.value} algorithm with {session.capacity} frames")

    # ----- Final summary once the last step is shown -----
    summary = session.summary
    if summary is not None and state.mode is PlaybackMode.FINISHED:
        st.markdown(
            "**Final Page Fault Summary**\n\n"
            f"- Total page references: {summary.total_references}\n"
            f"- Total page faults: {summary.total_faults}\n"
            f"- Page fault ratio: {summary.fault_ratio * 100:.2f}%\n"
            f"- Final memory state: {format_frames(summary.final_frames)}"
        )

    # ----- Same workload under every policy -----
    if session.references:
        faults = compare_policies(session.references, session.capacity)
        fig3 = go.Figure()
        fig3.add_trace(go.Bar(x=[p.value for p in faults], y=list(faults.values())))
        fig3.update_layout(height=300, title="Page Faults by Policy")
        st.plotly_chart(fig3, use_container_width=True)

# -----------------------------------------------------------------------------
# AUTO-PLAY - Rerun when the next tick is due
# -----------------------------------------------------------------------------

wait = session.controller.seconds_until_tick()
if wait is not None:
    time.sleep(wait)
    st.rerun()
