import logging
from datetime import datetime

import streamlit as st
import pandas as pd
import plotly.express as px

from streamlit_calendar import calendar

from study_scheduler.config import dump_preferences
from study_scheduler.estimates import calculate_study_time
from study_scheduler.export import blocks_to_frame
from study_scheduler.models import (
    ASSIGNMENT_TYPES, PRIORITIES, Assignment, Course, ExistingEvent, TimeWindow,
)
from study_scheduler.scheduler import StudyScheduler

from prometheus_client import start_http_server, Summary, Counter

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


# ✅ Create metrics only once
if "SCHEDULE_TIME" not in st.session_state:
    st.session_state.SCHEDULE_TIME = Summary(
        "study_schedule_generation_seconds",
        "Time spent generating the study schedule",
    )
SCHEDULE_TIME = st.session_state.SCHEDULE_TIME

if "BLOCK_COUNTER" not in st.session_state:
    st.session_state.BLOCK_COUNTER = Counter(
        "study_blocks_generated_total",
        "Count of generated study blocks by kind",
        ["kind"],  # study / review
    )
BLOCK_COUNTER = st.session_state.BLOCK_COUNTER

# ✅ Start metrics server only once
if "metrics_started" not in st.session_state:
    start_http_server(8000)
    st.session_state.metrics_started = True


def datetime_input(label: str, key: str):
    """
    date_input + time_input pair, returned as a naive datetime.
    """
    col_date, col_time = st.columns(2)
    with col_date:
        d = st.date_input(label + " date", key=key + "_date")
    with col_time:
        t = st.time_input(label + " time", key=key + "_time")
    return datetime.combine(d, t)


# Session State Setup
if "scheduler" not in st.session_state:
    st.session_state.scheduler = StudyScheduler()

if "courses" not in st.session_state:
    st.session_state.courses = []       # list[Course]

if "assignments" not in st.session_state:
    st.session_state.assignments = []   # list[Assignment]

if "events" not in st.session_state:
    st.session_state.events = []        # list[ExistingEvent]

if "blocks" not in st.session_state:
    st.session_state.blocks = []        # list[StudyBlock]

scheduler = st.session_state.scheduler
prefs = scheduler.preferences


# Sidebar: Inputs
st.sidebar.title("Adaptive Study Scheduler")

st.sidebar.subheader("Planning window")
today = pd.Timestamp.now().normalize()
window_start = st.sidebar.date_input("From", value=today.date())
window_days = st.sidebar.number_input("Days", 1, 180, value=28)

st.sidebar.subheader("Time limits")
daily_max = st.sidebar.number_input("Daily max hours", 0.0, 12.0, step=0.5,
                                    value=float(prefs.daily_max_hours))
weekend_max = st.sidebar.number_input("Weekend max hours", 0.0, 12.0, step=0.5,
                                      value=float(prefs.weekend_max_hours))
block_duration = st.sidebar.number_input("Block duration (hours)", 0.5, 4.0, step=0.5,
                                         value=float(prefs.block_duration))

st.sidebar.subheader("Time-of-day weights")
windows = {}
for name, window in prefs.preferred_times.items():
    weight = st.sidebar.slider(f"{name.title()} ({window.start:g}-{window.end:g}h)",
                               0.0, 2.0, float(window.weight), 0.1)
    windows[name] = TimeWindow(start=window.start, end=window.end, weight=weight)

st.sidebar.subheader("Energy by weekday (%)")
energy = {}
for day, level in prefs.energy_levels.items():
    energy[day] = st.sidebar.slider(day.title(), 0, 100, int(round(level * 100)), 5) / 100

scheduler.update_preferences(
    daily_max_hours=daily_max,
    weekend_max_hours=weekend_max,
    block_duration=block_duration,
    preferred_times=windows,
    energy_levels=energy,
)

st.sidebar.download_button(
    "Download preferences",
    data=dump_preferences(scheduler.preferences),
    file_name="preferences.yaml",
)

# Add Course
st.sidebar.subheader("Add Course")
with st.sidebar.form("course_form"):
    c_name = st.text_input("Course name", key="c_name")
    c_priority = st.slider("Course priority", 0, 5, 0)
    if st.form_submit_button("Add Course"):
        if c_name:
            st.session_state.courses.append(
                Course(id=f"c{len(st.session_state.courses)}", priority=c_priority, name=c_name)
            )
        else:
            st.sidebar.error("Please enter a course name.")

# Add Assignment
st.sidebar.subheader("Add Assignment")
with st.sidebar.form("assignment_form"):
    a_title = st.text_input("Title", key="a_title")
    course_names = {c.name: c.id for c in st.session_state.courses}
    a_course = st.selectbox("Course", ["(none)"] + list(course_names))
    a_type = st.selectbox("Type", ASSIGNMENT_TYPES, index=ASSIGNMENT_TYPES.index("assignment"))
    a_priority = st.selectbox("Priority", PRIORITIES, index=1)
    a_due = st.date_input("Due date", key="a_due")
    a_hours = st.number_input("Estimated hours (0 = estimate from type)", 0.0, 40.0, step=0.5)
    if st.form_submit_button("Add Assignment"):
        if a_title:
            st.session_state.assignments.append(
                Assignment(
                    id=f"a{len(st.session_state.assignments)}",
                    course_id=course_names.get(a_course),
                    title=a_title,
                    date=a_due,
                    type=a_type,
                    hours=a_hours or None,
                    priority=a_priority,
                )
            )
        else:
            st.sidebar.error("Please enter an assignment title.")

# Add Existing Event
st.sidebar.subheader("Add Busy Time")
with st.sidebar.form("event_form"):
    ev_label = st.text_input("Label", key="ev_label")
    ev_start = datetime_input("Start", key="ev_start")
    ev_end = datetime_input("End", key="ev_end")
    if st.form_submit_button("Add Event"):
        if ev_label and ev_end > ev_start:
            st.session_state.events.append(
                ExistingEvent(
                    id=f"ev{len(st.session_state.events)}",
                    title=ev_label,
                    start=pd.Timestamp(ev_start),
                    end=pd.Timestamp(ev_end),
                )
            )
        else:
            st.sidebar.error("Please enter a label and ensure end > start")


# Main: Generate Schedule
st.title("Study Planner")

col1, col2 = st.columns(2)
with col1:
    st.markdown("### Assignments")
    if st.session_state.assignments:
        adf = pd.DataFrame([{
            "title": a.title,
            "type": a.type,
            "priority": a.priority,
            "due": a.date,
            "quota (h)": calculate_study_time(a, scheduler.preferences),
        } for a in st.session_state.assignments])
        st.dataframe(adf)
    else:
        st.write("No assignments yet.")

with col2:
    st.markdown("### Busy Time")
    if st.session_state.events:
        st.dataframe(pd.DataFrame([{
            "label": ev.title,
            "start": ev.start,
            "end": ev.end,
        } for ev in st.session_state.events]))
    else:
        st.write("No busy time yet.")


if st.button("Generate Schedule"):
    start = pd.Timestamp(window_start)
    end = start + pd.Timedelta(days=int(window_days))
    pending = [a for a in st.session_state.assignments if not a.completed]

    with SCHEDULE_TIME.time():
        blocks = scheduler.generate_schedule(
            pending,
            st.session_state.courses,
            st.session_state.events,
            start,
            end,
        )

    for b in blocks:
        BLOCK_COUNTER.labels(kind=b.kind).inc()
    st.session_state.blocks = blocks


# Calendar view with FullCalendar
if st.session_state.blocks:
    st.markdown("## Calendar")

    events = scheduler.export_for_calendar()
    for ev in st.session_state.events:
        events.append({
            "title": ev.title,
            "start": pd.Timestamp(ev.start).isoformat(),
            "end": pd.Timestamp(ev.end).isoformat(),
            "id": ev.id,
            "color": "#7f7f7f",  # grey
        })

    cal_options = {
        "initialView": "timeGridWeek",
        "slotMinTime": "06:00:00",
        "slotMaxTime": "23:00:00",
        "allDaySlot": False,
        "nowIndicator": True,
        "firstDay": 1,  # Monday
    }
    calendar(events=events, options=cal_options, key="calendar")

    stats = scheduler.get_statistics()
    m1, m2, m3 = st.columns(3)
    m1.metric("Blocks", stats.block_count)
    m2.metric("Total hours", f"{stats.total_hours:.1f}")
    m3.metric("Avg / day", f"{stats.average_per_day:.2f}")

    df = blocks_to_frame(st.session_state.blocks)
    flagged = df[df["suboptimal"]]
    if not flagged.empty:
        st.warning(f"{len(flagged)} demanding block(s) landed on low-energy days.")

    st.markdown("### Hours per Day")
    per_day = df.groupby(["date", "kind"], as_index=False)["hours"].sum()
    fig = px.bar(per_day, x="date", y="hours", color="kind",
                 labels={"date": "Day", "hours": "Hours"})
    st.plotly_chart(fig, use_container_width=True)
else:
    st.info("Add some assignments and click **Generate Schedule** to see the calendar.")
