# main.py
import argparse
import logging

import pandas as pd
import matplotlib.pyplot as plt

from study_scheduler.config import load_preferences
from study_scheduler.export import blocks_to_frame
from study_scheduler.models import Assignment, Course, ExistingEvent
from study_scheduler.scheduler import StudyScheduler


def sample_term(start: pd.Timestamp):
    """A couple of courses, their coursework and some fixed classes."""
    courses = [
        Course(id="nurs210", priority=2, name="Pathophysiology"),
        Course(id="nurs220", priority=1, name="Pharmacology"),
    ]

    def day(n):
        return (start + pd.Timedelta(days=n)).date()

    assignments = [
        Assignment(id="a1", course_id="nurs210", title="Midterm Exam",
                   date=day(10), type="exam", hours=4, priority="high"),
        Assignment(id="a2", course_id="nurs220", title="Drug Card Set 3",
                   date=day(5), type="assignment", priority="medium"),
        Assignment(id="a3", course_id="nurs210", title="Chapter 7 Reading",
                   date=day(3), type="reading", priority="low"),
        Assignment(id="a4", course_id="nurs220", title="Dosage Quiz",
                   date=day(6), type="quiz", priority="urgent"),
        Assignment(id="a5", course_id="nurs210", title="Care Plan",
                   date=day(12), type="paper", hours=6, priority="medium",
                   completed=True),
    ]

    events = []
    for n in range(14):
        d = start + pd.Timedelta(days=n)
        if d.weekday() in (0, 2):
            events.append(ExistingEvent(
                id=f"lecture-{n}", title="Lecture",
                start=d + pd.Timedelta(hours=9), end=d + pd.Timedelta(hours=11),
            ))
        if d.weekday() == 3:
            events.append(ExistingEvent(
                id=f"clinical-{n}", title="Clinical",
                start=d + pd.Timedelta(hours=7), end=d + pd.Timedelta(hours=15),
            ))
    return courses, assignments, events


def main():
    parser = argparse.ArgumentParser(description="Plan study blocks for a sample term.")
    parser.add_argument("--config", default="preferences.yaml",
                        help="preferences file (YAML or JSON)")
    parser.add_argument("--start", default=None,
                        help="first day to plan, YYYY-MM-DD (default: today)")
    parser.add_argument("--days", type=int, default=14, help="length of the planning window")
    parser.add_argument("--no-plot", action="store_true", help="skip the hours-per-day chart")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    prefs = load_preferences(args.config)
    start = pd.Timestamp(args.start) if args.start else pd.Timestamp.now().normalize()
    end = start + pd.Timedelta(days=args.days)

    courses, assignments, events = sample_term(start)
    pending = [a for a in assignments if not a.completed]

    scheduler = StudyScheduler(prefs)
    blocks = scheduler.generate_schedule(pending, courses, events, start, end)

    print("=== Study Schedule ===")
    df = blocks_to_frame(blocks)
    print(df[["date", "start", "end", "kind", "title", "hours", "suboptimal"]].to_string(index=False))

    stats = scheduler.get_statistics()
    print()
    print(f"Blocks: {stats.block_count}  Total: {stats.total_hours:.1f}h  "
          f"Avg/day: {stats.average_per_day:.2f}h")
    for kind, hours in stats.by_type.items():
        print(f"  {kind:<8} {hours:.1f}h")
    for course_id, hours in stats.by_course.items():
        print(f"  {course_id:<8} {hours:.1f}h")

    if args.no_plot or df.empty:
        return

    per_day = df.groupby(["date", "kind"])["hours"].sum().unstack(fill_value=0)
    per_day.plot(kind="bar", stacked=True, figsize=(10, 3))
    plt.title("Planned Study Hours per Day")
    plt.xlabel("Day")
    plt.ylabel("Hours")
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
