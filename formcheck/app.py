import json
import logging

import streamlit as st

from formcheck.config import configure_logging, get_settings
from formcheck.errors import FormCheckError
from formcheck.models import AnalysisReport, LiftType
from formcheck.pipeline import analyze
from formcheck.pose_data import parse_pose_series

logger = logging.getLogger(__name__)


def show_report(report: AnalysisReport) -> None:
    st.subheader(f"{report.lift_type.display_name}: {report.rep_count} reps")
    if not report.reps:
        st.info("No complete repetition detected.")
        return

    for rep in report.reps:
        with st.expander(f"Rep {rep.index + 1}", expanded=True):
            st.text(f"Angles: {rep.angles.summary()}")
            st.text(f"ROM:    {rep.rom.summary()}")
            st.text(f"Tempo:  {rep.speeds.summary()}")
            if rep.issues:
                for issue in rep.issues:
                    st.warning(f"- {issue}")
            else:
                st.success("Good rep")

    st.subheader("Summary")
    if report.summary_issues:
        for issue in report.summary_issues:
            st.write(f"- {issue}")
    else:
        st.success("No technique issues found.")


def main():
    settings = get_settings()
    configure_logging(settings)
    st.set_page_config(page_title="Lift Form Check", layout="wide")

    st.title("Lift Technique Analysis")
    st.markdown("""
    Upload a pose sample (JSON) of a squat, bench press or deadlift. Each
    repetition is scored for joint angles, range of motion and tempo.
    """)

    st.sidebar.title("Settings")
    lift_type = st.sidebar.selectbox(
        "Select Lift Type",
        list(LiftType),
        format_func=lambda lift: lift.display_name,
        help="Choose the type of lift you want to analyze"
    )
    image_coords = st.sidebar.checkbox(
        "Coordinates are image space (y grows downwards)",
        value=False,
    )

    uploaded_file = st.file_uploader(
        "Upload pose data (JSON)",
        type=["json"],
        help='{"fps": 30, "frames": [{"t": 0.0, "points": {"hip": [x, y], ...}}]}'
    )
    if not uploaded_file:
        return

    try:
        standards = settings.load_standards()
        series = parse_pose_series(json.load(uploaded_file), flip_y=image_coords)
    except (FormCheckError, json.JSONDecodeError) as e:
        st.error(f"Error loading pose data: {e}")
        return

    report = analyze(series, lift_type, standards)
    logger.info("Analyzed %s upload: %d reps", lift_type.value, report.rep_count)
    show_report(report)

    st.download_button(
        label="Download Analysis Report",
        data=report.model_dump_json(indent=2),
        file_name="lift_report.json",
        mime="application/json",
    )


if __name__ == "__main__":
    main()
