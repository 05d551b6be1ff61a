"""Streamlit console for browsing review queues and approving applications."""
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import List, Optional

import streamlit as st

# Allow running via "streamlit run courtrecords/ui/dashboard.py" without installing the package
# by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from courtrecords.api.client import CourtRecordsClient
from courtrecords.browser.table import ASCENDING, DESCENDING, TableState, TableView, browse
from courtrecords.core.errors import WorkflowError
from courtrecords.core.logging import configure_logging
from courtrecords.core.models import LayoutMode, Record
from courtrecords.core.settings import Settings
from courtrecords.reporting.sinks import table_rows_for_export, write_csv, write_excel
from courtrecords.review.modal import ConfirmOptions, ConfirmResult
from courtrecords.review.presentation import columns_for_stage, status_badge, status_label
from courtrecords.review.stages import ReviewStage, load_stages
from courtrecords.review.workflow import APPROVE, REJECT, ReviewWorkflow, WorkflowState

_NESTED_SECTIONS = ("beneficiaries", "documents", "sureties", "payments")


class SessionModal:
    """Modal service backed by Streamlit session state.

    Buttons already represent the user's intent, so ``confirm`` answers with
    the state of the confirmation checkbox rendered next to them.
    Notifications are queued and shown on the next rerun.
    """

    def __init__(self, confirmed: bool = False) -> None:
        self.confirmed = confirmed

    def confirm(self, options: ConfirmOptions) -> ConfirmResult:
        if not self.confirmed:
            self.notify("warning", options.title, "Tick the confirmation box to continue.")
        return ConfirmResult(confirmed=self.confirmed)

    def notify(self, level: str, title: str, message: str) -> None:
        st.session_state.setdefault("notifications", []).append((level, title, message))


def _rerun_app() -> None:
    """Trigger a Streamlit rerun, compatible with newer and older APIs."""

    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if not rerun:
        raise RuntimeError("Streamlit does not expose a rerun helper.")
    rerun()


def _render_notifications() -> None:
    renderers = {"success": st.success, "warning": st.warning, "error": st.error}
    for level, title, message in st.session_state.pop("notifications", []):
        renderers.get(level, st.info)(f"**{title}**: {message}")


def _workflow_for(stage: ReviewStage, settings: Settings) -> ReviewWorkflow:
    """Keep one workflow per stage for the session and load it on first use."""

    workflows = st.session_state.setdefault("workflows", {})
    if stage.name not in workflows:
        client = CourtRecordsClient.from_settings(settings)
        workflow = ReviewWorkflow(client, stage, modal=SessionModal())
        with st.spinner("Loading applications..."):
            workflow.refresh()
        workflows[stage.name] = workflow
    return workflows[stage.name]


def _table_state(stage: ReviewStage) -> TableState:
    states = st.session_state.setdefault("table_states", {})
    return states.setdefault(stage.name, TableState())


def _save_table_state(stage: ReviewStage, state: TableState) -> None:
    st.session_state["table_states"][stage.name] = state


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _table_controls(stage: ReviewStage, state: TableState, columns) -> TableState:
    """Render search, date, and sort controls and return the updated state."""

    filter_cols = st.columns([2, 1, 1, 1.3, 1])
    with filter_cols[0]:
        search = st.text_input("Search records...", value=state.search, key=f"search_{stage.name}")
    with filter_cols[1]:
        start = st.date_input("From", value=None, key=f"from_{stage.name}")
    with filter_cols[2]:
        end = st.date_input("To", value=None, key=f"to_{stage.name}")
    sortable = [column for column in columns if column.sortable]
    with filter_cols[3]:
        labels = ["(none)"] + [column.label for column in sortable]
        current = next((c.label for c in sortable if c.key == state.sort_key), "(none)")
        sort_label = st.selectbox("Sort by", labels, index=labels.index(current), key=f"sort_{stage.name}")
    with filter_cols[4]:
        descending = st.toggle(
            "Descending", value=state.sort_direction == DESCENDING, key=f"desc_{stage.name}"
        )

    if search != state.search:
        state = state.with_search(search)
    if (_iso(start), _iso(end)) != (state.date_start, state.date_end):
        state = state.with_date_range(_iso(start), _iso(end))
    sort_key = next((c.key for c in sortable if c.label == sort_label), None)
    return replace(
        state, sort_key=sort_key, sort_direction=DESCENDING if descending else ASCENDING
    )


def _render_table(view: TableView) -> None:
    if view.loading:
        st.dataframe(
            [{column.label: "…" for column in view.columns} for _ in range(view.skeleton_rows)],
            use_container_width=True,
            hide_index=True,
        )
        return
    if view.is_empty:
        st.info("No records found.")
        return
    rows = [
        {column.label: row.cells[column.key] for column in view.columns} for row in view.rows
    ]
    st.dataframe(rows, use_container_width=True, hide_index=True)


def _pagination(stage: ReviewStage, state: TableState, view: TableView) -> None:
    if not view.show_pagination:
        return
    nav_cols = st.columns([1, 3, 1])
    with nav_cols[0]:
        if st.button("⬅️", disabled=not view.has_prev, key=f"prev_{stage.name}", help="Previous page"):
            _save_table_state(stage, state.previous_page())
            _rerun_app()
    with nav_cols[1]:
        st.caption(f"{view.summary} · page {view.page} of {view.page_count}")
    with nav_cols[2]:
        if st.button("➡️", disabled=not view.has_next, key=f"next_{stage.name}", help="Next page"):
            _save_table_state(stage, state.next_page(view.page_count))
            _rerun_app()


def _export_controls(stage: ReviewStage, view: TableView) -> None:
    with st.expander("Export", expanded=False):
        sink = st.radio("Format", ["csv", "excel"], horizontal=True, key=f"sink_{stage.name}")
        default_path = f"output/{stage.name}.{'xlsx' if sink == 'excel' else 'csv'}"
        target = Path(st.text_input("File path", value=default_path, key=f"export_{stage.name}_{sink}"))
        if st.button("Export filtered rows", key=f"export_btn_{stage.name}"):
            rows = table_rows_for_export(view)
            if not rows:
                st.info("No records to export.")
            elif sink == "excel":
                write_excel(rows, target, sheet_title=stage.name)
                st.success(f"Saved {len(rows)} rows to {target.resolve()}")
            else:
                write_csv(rows, target)
                st.success(f"Saved {len(rows)} rows to {target.resolve()}")


def _render_listing(workflow: ReviewWorkflow, settings: Settings, layout: LayoutMode) -> None:
    stage = workflow.stage
    st.subheader(stage.title)

    if workflow.error:
        banner_cols = st.columns([4, 1])
        banner_cols[0].error(workflow.error)
        if banner_cols[1].button("Retry", key=f"retry_{stage.name}"):
            workflow.refresh()
            _rerun_app()
    if workflow.detail_error:
        st.warning(workflow.detail_error)

    columns = columns_for_stage(
        stage.name, today=workflow.today(), threshold_days=settings.maturity_days
    )
    state = _table_controls(stage, _table_state(stage), columns)
    view = browse(
        columns,
        workflow.records,
        state,
        loading=workflow.loading,
        layout=layout,
        page_size=settings.page_size,
    )
    state = replace(state, page=view.page)
    _save_table_state(stage, state)
    _render_table(view)
    _pagination(stage, state, view)

    if view.rows:
        options = [row.record.get("id") for row in view.rows]
        pick_cols = st.columns([3, 1])
        with pick_cols[0]:
            picked = st.selectbox(
                "Open application",
                options,
                format_func=lambda rid: f"#{rid} · {status_badge((workflow.find(rid) or {}).get('status'))}",
                key=f"pick_{stage.name}",
            )
        with pick_cols[1]:
            label = "Review" if stage.is_actionable((workflow.find(picked) or {}).get("status")) else "View"
            if st.button(label, type="primary", key=f"open_{stage.name}"):
                workflow.select(picked)
                _rerun_app()

    _export_controls(stage, view)
    if st.button("Refresh", type="secondary", key=f"refresh_{stage.name}"):
        workflow.refresh()
        _rerun_app()


def _render_nested(record: Record) -> None:
    for section in _NESTED_SECTIONS:
        items = record.get(section)
        if isinstance(items, list) and items:
            with st.expander(f"{section.capitalize()} ({len(items)})"):
                st.dataframe(items, use_container_width=True, hide_index=True)


def _render_detail(workflow: ReviewWorkflow, settings: Settings) -> None:
    record = workflow.selected or {}
    stage = workflow.stage

    if st.button("⬅️ Back to list", key="detail_back"):
        workflow.back()
        _rerun_app()

    st.subheader(f"Application #{record.get('id')}")
    st.caption(f"Status: {status_badge(record.get('status'))}")

    maturity = workflow.maturity(settings.maturity_days)
    if maturity:
        st.metric("Gazette", maturity.label, maturity.days_label)

    scalar_fields = {
        key: value for key, value in record.items() if not isinstance(value, (list, dict))
    }
    st.dataframe(
        [{"Field": key, "Value": "" if value is None else str(value)} for key, value in scalar_fields.items()],
        use_container_width=True,
        hide_index=True,
    )
    _render_nested(record)

    for remark_field in ("registrar_remarks", "cr_remarks", "remarks"):
        if record.get(remark_field):
            st.caption(f"{remark_field.replace('_', ' ').capitalize()}: “{record[remark_field]}”")

    if not workflow.can_act:
        st.info(
            f"Application already {status_label(record.get('status'))}. "
            "No further action is required at this stage."
        )
        return

    if workflow.action_error:
        st.error(workflow.action_error)

    placeholder = (
        "Add your review remarks here..."
        if stage.approve_requires_remarks
        else "Remarks (optional for approval, required for rejection)..."
    )
    remarks = st.text_area("Remarks", placeholder=placeholder, key=f"remarks_{stage.name}_{record.get('id')}")
    confirmed = st.checkbox("I have reviewed this application", key=f"confirm_{stage.name}_{record.get('id')}")
    workflow.modal = SessionModal(confirmed=confirmed)

    action_cols = st.columns(2)
    pressed: Optional[str] = None
    with action_cols[0]:
        if APPROVE in workflow.available_actions and st.button(
            "👍 Approve", type="primary", disabled=workflow.submitting
        ):
            pressed = APPROVE
    with action_cols[1]:
        if REJECT in workflow.available_actions and st.button(
            "🛑 Reject", type="secondary", disabled=workflow.submitting
        ):
            pressed = REJECT

    if pressed:
        try:
            done = workflow.approve(remarks) if pressed == APPROVE else workflow.reject(remarks)
        except WorkflowError as exc:
            st.error(str(exc))
            return
        if done or workflow.action_error:
            _rerun_app()
        _render_notifications()


def _queue_summary(records: List[Record]) -> None:
    """Sidebar counts per status for the loaded queue."""

    counts: dict[str, int] = {}
    for record in records:
        key = record.get("status") or "pending"
        counts[key] = counts.get(key, 0) + 1
    st.metric("Records in queue", len(records))
    for status, count in sorted(counts.items()):
        st.caption(f"{status_badge(status)}: {count}")


def main() -> None:
    """Launch the staff review console."""

    configure_logging()
    st.set_page_config(page_title="Court Records Review", layout="wide", initial_sidebar_state="expanded")
    st.title("Court Records Review")

    settings = Settings.from_env()
    stages = load_stages(settings.stages_file)

    with st.sidebar:
        stage_name = st.selectbox(
            "Review queue",
            list(stages),
            format_func=lambda name: stages[name].title,
        )
        compact = st.toggle("Compact layout", value=False, help="Hide low-priority columns")

    stage = stages[stage_name]
    workflow = _workflow_for(stage, settings)
    _render_notifications()

    if workflow.state == WorkflowState.DETAIL:
        _render_detail(workflow, settings)
    else:
        _render_listing(workflow, settings, LayoutMode.COMPACT if compact else LayoutMode.NORMAL)

    with st.sidebar:
        st.subheader("Queue")
        _queue_summary(workflow.records)


if __name__ == "__main__":
    main()
