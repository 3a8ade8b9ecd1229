import unittest
from datetime import date

from timesheet_grid.grid import (
    CellState,
    LockedCellError,
    LockReason,
    RowNotFoundError,
    normalize_hours,
)

from tests.fakes import make_engine


def saved(entry_id: int, day: str, hours: str = "8.00") -> dict:
    return {
        "id": entry_id,
        "project": 1,
        "project_name": "Apollo",
        "activity_type": "Development",
        "date": day,
        "hours_worked": hours,
    }


class TestNormalizeHours(unittest.TestCase):
    def test_quantizes_to_quarter_hours(self) -> None:
        self.assertEqual(normalize_hours(3.1), 3.0)
        self.assertEqual(normalize_hours(3.13), 3.25)
        self.assertEqual(normalize_hours(3.125), 3.25)
        self.assertEqual(normalize_hours(2.875), 3.0)
        self.assertEqual(normalize_hours(7.6), 7.5)

    def test_clamps_to_a_day(self) -> None:
        self.assertEqual(normalize_hours(-5), 0.0)
        self.assertEqual(normalize_hours(30), 24.0)
        self.assertEqual(normalize_hours(float("inf")), 24.0)
        self.assertEqual(normalize_hours(float("nan")), 0.0)


class TestEditability(unittest.TestCase):
    def test_past_and_today_are_editable_future_is_not(self) -> None:
        engine = make_engine()
        row = engine.rows[0]

        self.assertEqual([engine.can_edit(row, i) for i in range(7)], [True, True, True, False, False, False, False])
        self.assertEqual(engine.lock_reason(row, 4), LockReason.FUTURE_DATE)

    def test_persisted_cells_are_locked_whatever_the_date(self) -> None:
        engine = make_engine([saved(11, "2025-06-09"), saved(12, "2025-06-13")])
        row = engine.rows[0]

        self.assertFalse(engine.can_edit(row, 0))
        self.assertEqual(engine.lock_reason(row, 0), LockReason.ALREADY_PERSISTED)
        self.assertEqual(engine.lock_reason(row, 4), LockReason.ALREADY_PERSISTED)
        self.assertTrue(engine.can_edit(row, 1))

    def test_all_future_week_has_no_editable_cell(self) -> None:
        engine = make_engine(today=date(2025, 6, 8))
        row = engine.rows[0]

        self.assertEqual(len(engine.rows), 1)
        self.assertTrue(all(cell.state is CellState.EMPTY for cell in row.cells))
        self.assertEqual({engine.lock_reason(row, i) for i in range(7)}, {LockReason.FUTURE_DATE})

    def test_day_index_out_of_range(self) -> None:
        engine = make_engine()
        with self.assertRaises(IndexError):
            engine.can_edit(engine.rows[0], 7)


class TestUpdateHour(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.row_id = self.engine.rows[0].row_id

    def test_stores_quantized_value_and_marks_row_unsaved(self) -> None:
        row = self.engine.update_hour(self.row_id, 0, 3.1)

        self.assertEqual(row.cells[0].hours, 3.0)
        self.assertEqual(row.cells[0].state, CellState.EDITED)
        self.assertTrue(row.has_unsaved_changes)
        self.assertTrue(self.engine.has_unsaved_changes)

        self.engine.update_hour(self.row_id, 1, 3.13)
        self.assertEqual(row.cells[1].hours, 3.25)

    def test_clamps(self) -> None:
        row = self.engine.update_hour(self.row_id, 0, -5)
        self.assertEqual(row.cells[0].hours, 0)
        self.assertEqual(row.cells[0].state, CellState.EMPTY)

        self.engine.update_hour(self.row_id, 0, 30)
        self.assertEqual(row.cells[0].hours, 24)

    def test_unchanged_value_does_not_mark_row(self) -> None:
        row = self.engine.update_hour(self.row_id, 0, 0)
        self.assertFalse(row.has_unsaved_changes)

    def test_clearing_a_cell_keeps_row_unsaved(self) -> None:
        row = self.engine.update_hour(self.row_id, 0, 4)
        self.engine.update_hour(self.row_id, 0, 0)

        self.assertEqual(row.cells[0].state, CellState.EMPTY)
        self.assertTrue(row.has_unsaved_changes)

    def test_total_is_always_the_sum_of_cells(self) -> None:
        row = self.engine.rows[0]
        for day_index, value in [(0, 8), (1, 7.3), (2, 4.9), (0, 6.1), (1, 0)]:
            self.engine.update_hour(self.row_id, day_index, value)
            self.assertEqual(row.total, sum(cell.hours for cell in row.cells))
        self.assertEqual(row.total, 6.0 + 5.0)

    def test_future_cell_is_rejected_without_changes(self) -> None:
        row = self.engine.rows[0]
        with self.assertRaises(LockedCellError) as caught:
            self.engine.update_hour(self.row_id, 5, 4)

        self.assertEqual(caught.exception.reason, LockReason.FUTURE_DATE)
        self.assertEqual(caught.exception.day, date(2025, 6, 14))
        self.assertEqual(str(caught.exception), "Cannot edit timesheets for future dates.")
        self.assertEqual(row.cells[5].hours, 0)
        self.assertFalse(row.has_unsaved_changes)

    def test_persisted_cell_is_rejected_without_changes(self) -> None:
        engine = make_engine([saved(11, "2025-06-09", "8.00")])
        row = engine.rows[0]
        with self.assertRaises(LockedCellError) as caught:
            engine.update_hour(row.row_id, 0, 2)

        self.assertEqual(caught.exception.reason, LockReason.ALREADY_PERSISTED)
        self.assertEqual(str(caught.exception), "Cannot edit existing timesheet entries.")
        self.assertEqual(row.cells[0].hours, 8.0)
        self.assertEqual(row.cells[0].server_id, 11)
        self.assertFalse(row.has_unsaved_changes)

    def test_unknown_row(self) -> None:
        with self.assertRaises(RowNotFoundError):
            self.engine.update_hour("nope", 0, 1)


class TestRowSelection(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.row_id = self.engine.rows[0].row_id

    def test_selecting_a_project_resets_activity_and_billable(self) -> None:
        self.engine.select_project(self.row_id, "Apollo")
        self.engine.select_activity(self.row_id, "Development")

        row = self.engine.select_project(self.row_id, "Internal")
        self.assertEqual(row.project_id, 2)
        self.assertEqual(row.project_name, "Internal")
        self.assertEqual(row.activity, "")
        self.assertFalse(row.billable)

    def test_unknown_project_resets_to_defaults(self) -> None:
        self.engine.select_project(self.row_id, "Internal")
        row = self.engine.select_project(self.row_id, "Nonexistent")

        self.assertEqual(row.project_id, 0)
        self.assertTrue(row.billable)
        self.assertEqual(row.activity, "")


class TestTotalsAndPending(unittest.TestCase):
    def test_totals_split_billable_and_overtime(self) -> None:
        engine = make_engine()
        apollo = engine.rows[0]
        engine.select_project(apollo.row_id, "Apollo")
        for day_index in range(3):
            engine.update_hour(apollo.row_id, day_index, 10)

        internal = engine.store.add_row()
        engine.select_project(internal.row_id, "Internal")
        engine.update_hour(internal.row_id, 0, 8)
        engine.update_hour(internal.row_id, 1, 7)

        totals = engine.totals()
        self.assertEqual(totals.total, 45)
        self.assertEqual(totals.billable, 30)
        self.assertEqual(totals.non_billable, 15)
        self.assertEqual(totals.regular, 40)
        self.assertEqual(totals.overtime, 5)

    def test_pending_rows_need_project_activity_and_hours(self) -> None:
        engine = make_engine()
        row = engine.rows[0]
        engine.update_hour(row.row_id, 0, 4)
        self.assertEqual(engine.pending_rows(), [])

        engine.select_project(row.row_id, "Apollo")
        self.assertEqual(engine.pending_rows(), [])

        engine.select_activity(row.row_id, "Development")
        self.assertEqual(engine.pending_rows(), [row])

        engine.update_hour(row.row_id, 0, 0)
        self.assertEqual(engine.pending_rows(), [])


if __name__ == "__main__":
    unittest.main(verbosity=2)
