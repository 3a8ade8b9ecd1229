import logging
from datetime import date
from typing import Callable, Optional

from .backend.client import AuthError, BackendError, TimesheetBackendClient
from .backend.models import CreateTimesheetEntryRequest, CurrentUser
from .grid.errors import LockedCellError, TimesheetGridError
from .grid.models import ProjectCatalog, TimesheetRow, WeekTotals
from .grid.reconciliation import ReconciliationEngine
from .grid.store import TimesheetRowStore
from .grid.submit import SubmitCoordinator, SubmitResult
from .week import WeekWindow

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load data. Please make sure you are logged in."


class TimesheetSession:
    """Owns one employee's weekly grid from login to logout.

    Every rebuild of the rows (week navigation, reload, edit/delete of a saved
    entry) bumps ``generation``. A submission started under an older generation
    stops before its next create call, so completions never land on a view they
    were not issued from.
    """

    def __init__(self, client: TimesheetBackendClient, clock: Callable[[], date] = date.today):
        self.client = client
        self.clock = clock
        self.window = WeekWindow.containing(clock())
        self.catalog = ProjectCatalog()
        self.store = TimesheetRowStore(self.window)
        self.engine = ReconciliationEngine(self.store, self.catalog, clock)
        self.current_user: Optional[CurrentUser] = None
        self.coordinator: Optional[SubmitCoordinator] = None
        self.generation = 0
        self.loading = False
        self.error = ""

    @property
    def rows(self) -> list[TimesheetRow]:
        return self.store.rows

    @property
    def is_admin(self) -> bool:
        return self.current_user is not None and self.current_user.is_admin

    @property
    def is_submitting(self) -> bool:
        return self.coordinator is not None and self.coordinator.submitting

    @property
    def has_unsaved_changes(self) -> bool:
        return self.engine.has_unsaved_changes

    def totals(self) -> WeekTotals:
        return self.engine.totals()

    def _require_user(self) -> CurrentUser:
        if self.current_user is None:
            self.error = "User not authenticated"
            raise AuthError(self.error)
        return self.current_user

    async def login(self, email: str, password: str) -> None:
        try:
            await self.client.login(email, password)
        except BackendError:
            logger.exception("Login failed")
            self.error = LOAD_ERROR_MESSAGE
            raise

    async def load(self) -> None:
        """Load the user, the project catalog and the current week"""
        self.loading = True
        try:
            self.current_user = await self.client.get_current_user()
            self.coordinator = SubmitCoordinator(
                self.engine, self.client.create_timesheet_entry, self.current_user.employee_id
            )
            projects = await self.client.fetch_active_projects()

            activities: dict[int, list[str]] = {}
            for project in projects:
                try:
                    activities[project.id] = await self.client.fetch_project_activities(project.id)
                except BackendError:
                    logger.warning(f"Failed to load activities for project {project.id}")
                    activities[project.id] = []

            self.catalog.projects = projects
            self.catalog.activities = activities
            logger.info(f"Loaded {len(projects)} projects for {self.current_user.employee_id}")

            await self.load_week()
        except BackendError:
            logger.exception("Error loading initial data")
            self.error = LOAD_ERROR_MESSAGE
            raise
        finally:
            self.loading = False

    async def load_week(self) -> None:
        self._require_user()
        self.generation += 1
        generation = self.generation
        window = self.window

        try:
            entries = await self.client.fetch_timesheets(window.first, window.last)
        except BackendError as e:
            self.error = str(e)
            raise

        if generation != self.generation:
            logger.info(f"Dropping stale timesheet load for {window.first}..{window.last}")
            return
        self.store.load(entries, self.catalog)

    async def navigate_week(self, direction: int) -> None:
        await self._move_to(self.window.shift_weeks(direction))

    async def navigate_month(self, direction: int) -> None:
        await self._move_to(self.window.shift_months(direction))

    async def _move_to(self, window: WeekWindow) -> None:
        self.window = window
        self.store.switch_window(window)
        await self.load_week()

    def update_hour(self, row_id: str, day_index: int, value: float) -> TimesheetRow:
        try:
            row = self.engine.update_hour(row_id, day_index, value)
        except LockedCellError as e:
            self.error = str(e)
            raise
        self.error = ""
        return row

    def select_project(self, row_id: str, project_name: str) -> TimesheetRow:
        return self.engine.select_project(row_id, project_name)

    def select_activity(self, row_id: str, activity: str) -> TimesheetRow:
        return self.engine.select_activity(row_id, activity)

    def add_row(self) -> TimesheetRow:
        return self.store.add_row()

    def remove_row(self, row_id: str) -> bool:
        return self.store.remove_row(row_id)

    async def submit(self) -> SubmitResult:
        self._require_user()
        generation = self.generation
        self.error = ""
        try:
            return await self.coordinator.submit(is_current=lambda: self.generation == generation)
        except TimesheetGridError as e:
            self.error = str(e)
            raise

    async def update_entry(
        self,
        entry_id: int,
        project_id: int,
        activity_type: str,
        entry_date: date,
        hours_worked: float,
        description: str = "",
    ) -> None:
        """Replace a saved entry through the backend, then rebuild the week"""
        user = self._require_user()
        request = CreateTimesheetEntryRequest(
            employee_id=user.employee_id,
            project=project_id,
            activity_type=activity_type,
            date=entry_date,
            hours_worked=hours_worked,
            description=description,
        )
        try:
            await self.client.update_timesheet_entry(entry_id, request)
        except BackendError as e:
            self.error = str(e)
            raise
        logger.info(f"Updated timesheet entry {entry_id}")
        await self.load_week()

    async def delete_entry(self, entry_id: int) -> None:
        self._require_user()
        try:
            await self.client.delete_timesheet_entry(entry_id)
        except BackendError as e:
            self.error = str(e)
            raise
        await self.load_week()

    async def close(self) -> None:
        """Log out and discard everything held for this employee"""
        try:
            if self.current_user is not None:
                await self.client.logout()
        except BackendError:
            logger.exception("Logout failed")
        finally:
            await self.client.close()
            self.current_user = None
            self.coordinator = None
            self.catalog.projects = []
            self.catalog.activities = {}
            self.store.reset()
            self.generation += 1
            self.error = ""
