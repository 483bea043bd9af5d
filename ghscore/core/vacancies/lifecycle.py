"""
Vacancy lifecycle management.

Creates and patches vacancies, enforces the state transition table and
the close-date rule (a vacancy has an actual close date exactly when it is
filled), and derives the days-open and SLA indicators shown on the board.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from ghscore.core.errors import ConflictError, NotFoundError, StoreError, ValidationError
from ghscore.core.notifications.fanout import NotificationFanout, get_notification_fanout
from ghscore.data.models.vacancy import Vacancy, VacancyCreate, VacancyUpdate
from ghscore.data.repositories.organization_repository import (
    SiteRepository,
    get_site_repository,
)
from ghscore.data.repositories.vacancy_repository import (
    VacancyRepository,
    get_vacancy_repository,
)
from ghscore.utils.constants import (
    KANBAN_COLUMNS,
    SLA_URGENT_THRESHOLD_DAYS,
    VACANCY_TRANSITIONS,
    AuditAction,
    AuditType,
    MoveDirection,
    NotificationType,
    SlaLevel,
    VacancyState,
)
from ghscore.utils.logger import LoggerMixin, audit_log

SECONDS_PER_DAY = 86400

# Fields a patch may not set to null
NON_NULLABLE_FIELDS = frozenset({
    "title", "site_id", "state", "priority", "opened_at", "estimated_close_at",
    "sla_target_days", "approved_budget", "max_budget", "base_salary",
    "offered_salary", "vacancy_cost",
})


# =============================================================================
# Derived indicators
# =============================================================================


@dataclass(frozen=True)
class SlaStatus:
    """SLA adherence of a vacancy; days is None only when completed."""

    level: SlaLevel
    days: Optional[int] = None

    @property
    def label(self) -> str:
        if self.level == SlaLevel.COMPLETED:
            return "Completed"
        elif self.level == SlaLevel.OVERDUE:
            return f"Overdue by {self.days} days"
        elif self.level == SlaLevel.URGENT:
            return f"{self.days} days left"
        return f"On track ({self.days} days left)"

    @property
    def is_overdue(self) -> bool:
        return self.level == SlaLevel.OVERDUE

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level.value, "days": self.days, "label": self.label}


def _ceil_days(delta_seconds: float) -> int:
    return math.ceil(delta_seconds / SECONDS_PER_DAY)


def compute_days_open(vacancy: Vacancy, now: Optional[datetime] = None) -> int:
    """
    Days a vacancy has been (or was) open, rounded up.

    Uses the actual close date when present, else ``now``. A negative
    result (opening date in the future) is returned as-is.
    """
    end = vacancy.actual_close_at or now or datetime.utcnow()
    return _ceil_days((end - vacancy.opened_at).total_seconds())


def compute_sla_status(vacancy: Vacancy, now: Optional[datetime] = None) -> SlaStatus:
    """Classify a vacancy against its estimated close date."""
    if vacancy.state == VacancyState.FILLED:
        return SlaStatus(SlaLevel.COMPLETED)

    now = now or datetime.utcnow()
    days_remaining = _ceil_days((vacancy.estimated_close_at - now).total_seconds())

    if days_remaining < 0:
        return SlaStatus(SlaLevel.OVERDUE, abs(days_remaining))
    elif days_remaining <= SLA_URGENT_THRESHOLD_DAYS:
        return SlaStatus(SlaLevel.URGENT, days_remaining)
    return SlaStatus(SlaLevel.ON_TRACK, days_remaining)


def next_column(state: VacancyState, direction: MoveDirection) -> Optional[VacancyState]:
    """Neighbouring Kanban column, or None when the move is out of bounds."""
    state = VacancyState(state)
    if state not in KANBAN_COLUMNS:
        return None
    index = KANBAN_COLUMNS.index(state)
    index += 1 if MoveDirection(direction) == MoveDirection.NEXT else -1
    if 0 <= index < len(KANBAN_COLUMNS):
        return KANBAN_COLUMNS[index]
    return None


# =============================================================================
# Kanban move command
# =============================================================================


@dataclass
class StageMoveCommand:
    """
    Optimistic Kanban move of a vacancy.

    The local copy is changed first; if persisting fails, revert() puts
    back the previous state and close date.
    """

    vacancy: Vacancy
    direction: MoveDirection
    target: Optional[VacancyState] = field(init=False)
    previous_state: VacancyState = field(init=False)
    previous_close: Optional[datetime] = field(init=False)
    previous_public: bool = field(init=False)

    def __post_init__(self) -> None:
        self.previous_state = VacancyState(self.vacancy.state)
        self.previous_close = self.vacancy.actual_close_at
        self.previous_public = self.vacancy.is_public
        self.target = next_column(self.previous_state, self.direction)

    @property
    def is_noop(self) -> bool:
        return self.target is None

    @property
    def intended_change(self) -> tuple[VacancyState, Optional[VacancyState]]:
        return self.previous_state, self.target

    def apply(self, now: Optional[datetime] = None) -> None:
        if self.target is None:
            return
        self.vacancy.state = self.target.value
        if self.target == VacancyState.FILLED:
            self.vacancy.actual_close_at = now or datetime.utcnow()
        else:
            self.vacancy.actual_close_at = None
        self.vacancy.is_public = self.target == VacancyState.OPEN

    def revert(self) -> None:
        self.vacancy.state = self.previous_state.value
        self.vacancy.actual_close_at = self.previous_close
        self.vacancy.is_public = self.previous_public

    def execute(
        self,
        persist: Callable[[Vacancy], Optional[Vacancy]],
        now: Optional[datetime] = None,
    ) -> Vacancy:
        """Apply locally, persist, and revert when the store rejects the write."""
        if self.is_noop:
            return self.vacancy

        self.apply(now)
        try:
            saved = persist(self.vacancy)
        except PyMongoError as e:
            self.revert()
            raise StoreError("The vacancy could not be moved, please retry") from e

        if saved is None:
            self.revert()
            raise NotFoundError(f"Vacancy {self.vacancy.id} not found")
        return saved


# =============================================================================
# Lifecycle manager
# =============================================================================


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class VacancyLifecycleManager(LoggerMixin):
    """Service for vacancy creation, updates and board moves."""

    def __init__(
        self,
        vacancies: Optional[VacancyRepository] = None,
        sites: Optional[SiteRepository] = None,
        fanout: Optional[NotificationFanout] = None,
    ):
        self.vacancies = vacancies or get_vacancy_repository()
        self.sites = sites or get_site_repository()
        self.fanout = fanout or get_notification_fanout()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_vacancy(self, tenant_id: str, vacancy_id: str) -> Vacancy:
        vacancy = self.vacancies.get_for_tenant(tenant_id, vacancy_id)
        if vacancy is None:
            raise NotFoundError(f"Vacancy {vacancy_id} not found")
        return vacancy

    def list_vacancies(self, tenant_id: str, **filters: Any) -> list[Vacancy]:
        return self.vacancies.list_vacancies(tenant_id, **filters)

    def get_next_code(self, tenant_id: str) -> str:
        """Peek at the next requisition code without consuming it."""
        return self.vacancies.peek_next_code(tenant_id)

    def summarize(
        self,
        vacancy: Vacancy,
        now: Optional[datetime] = None,
        site_names: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        """Vacancy fields plus site name, days open and SLA status."""
        now = now or datetime.utcnow()
        summary = vacancy.model_dump_api()
        summary["site_name"] = (site_names or {}).get(vacancy.site_id)
        summary["days_open"] = compute_days_open(vacancy, now)
        summary["sla"] = compute_sla_status(vacancy, now).to_dict()
        return summary

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_vacancy(
        self, tenant_id: str, data: VacancyCreate | dict[str, Any]
    ) -> list[Vacancy]:
        """
        Create one vacancy, or a batch of ``quantity`` identical ones.

        Each vacancy gets the next sequential requisition code of the
        tenant unless a code is supplied (single creation only).

        Raises:
            ValidationError: invalid fields, unknown site, or close date
                earlier than opening date
            ConflictError: the supplied requisition code is already used
        """
        if isinstance(data, dict):
            try:
                data = VacancyCreate.model_validate(data)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e, "Invalid vacancy") from e

        if data.estimated_close_at < data.opened_at:
            raise ValidationError(
                "Invalid vacancy",
                details=[{
                    "field": "estimated_close_at",
                    "message": "must not be earlier than opened_at",
                }],
            )

        site = self.sites.get_for_tenant(tenant_id, data.site_id)
        if site is None:
            raise ValidationError(
                "Invalid vacancy",
                details=[{"field": "site_id", "message": "unknown site"}],
            )

        supplied_code = data.requisition_code.strip() if data.requisition_code else None
        if supplied_code and data.quantity > 1:
            raise ValidationError(
                "A requisition code cannot be supplied for batch creation",
                details=[{"field": "requisition_code", "message": "use quantity 1"}],
            )
        if supplied_code and self.vacancies.code_exists(tenant_id, supplied_code):
            raise ConflictError(f"Requisition code {supplied_code} already exists")

        fields = data.model_dump(exclude={"requisition_code", "quantity"})
        created: list[Vacancy] = []
        for _ in range(data.quantity):
            if supplied_code:
                code = supplied_code
                self.vacancies.reserve_code(tenant_id, code)
            else:
                code = self.vacancies.allocate_code(tenant_id)

            vacancy = Vacancy(
                tenant_id=tenant_id,
                requisition_code=code,
                company_id=site.company_id,
                state=VacancyState.OPEN,
                is_public=True,
                **fields,
            )
            try:
                created.append(self.vacancies.create(vacancy))
            except DuplicateKeyError as e:
                raise ConflictError(f"Requisition code {code} already exists") from e

            audit_log(
                AuditAction.VACANCY_CREATED.value,
                {"tenant_id": tenant_id, "requisition_code": code, "site_id": data.site_id},
                audit_type=AuditType.TRANSITION,
            )

        self.logger.info(
            f"Created {len(created)} vacancies for tenant {tenant_id}: "
            f"{', '.join(v.requisition_code for v in created)}"
        )
        return created

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def update_vacancy(
        self,
        tenant_id: str,
        vacancy_id: str,
        patch: VacancyUpdate | dict[str, Any],
        now: Optional[datetime] = None,
    ) -> Vacancy:
        """
        Patch the mutable fields of a vacancy.

        Filling a vacancy defaults its close date to now; a close date
        without a state implies filled; any other state clears the close
        date. Only open vacancies stay published.
        """
        if isinstance(patch, dict):
            if "requisition_code" in patch:
                raise ValidationError(
                    "The requisition code cannot be changed",
                    details=[{"field": "requisition_code", "message": "immutable"}],
                )
            try:
                patch = VacancyUpdate.model_validate(patch)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e, "Invalid vacancy update") from e

        vacancy = self.get_vacancy(tenant_id, vacancy_id)
        now = now or datetime.utcnow()

        changes = {
            key: _plain(value)
            for key, value in patch.model_dump(exclude_unset=True).items()
            if not (value is None and key in NON_NULLABLE_FIELDS)
        }

        current_state = VacancyState(vacancy.state)
        new_state = changes.get("state")
        if new_state is None and changes.get("actual_close_at") is not None:
            new_state = VacancyState.FILLED.value

        if new_state is not None:
            new_state = VacancyState(new_state)
            if new_state != current_state and new_state not in VACANCY_TRANSITIONS[current_state]:
                raise ValidationError(
                    f"A vacancy cannot move from {current_state.value} to {new_state.value}",
                    details=[{"field": "state", "message": "transition not allowed"}],
                )
            changes["state"] = new_state.value
            if new_state == VacancyState.FILLED:
                changes["actual_close_at"] = (
                    changes.get("actual_close_at") or vacancy.actual_close_at or now
                )
            else:
                changes["actual_close_at"] = None
            changes["is_public"] = new_state == VacancyState.OPEN
        elif "actual_close_at" in changes and current_state == VacancyState.FILLED:
            # only reached when clearing the date on a filled vacancy
            raise ValidationError(
                "A filled vacancy must keep its close date",
                details=[{"field": "actual_close_at", "message": "required while filled"}],
            )

        if "site_id" in changes:
            site = self.sites.get_for_tenant(tenant_id, changes["site_id"])
            if site is None:
                raise ValidationError(
                    "Invalid vacancy update",
                    details=[{"field": "site_id", "message": "unknown site"}],
                )
            changes["company_id"] = site.company_id

        opened_at = changes.get("opened_at", vacancy.opened_at)
        estimated_close_at = changes.get("estimated_close_at", vacancy.estimated_close_at)
        if estimated_close_at < opened_at:
            raise ValidationError(
                "Invalid vacancy update",
                details=[{
                    "field": "estimated_close_at",
                    "message": "must not be earlier than opened_at",
                }],
            )

        if not changes:
            return vacancy

        updated = self.vacancies.update(vacancy.id, changes)
        if updated is None:
            raise NotFoundError(f"Vacancy {vacancy_id} not found")

        if VacancyState(updated.state) != current_state:
            self._on_state_changed(updated, current_state)
        return updated

    # -------------------------------------------------------------------------
    # Kanban
    # -------------------------------------------------------------------------

    def move_stage(
        self,
        tenant_id: str,
        vacancy_id: str,
        direction: MoveDirection,
        now: Optional[datetime] = None,
    ) -> Vacancy:
        """Move a vacancy one Kanban column; out-of-bounds moves are no-ops."""
        vacancy = self.get_vacancy(tenant_id, vacancy_id)
        command = StageMoveCommand(vacancy, MoveDirection(direction))
        if command.is_noop:
            self.logger.debug(
                f"Move {direction} of {vacancy.requisition_code} is out of bounds"
            )
            return vacancy

        previous_state, _ = command.intended_change
        saved = command.execute(
            lambda v: self.vacancies.set_state(v.id, v.state, v.actual_close_at),
            now=now,
        )
        self._on_state_changed(saved, previous_state)
        return saved

    # -------------------------------------------------------------------------
    # Internal Methods
    # -------------------------------------------------------------------------

    def _on_state_changed(self, vacancy: Vacancy, previous: VacancyState) -> None:
        audit_log(
            AuditAction.VACANCY_STATE_CHANGED.value,
            {
                "tenant_id": vacancy.tenant_id,
                "requisition_code": vacancy.requisition_code,
                "from": previous.value,
                "to": vacancy.state,
            },
            audit_type=AuditType.TRANSITION,
        )
        if vacancy.state == VacancyState.FILLED:
            self.fanout.notify_best_effort(
                NotificationType.VACANCY_FILLED,
                {"vacancy_id": vacancy.id, "requisition_code": vacancy.requisition_code},
                vacancy.tenant_id,
                body=f"{vacancy.requisition_code} - {vacancy.title}",
            )


# Singleton instance
_lifecycle_manager: Optional[VacancyLifecycleManager] = None


def get_vacancy_lifecycle_manager() -> VacancyLifecycleManager:
    """Get the vacancy lifecycle manager singleton instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = VacancyLifecycleManager()
    return _lifecycle_manager
