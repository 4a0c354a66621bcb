from collections import defaultdict
from datetime import date

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..calendar_resolver import (
    MesocycleSchedule,
    OutOfRange,
    calendar_days,
    last_microcycle_bounds,
    occurrence_date,
    resolve_day,
)
from ..day_state import DayState, InvalidTransition, SessionAction, derive_day_state, project_flags, transition
from ..exceptions import FieldValidationException, InvalidStateException, NotFoundException
from ..metrics import MESOCYCLE_RUNS_TOTAL, TRAINING_SESSIONS_FINISHED_TOTAL, TRAINING_SETS_LOGGED_TOTAL
from ..models import (
    Mesocycle,
    MesocycleRun,
    SessionExercise,
    SessionSet,
    TrainingDay,
    TrainingSession,
    utcnow,
)
from ..repositories.training_session_repository import TrainingSessionRepository
from ..schemas.mesocycle import REP_RANGE_MESSAGE
from ..set_performance import classify_set, summarize_session
from ..set_sequence import PRESCRIPTION_FIELDS, next_set_values, remove_and_renumber
from .mesocycle_service import MesocycleService, close_run, schedule_for
from .notification_service import NotificationService

logger = structlog.get_logger(__name__)


def materialize_session(
    user_id: str,
    run: MesocycleRun,
    template: TrainingDay,
    microcycle_number: int,
    day_number: int,
    session_date: date,
) -> TrainingSession:
    """Copy a training-day template into a new, not yet persisted, session."""
    return TrainingSession(
        user_id=user_id,
        run_id=run.id,
        training_day_id=template.id,
        microcycle_number=microcycle_number,
        day_number=day_number,
        date=session_date,
        status="open",
        exercises=[
            SessionExercise(
                number=exercise.number,
                exercise_id=exercise.exercise_id,
                exercise=exercise.exercise,
                notes=exercise.notes,
                sets=[
                    SessionSet(
                        number=s.number,
                        completed=False,
                        **{field: getattr(s, field) for field in PRESCRIPTION_FIELDS},
                    )
                    for s in sorted(exercise.sets, key=lambda s: s.number)
                ],
            )
            for exercise in sorted(template.exercises, key=lambda e: e.number)
        ],
    )


def set_counts(session: TrainingSession) -> dict[str, list[int]]:
    counts: dict[str, list[int]] = defaultdict(list)
    for exercise in sorted(session.exercises, key=lambda e: e.number):
        counts[str(exercise.exercise_id)].append(len(exercise.sets))
    return dict(counts)


def match_set_count(source: SessionExercise, target: SessionExercise) -> None:
    """Grow or shrink ``target`` to the number of sets in ``source``; completed sets are never dropped."""
    wanted = len(source.sets)
    source_sets = sorted(source.sets, key=lambda s: s.number)
    while len(target.sets) < wanted:
        template = source_sets[len(target.sets)]
        target.sets.append(
            SessionSet(
                number=max((s.number for s in target.sets), default=0) + 1,
                completed=False,
                **{field: getattr(template, field) for field in PRESCRIPTION_FIELDS},
            )
        )
    for extra in sorted(target.sets, key=lambda s: s.number, reverse=True):
        if len(target.sets) <= wanted or extra.completed:
            break
        target.sets.remove(extra)


class SessionService:
    def __init__(self, db: AsyncSession, user_id: str, today: date):
        self.db = db
        self.user_id = user_id
        self.today = today
        self.mesocycles = MesocycleService(db, user_id)
        self.sessions = TrainingSessionRepository(db, user_id)
        self.notifications = NotificationService(db, user_id)

    # -- projections -------------------------------------------------------

    @staticmethod
    def _calendar(schedule: MesocycleSchedule, current: date) -> schemas.CalendarResponse:
        first, last = last_microcycle_bounds(schedule)
        return schemas.CalendarResponse(
            start_date=schedule.start_date,
            end_date=schedule.end_date,
            last_microcycle_start=first,
            last_microcycle_end=last,
            days=[schemas.CalendarDayResponse.model_validate(day) for day in calendar_days(schedule, current)],
        )

    @staticmethod
    def _flags(state: DayState, is_future_session: bool = False) -> schemas.DayFlagsResponse:
        return schemas.DayFlagsResponse.model_validate(project_flags(state, is_future_session=is_future_session))

    def _empty_day(self, state: DayState, requested: date, mesocycle: Mesocycle | None = None):
        return schemas.CurrentDayResponse(
            state=state,
            date=requested,
            mesocycle=schemas.MesocycleRef.model_validate(mesocycle) if mesocycle is not None else None,
            flags=self._flags(state),
        )

    @staticmethod
    def _state(mesocycle: Mesocycle, run: MesocycleRun, session: TrainingSession) -> DayState:
        mesocycle_status = mesocycle.status if run.end_date is None else "completed"
        return derive_day_state(
            mesocycle_status=mesocycle_status,
            is_training_day=True,
            session_status=session.status,
            set_completion=[s.completed for s in session.all_sets],
        )

    async def _session_response(self, session: TrainingSession) -> schemas.SessionResponse:
        previous = await self.sessions.get_previous(session.date, session.training_day_id)
        previous_by_exercise = {e.exercise_id: e for e in previous.exercises} if previous else {}

        exercises = []
        for exercise in sorted(session.exercises, key=lambda e: e.number):
            previous_exercise = previous_by_exercise.get(exercise.exercise_id)
            previous_sets = {s.number: s for s in previous_exercise.sets} if previous_exercise else {}
            exercises.append(
                schemas.SessionExerciseResponse(
                    id=exercise.id,
                    number=exercise.number,
                    notes=exercise.notes,
                    exercise=schemas.ExerciseSummary.model_validate(exercise.exercise),
                    sets=[
                        schemas.SessionSetResponse(
                            id=s.id,
                            number=s.number,
                            rep_range_lower_bound=s.rep_range_lower_bound,
                            rep_range_upper_bound=s.rep_range_upper_bound,
                            rir=s.rir,
                            weight=s.weight,
                            completed=s.completed,
                            reps_completed=s.reps_completed,
                            performance=classify_set(previous_sets.get(s.number), s),
                        )
                        for s in sorted(exercise.sets, key=lambda s: s.number)
                    ],
                )
            )

        return schemas.SessionResponse(
            id=session.id,
            run_id=session.run_id,
            training_day_id=session.training_day_id,
            microcycle_number=session.microcycle_number,
            day_number=session.day_number,
            date=session.date,
            status=session.status,
            completed_at=session.completed_at,
            feedback=session.feedback,
            exercises=exercises,
        )

    async def _session_day(
        self, mesocycle: Mesocycle, run: MesocycleRun, session: TrainingSession
    ) -> schemas.CurrentDayResponse:
        state = self._state(mesocycle, run, session)
        is_future_session = session.date > self.today
        label = next((d.label for d in mesocycle.training_days if d.id == session.training_day_id), None)
        return schemas.CurrentDayResponse(
            state=state,
            date=session.date,
            mesocycle=schemas.MesocycleRef.model_validate(mesocycle),
            microcycle_number=session.microcycle_number,
            day_number=session.day_number,
            label=label,
            is_training_day=True,
            flags=self._flags(state, is_future_session),
            session=await self._session_response(session),
            calendar=self._calendar(schedule_for(mesocycle, run.start_date), session.date),
        )

    # -- lifecycle ---------------------------------------------------------

    async def _complete_if_expired(self, mesocycle: Mesocycle) -> bool:
        """Close the open run once today is past the planned end of the mesocycle."""
        if mesocycle.status != "active":
            return False
        schedule = schedule_for(mesocycle)
        if self.today <= schedule.end_date:
            return False

        run = mesocycle.open_run
        close_run(mesocycle, run, schedule.end_date)
        await self.db.commit()
        MESOCYCLE_RUNS_TOTAL.labels(event="auto_completed").inc()
        logger.info(
            "mesocycle_auto_completed",
            user_id=self.user_id,
            mesocycle_id=mesocycle.id,
            run_id=getattr(run, "id", None),
            end_date=str(schedule.end_date),
        )
        return True

    async def get_current_day(self, requested_date: date | None = None) -> schemas.CurrentDayResponse:
        requested = requested_date or self.today
        mesocycle = await self.mesocycles.get_active_mesocycle()
        if mesocycle is not None and await self._complete_if_expired(mesocycle):
            return self._empty_day(DayState.MESOCYCLE_COMPLETED, requested, mesocycle)

        if mesocycle is None:
            latest = await self.mesocycles.get_latest_run()
            if latest is not None and latest.end_date is not None:
                finished = await self.mesocycles.get_mesocycle(latest.mesocycle_id)
                return self._empty_day(DayState.MESOCYCLE_COMPLETED, requested, finished)
            return self._empty_day(DayState.NOT_STARTED, requested)

        run = mesocycle.open_run
        schedule = schedule_for(mesocycle)
        resolution = resolve_day(schedule, requested, self.today)
        if isinstance(resolution, OutOfRange):
            return schemas.CurrentDayResponse(
                state=DayState.OUT_OF_RANGE,
                date=requested,
                mesocycle=schemas.MesocycleRef.model_validate(mesocycle),
                out_of_range_reason=resolution.reason.value,
                flags=self._flags(DayState.OUT_OF_RANGE, requested > self.today),
                calendar=self._calendar(schedule, requested),
            )

        if not resolution.is_training_day:
            return schemas.CurrentDayResponse(
                state=DayState.ACTIVE_REST_DAY,
                date=requested,
                mesocycle=schemas.MesocycleRef.model_validate(mesocycle),
                microcycle_number=resolution.microcycle_number,
                day_number=resolution.day_number,
                flags=self._flags(DayState.ACTIVE_REST_DAY, resolution.is_future_session),
                calendar=self._calendar(schedule, requested),
            )

        session = await self.sessions.get_for_slot(run.id, resolution.microcycle_number, resolution.day_number)
        if session is None:
            template = next(d for d in mesocycle.training_days if d.id == resolution.training_day_id)
            session = materialize_session(
                self.user_id, run, template, resolution.microcycle_number, resolution.day_number, requested
            )
            # Future days are shown from the template without persisting anything
            if not resolution.is_future_session and not await self._persist_materialized(session):
                # Another request stored this slot first; read everything back
                return await self.get_current_day(requested)
        return await self._session_day(mesocycle, run, session)

    async def _persist_materialized(self, session: TrainingSession) -> bool:
        """Store a freshly materialised session; False when its slot is already taken."""
        microcycle_number, day_number = session.microcycle_number, session.day_number
        self.db.add(session)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                "training_session_materialize_conflict",
                user_id=self.user_id,
                microcycle_number=microcycle_number,
                day_number=day_number,
            )
            return False
        logger.info(
            "training_session_materialized",
            user_id=self.user_id,
            session_id=session.id,
            run_id=session.run_id,
            microcycle_number=session.microcycle_number,
            day_number=session.day_number,
        )
        return True

    async def _load_for(
        self, session_id: int, action: SessionAction
    ) -> tuple[TrainingSession, MesocycleRun, Mesocycle, DayState]:
        session = await self.sessions.get(session_id)
        if session is None:
            raise NotFoundException()
        run, mesocycle = await self.sessions.get_run_with_mesocycle(session.run_id)
        if run is None:
            raise NotFoundException()
        if run.end_date is None:
            await self._complete_if_expired(mesocycle)

        state = self._state(mesocycle, run, session)
        all_sets = session.all_sets
        try:
            transition(
                state,
                action,
                is_future_session=session.date > self.today,
                all_sets_completed=all(s.completed for s in all_sets),
            )
        except InvalidTransition as exc:
            logger.info(
                "training_session_transition_rejected",
                user_id=self.user_id,
                session_id=session_id,
                state=state.value,
                action=action.value,
            )
            raise InvalidStateException(exc.reason)
        return session, run, mesocycle, state

    async def get_session_day(self, session_id: int) -> schemas.CurrentDayResponse:
        session = await self.sessions.get(session_id)
        if session is None:
            raise NotFoundException()
        run, mesocycle = await self.sessions.get_run_with_mesocycle(session.run_id)
        if run is None:
            raise NotFoundException()
        return await self._session_day(mesocycle, run, session)

    async def _saved(self, session: TrainingSession, run: MesocycleRun, mesocycle: Mesocycle):
        await self.db.commit()
        session = await self.sessions.get(session.id, refresh=True)
        return await self._session_day(mesocycle, run, session)

    # -- set mutations -----------------------------------------------------

    async def add_set(self, session_id: int, session_exercise_id: int) -> schemas.CurrentDayResponse:
        session, run, mesocycle, _ = await self._load_for(session_id, SessionAction.ADD_SET)
        exercise = next((e for e in session.exercises if e.id == session_exercise_id), None)
        if exercise is None:
            raise NotFoundException()

        exercise.sets.append(SessionSet(completed=False, **next_set_values(exercise.sets)))
        logger.info("session_set_added", user_id=self.user_id, session_id=session_id, exercise_id=exercise.id)
        return await self._saved(session, run, mesocycle)

    async def update_set(
        self, session_id: int, set_id: int, payload: schemas.SessionSetUpdate
    ) -> schemas.CurrentDayResponse:
        action = SessionAction.LOG_SET if payload.logs_performance else SessionAction.UPDATE_SET
        session, run, mesocycle, _ = await self._load_for(session_id, action)
        target = next((s for s in session.all_sets if s.id == set_id), None)
        if target is None:
            raise NotFoundException()

        changes = payload.model_dump(exclude_unset=True)
        errors: dict[str, str] = {}
        lower = changes.get("rep_range_lower_bound", target.rep_range_lower_bound)
        upper = changes.get("rep_range_upper_bound", target.rep_range_upper_bound)
        if lower is None or upper is None or lower > upper:
            errors["rep_range_upper_bound"] = REP_RANGE_MESSAGE
        for field in ("rir", "completed"):
            if field in changes and changes[field] is None:
                errors[field] = "This field may not be empty."
        completed = changes.get("completed", target.completed)
        if completed and changes.get("reps_completed", target.reps_completed) is None:
            errors["reps_completed"] = "Enter the number of reps completed."
        if errors:
            raise FieldValidationException(errors)

        newly_completed = completed and not target.completed
        for field, value in changes.items():
            setattr(target, field, value)

        if newly_completed:
            TRAINING_SETS_LOGGED_TOTAL.inc()
        logger.info(
            "session_set_updated",
            user_id=self.user_id,
            session_id=session_id,
            set_id=set_id,
            fields=sorted(changes),
        )
        return await self._saved(session, run, mesocycle)

    async def remove_set(self, session_id: int, set_id: int) -> schemas.CurrentDayResponse:
        session, run, mesocycle, _ = await self._load_for(session_id, SessionAction.REMOVE_SET)
        for exercise in session.exercises:
            target = next((s for s in exercise.sets if s.id == set_id), None)
            if target is not None:
                remove_and_renumber(exercise.sets, target)
                break
        else:
            raise NotFoundException()

        logger.info("session_set_removed", user_id=self.user_id, session_id=session_id, set_id=set_id)
        return await self._saved(session, run, mesocycle)

    # -- finish / reopen ---------------------------------------------------

    async def _carry_forward(self, mesocycle: Mesocycle, run: MesocycleRun, session: TrainingSession) -> None:
        """Give the next occurrence of this day the set counts the session finished with."""
        schedule = schedule_for(mesocycle, run.start_date)
        target_microcycle = session.microcycle_number + 1
        target_date = occurrence_date(schedule, target_microcycle, session.day_number)
        if target_date is None:
            return

        upcoming = await self.sessions.get_for_slot(run.id, target_microcycle, session.day_number)
        if upcoming is None:
            template = next((d for d in mesocycle.training_days if d.id == session.training_day_id), None)
            if template is None:
                return
            upcoming = materialize_session(
                self.user_id, run, template, target_microcycle, session.day_number, target_date
            )
            self.db.add(upcoming)
        elif upcoming.status != "open":
            return

        targets: dict[int, list[SessionExercise]] = defaultdict(list)
        for exercise in sorted(upcoming.exercises, key=lambda e: e.number):
            targets[exercise.exercise_id].append(exercise)
        sources: dict[int, list[SessionExercise]] = defaultdict(list)
        for exercise in sorted(session.exercises, key=lambda e: e.number):
            sources[exercise.exercise_id].append(exercise)

        for exercise_id, source_exercises in sources.items():
            for source, target in zip(source_exercises, targets.get(exercise_id, [])):
                match_set_count(source, target)

        logger.info(
            "training_session_set_counts_carried_forward",
            user_id=self.user_id,
            session_id=session.id,
            microcycle_number=target_microcycle,
            day_number=session.day_number,
        )

    async def finish_session(self, session_id: int, payload: schemas.SessionFinish) -> schemas.CurrentDayResponse:
        session, run, mesocycle, state = await self._load_for(session_id, SessionAction.FINISH)
        is_update = state is DayState.COMPLETED_EDITABLE

        session.status = "completed"
        session.feedback = payload.feedback
        session.completed_at = utcnow()

        counts = set_counts(session)
        if not is_update or counts != session.propagated_set_counts:
            await self._carry_forward(mesocycle, run, session)
            session.propagated_set_counts = counts

        await self.notifications.queue(
            "Session updated successfully." if is_update else "Session finished successfully."
        )
        response = await self._saved(session, run, mesocycle)

        TRAINING_SESSIONS_FINISHED_TOTAL.labels(mode="update" if is_update else "finish").inc()
        logger.info(
            "training_session_finished",
            user_id=self.user_id,
            session_id=session_id,
            is_update=is_update,
        )
        return response

    async def reopen_session(self, session_id: int) -> schemas.CurrentDayResponse:
        session, run, mesocycle, _ = await self._load_for(session_id, SessionAction.REOPEN)
        session.status = "reopened"
        logger.info("training_session_reopened", user_id=self.user_id, session_id=session_id)
        return await self._saved(session, run, mesocycle)

    async def get_summary(self, session_id: int) -> schemas.SessionSummaryResponse:
        session = await self.sessions.get(session_id)
        if session is None:
            raise NotFoundException()
        previous = await self.sessions.get_previous(session.date, session.training_day_id)
        summary = summarize_session(session.exercises, previous.exercises if previous else ())
        return schemas.SessionSummaryResponse(
            session_id=session.id,
            sets=summary.sets,
            total_volume=summary.total_volume,
            progressions=summary.progressions,
        )
