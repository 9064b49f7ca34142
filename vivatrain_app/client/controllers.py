"""
Client controllers.

Each controller owns a view, subscribes to its events and talks to the API
through :class:`~vivatrain_app.client.api.ApiClient`. Failed API calls
become error alerts; the controller stays usable afterwards.
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from vivatrain_app.logics.revision_schedule import RevisionState, schedule_next
from .api import ApiClient, ApiError
from .audio import AudioAttachmentCoordinator
from .config import ClientConfig
from .exercises import ExerciseItem, build_exercise_item
from .session import REASK_OFFSET, FinishedRecord, SessionQueue, SessionTally
from .storage import LocalStore
from .views import AlertView, Navigator, Subscription, View

logger = logging.getLogger(__name__)

HOME_URL = '/'
LOGIN_URL = '/login'


class Controller:
    """Base for controllers: a view plus the capabilities handlers need."""

    def __init__(
        self,
        view: View,
        api: Optional[ApiClient] = None,
        alerts: Optional[AlertView] = None,
        navigator: Optional[Navigator] = None,
        config: Optional[ClientConfig] = None,
    ):
        self.view = view
        self.config = config or ClientConfig()
        self.api = api or ApiClient(self.config)
        self.alerts = alerts or AlertView()
        self.navigator = navigator or Navigator()
        self._subscriptions: List[Subscription] = []

    def listen(self, event: str, handler) -> None:
        self._subscriptions.append(self.view.on(event, handler))

    async def handle(self, event: str, **payload) -> List[Any]:
        """Dispatch an event through the view, as if the user triggered it."""
        return await self.view.emit(event, **payload)

    async def redirect(self, url: str) -> None:
        await self.navigator.assign_after(url, self.config.redirect_delay)

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions.clear()


# --- Accounts ---

class LoginController(Controller):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.listen('submit', self.do_login)

    async def do_login(self, email=None, password=None, **_):
        try:
            await self.api.login(email, password)
        except ApiError as err:
            self.alerts.show('error', err.message)
            return False

        self.alerts.show('success', 'Logged in successfully!')
        await self.redirect(HOME_URL)
        return True


class LogoutController(Controller):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.listen('click', self.do_logout)

    async def do_logout(self, **_):
        try:
            await self.api.logout()
        except ApiError as err:
            self.alerts.show('error', err.message)
            return False

        self.alerts.show('success', 'Logged out!')
        await self.redirect(LOGIN_URL)
        return True


class SignupController(Controller):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.listen('submit', self.do_signup)

    async def do_signup(self, name=None, email=None, password=None, password_confirm=None, class_code=None, **_):
        try:
            await self.api.signup(name, email, password, password_confirm, class_code)
        except ApiError as err:
            self.alerts.show('error', err.message)
            return False

        self.alerts.show('success', 'Signed up successfully!')
        await self.redirect(HOME_URL)
        return True


# --- Authoring ---

class CreateSentenceController(Controller):
    """Create sentences, attaching the recording the view uploads."""

    def __init__(self, view: View, *args, coordinator: Optional[AudioAttachmentCoordinator] = None, **kwargs):
        super().__init__(view, *args, **kwargs)
        self.coordinator = coordinator or AudioAttachmentCoordinator(view)
        self.listen('save', self.do_save)

    async def do_save(self, sentence=None, translation=None, level=None, viva_ref=None, tense=None, grammar=None,
                      has_audio=False, **_):
        audio_url = None
        if has_audio:
            audio_url = await self.coordinator.request_audio_url()

        try:
            created = await self.api.create_sentence(
                sentence, translation, level=level, viva_ref=viva_ref, tense=tense, grammar=grammar,
                audio_url=audio_url,
            )
        except ApiError as err:
            self.alerts.show('error', err.message)
            return None

        self.view.clear_form_data()
        self.alerts.show('success', 'Sentence created')
        return created


class CreateTaskRandomController(Controller):
    """One-shot task creation from every sentence matching a search."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.listen('submit', self.do_create)

    async def do_create(self, search_params=None, task_details=None, **_):
        try:
            sentences = await self.api.get_sentences(search_params)
            details = dict(task_details or {})
            details['sentences'] = [sentence['id'] for sentence in sentences]
            task = await self.api.create_task(details)
        except ApiError as err:
            self.alerts.show('error', err.message)
            return None

        self.alerts.show('success', 'Task created')
        return task


class TaskAuthoringController(Controller):
    """
    Pick sentences for a task.

    ``available`` and ``selected`` are disjoint, keyed by sentence id and
    kept in insertion order.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.available: Dict[Any, dict] = {}
        self.selected: Dict[Any, dict] = {}
        self.listen('filter_update', self.do_filter_update)
        self.listen('add_sentence', self.do_add_sentence)
        self.listen('remove_sentence', self.do_remove_sentence)
        self.listen('save', self.do_save)
        self.listen('delete', self.do_delete)

    def _refresh(self) -> None:
        self.view.update_display(list(self.available.values()), list(self.selected.values()))

    async def do_filter_update(self, criteria: Optional[Mapping[str, Any]] = None, **_):
        try:
            sentences = await self.api.get_sentences(criteria or {})
        except ApiError as err:
            self.alerts.show('error', err.message)
            return None

        self.available = {s['id']: s for s in sentences if s['id'] not in self.selected}
        self._refresh()
        return list(self.available.values())

    def do_add_sentence(self, sentence_id=None, **_) -> bool:
        if sentence_id in self.selected or sentence_id not in self.available:
            return False
        self.selected[sentence_id] = self.available.pop(sentence_id)
        self._refresh()
        return True

    def do_remove_sentence(self, sentence_id=None, **_) -> bool:
        if sentence_id not in self.selected:
            return False
        self.available[sentence_id] = self.selected.pop(sentence_id)
        self._refresh()
        return True

    async def do_save(self, task_details: Optional[Mapping[str, Any]] = None, **_):
        details = dict(task_details or {})
        details['sentences'] = list(self.selected)
        try:
            task = await self.api.create_task(details)
        except ApiError as err:
            self.alerts.show('error', err.message)
            return None

        self.alerts.show('success', 'Task created')
        self.selected.clear()
        self._refresh()
        return task

    async def do_delete(self, task_id=None, **_) -> bool:
        try:
            await self.api.delete_task(task_id)
        except ApiError as err:
            self.alerts.show('error', err.message)
            return False

        self.view.delete_row(task_id)
        self.alerts.show('success', 'Task deleted')
        return True


# --- Sessions ---

class SessionController(Controller):
    """
    Shared queue handling for training and revision sessions.

    Subclasses decide what an answer does and what completion means.
    """

    def __init__(self, view: View, entries: Iterable[Any], *args, **kwargs):
        super().__init__(view, *args, **kwargs)
        self.queue = SessionQueue(entries)
        self.tally = SessionTally(initial_count=len(self.queue))
        self.completed = False
        self._completing = False
        self.listen('answer', self.do_answer)
        self.listen('next', self.advance)

    def exercise_of(self, entry) -> ExerciseItem:
        return entry

    def do_answer(self, student_answer=None, is_correct=None, **_):
        raise NotImplementedError

    def _update_counts(self) -> None:
        self.view.update_counts(self.tally.correct_count, self.tally.incorrect_count, len(self.queue))

    async def start(self):
        return await self.advance()

    async def advance(self, **_):
        """Present the front item, or finish the session when none is left."""
        entry = self.queue.front
        if entry is None:
            await self._complete_once()
            return None

        item = self.exercise_of(entry)
        self.view.prompt = item.prompt
        self.view.answer = item.answer
        self.view.audio_url = item.audio_url
        self._update_counts()
        return item

    async def _complete_once(self) -> None:
        if self._completing:
            return
        self._completing = True
        await self.complete()
        self.completed = True

    async def complete(self) -> None:
        self.view.finish(self.tally)

    def _take_front(self, student_answer, is_correct):
        """Remove the front entry and judge the answer; ``None`` when the queue is empty."""
        if not self.queue:
            logger.warning("Answer received after the session queue emptied; ignoring it")
            return None, None
        entry = self.queue.pop_front()
        if is_correct is None:
            is_correct = self.exercise_of(entry).is_correct(student_answer)
        is_correct = bool(is_correct)
        self.tally.record(is_correct)
        return entry, is_correct


class TrainController(SessionController):
    """Training session: missed items come back, results are sent at the end."""

    def __init__(
        self,
        view: View,
        items: Iterable[ExerciseItem],
        *args,
        exercise_type: str = 'translation',
        student_task_id: Any = None,
        return_url: Optional[str] = HOME_URL,
        **kwargs,
    ):
        super().__init__(view, items, *args, **kwargs)
        self.exercise_type = exercise_type
        self.student_task_id = student_task_id
        self.return_url = return_url
        self.finished = FinishedRecord()
        self.results_sent = False

    @classmethod
    def from_sentences(cls, view: View, sentences: Iterable[dict], exercise_type: str = 'translation', **kwargs):
        items = [build_exercise_item(sentence, exercise_type) for sentence in sentences]
        return cls(view, items, exercise_type=exercise_type, **kwargs)

    @classmethod
    def from_storage(cls, view: View, storage: LocalStore, **kwargs):
        """Build the session from the data the training page stored."""
        return cls.from_sentences(
            view,
            storage.get_local('sentences', []),
            storage.get_local('exerciseType') or 'translation',
            student_task_id=storage.get_local('studentTask'),
            **kwargs,
        )

    def do_answer(self, student_answer=None, is_correct=None, **_):
        return self.submit_answer(student_answer, is_correct)

    def submit_answer(self, student_answer: Optional[str], is_correct: Optional[bool] = None) -> Optional[bool]:
        """
        Judge the front item.

        A wrong answer puts the item back at ``min(len(queue), 3)``.
        Returns the verdict, or ``None`` once the queue is empty.
        """
        item, is_correct = self._take_front(student_answer, is_correct)
        if item is None:
            return None

        self.finished.append(item, student_answer, is_correct)
        if not is_correct:
            self.queue.reinsert(item, REASK_OFFSET)
        self._update_counts()
        return is_correct

    async def complete(self) -> None:
        # The view hears about the end only once the submission has settled
        await self.send_results_to_server()
        self.view.finish(self.tally)
        if self.return_url:
            await self.redirect(self.return_url)

    async def send_results_to_server(self) -> bool:
        if self.student_task_id is None:
            logger.warning("Training session has no student task; results not sent")
            self.alerts.show('error', 'This session is not linked to a task, so results were not saved.')
            return False

        try:
            await self.api.send_results(
                self.student_task_id,
                self.tally.correct_count,
                self.tally.incorrect_count,
                self.finished.to_list(),
                initial_count=self.tally.initial_count,
            )
        except ApiError as err:
            self.alerts.show('error', err.message)
            return False

        self.results_sent = True
        self.alerts.show('success', 'Results saved')
        return True


@dataclass(frozen=True)
class RevisionCard:
    """A revision item as the session sees it."""

    revision_id: Any
    item: ExerciseItem
    state: RevisionState


class ReviseController(SessionController):
    """
    Revision session: each item is shown once and its new schedule is
    saved straight away.
    """

    def __init__(
        self,
        view: View,
        cards: Iterable[RevisionCard],
        *args,
        today: Optional[datetime.date] = None,
        **kwargs,
    ):
        super().__init__(view, cards, *args, **kwargs)
        self.today = today
        self.updated: Dict[Any, RevisionState] = {}

    @classmethod
    def from_revision_items(cls, view: View, revision_items: Iterable[dict], exercise_type: str = 'translation',
                            **kwargs):
        cards = [
            RevisionCard(
                revision_id=data['id'],
                item=build_exercise_item(data.get('sentence') or {}, exercise_type),
                state=RevisionState.from_dict(data),
            )
            for data in revision_items
        ]
        return cls(view, cards, **kwargs)

    @classmethod
    def from_storage(cls, view: View, storage: LocalStore, **kwargs):
        return cls.from_revision_items(
            view,
            storage.get_local('revisionItems', []),
            storage.get_local('exerciseType') or 'translation',
            **kwargs,
        )

    def exercise_of(self, entry: RevisionCard) -> ExerciseItem:
        return entry.item

    async def do_answer(self, student_answer=None, is_correct=None, **_):
        return await self.submit_answer(student_answer, is_correct)

    async def submit_answer(self, student_answer: Optional[str], is_correct: Optional[bool] = None):
        """Judge the front card, reschedule it and persist the new schedule."""
        card, is_correct = self._take_front(student_answer, is_correct)
        if card is None:
            return None

        new_state = schedule_next(card.state, is_correct, today=self.today)
        self.updated[card.revision_id] = new_state
        self._update_counts()
        try:
            await self.api.update_revision_item(card.revision_id, new_state.to_dict())
        except ApiError as err:
            self.alerts.show('error', err.message)
        return new_state
