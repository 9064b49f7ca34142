"""
Tests for the client controllers

Tests cover:
- Training sessions (queue discipline, tally, result submission)
- Revision sessions (per-item schedule updates)
- Task authoring and sentence creation
- Account controllers and redirects
"""

import asyncio
import datetime

import pytest

from vivatrain_app.client.api import ApiError
from vivatrain_app.client.config import ClientConfig
from vivatrain_app.client.controllers import (
    CreateSentenceController,
    CreateTaskRandomController,
    LoginController,
    LogoutController,
    ReviseController,
    SignupController,
    TaskAuthoringController,
    TrainController,
)
from vivatrain_app.client.storage import LocalStore
from vivatrain_app.client.views import AlertView, Navigator, View

SENTENCES = [
    {'id': 1, 'sentence': 'Ich habe einen Hund.', 'translation': 'I have a dog.', 'audioUrl': None},
    {'id': 2, 'sentence': 'Wir spielen Fußball.', 'translation': 'We play football.', 'audioUrl': None},
    {'id': 3, 'sentence': 'Es regnet.', 'translation': 'It is raining.', 'audioUrl': None},
]


class FakeApi:
    """Records calls; methods listed in ``fail`` raise ApiError."""

    def __init__(self, sentences=None, fail=(), log=None):
        self.sentences = list(sentences or [])
        self.fail = set(fail)
        self.calls = []
        self.log = log if log is not None else []

    async def _call(self, name, *args, result=None):
        await asyncio.sleep(0)
        self.calls.append((name,) + args)
        self.log.append(name)
        if name in self.fail:
            raise ApiError(f'{name} failed', 500)
        return result

    def called(self, name):
        return [call[1:] for call in self.calls if call[0] == name]

    async def login(self, email, password):
        return await self._call('login', email, password, result={})

    async def logout(self):
        return await self._call('logout', result={})

    async def signup(self, name, email, password, password_confirm, class_code=None):
        return await self._call('signup', name, email, password, password_confirm, class_code, result={})

    async def get_sentences(self, criteria=None):
        return await self._call('get_sentences', criteria, result=[dict(s) for s in self.sentences])

    async def create_sentence(self, sentence, translation, **fields):
        return await self._call('create_sentence', sentence, translation, fields, result={'id': 99})

    async def create_task(self, details):
        return await self._call('create_task', dict(details), result={'id': 10})

    async def delete_task(self, task_id):
        return await self._call('delete_task', task_id)

    async def send_results(self, student_task_id, correct_count, wrong_count, finished, initial_count=None):
        return await self._call('send_results', student_task_id, correct_count, wrong_count, finished, initial_count)

    async def update_revision_item(self, revision_id, changes):
        return await self._call('update_revision_item', revision_id, changes)


class FakeView(View):

    def __init__(self, log=None):
        super().__init__()
        self.log = log if log is not None else []
        self.prompt = None
        self.answer = None
        self.audio_url = None
        self.counts = []
        self.finished_with = []
        self.displays = []
        self.deleted_rows = []
        self.cleared = 0

    def update_counts(self, correct, incorrect, remaining):
        self.counts.append((correct, incorrect, remaining))

    def finish(self, tally):
        self.log.append('finish')
        self.finished_with.append(tally)

    def update_display(self, available, selected):
        self.displays.append(([s['id'] for s in available], [s['id'] for s in selected]))

    def delete_row(self, task_id):
        self.deleted_rows.append(task_id)

    def clear_form_data(self):
        self.cleared += 1


class RecordingAlerts(AlertView):

    def __init__(self):
        self.shown = []

    def show(self, kind, message):
        self.shown.append((kind, message))


def _capabilities(api):
    return {
        'api': api,
        'alerts': RecordingAlerts(),
        'navigator': Navigator(),
        'config': ClientConfig(redirect_delay=0),
    }


def _queue_ids(controller):
    return [item.sentence_id for item in controller.queue]


class TestTrainController:

    def _make(self, api=None, log=None, **kwargs):
        log = log if log is not None else []
        api = api or FakeApi(log=log)
        view = FakeView(log=log)
        kwargs.setdefault('student_task_id', 5)
        controller = TrainController.from_sentences(view, SENTENCES, 'translation', **_capabilities(api), **kwargs)
        return controller, view, api

    def test_missed_item_is_requeued(self):
        """[A,B,C]: A wrong gives [B,C,A], B right gives [C,A]."""
        controller, view, _ = self._make()

        assert controller.submit_answer('nope') is False
        assert _queue_ids(controller) == [2, 3, 1]

        assert controller.submit_answer('Wir spielen Fußball') is True
        assert _queue_ids(controller) == [3, 1]
        assert controller.tally.correct_count == 1
        assert controller.tally.incorrect_count == 1
        assert view.counts[-1] == (1, 1, 2)

    def test_queue_length_invariants(self):
        controller, _, _ = self._make()
        before = len(controller.queue)
        controller.submit_answer('wrong')
        assert len(controller.queue) == before
        controller.submit_answer(None, is_correct=True)
        assert len(controller.queue) == before - 1

    def test_reinsert_never_beyond_queue(self):
        controller, _, _ = self._make()
        controller.submit_answer(None, is_correct=True)
        controller.submit_answer(None, is_correct=True)
        # Only item 3 is left; missing it puts it straight back
        controller.submit_answer('wrong')
        assert _queue_ids(controller) == [3]

    def test_tally_matches_answers(self):
        controller, _, _ = self._make()
        verdicts = [False, True, False, True, True]
        for verdict in verdicts:
            controller.submit_answer('x', is_correct=verdict)
            assert controller.tally.answered == len(controller.finished)
        assert controller.tally.answered == len(verdicts)
        assert not controller.queue

    def test_answer_on_empty_queue_is_ignored(self):
        controller, _, _ = self._make()
        for _ in range(3):
            controller.submit_answer(None, is_correct=True)
        assert controller.submit_answer('late') is None
        assert controller.tally.answered == 3

    def test_advance_shows_front_item(self):
        controller, view, _ = self._make()
        asyncio.run(controller.start())
        assert view.prompt == 'I have a dog.'
        assert view.answer == 'Ich habe einen Hund.'
        assert view.counts == [(0, 0, 3)]

    def test_full_session_submits_once(self):
        log = []
        controller, view, api = self._make(log=log)

        async def scenario():
            await controller.start()
            await controller.handle('answer', student_answer='wrong')
            await controller.handle('next')
            for answer in ('Wir spielen Fußball.', 'Es regnet.', 'Ich habe einen Hund.'):
                await controller.handle('answer', student_answer=answer)
                await controller.handle('next')
            # A stray extra event after the end
            await controller.handle('next')

        asyncio.run(scenario())

        sends = api.called('send_results')
        assert len(sends) == 1
        student_task_id, correct, wrong, finished, initial_count = sends[0]
        assert (student_task_id, correct, wrong, initial_count) == (5, 3, 1, 3)
        assert [entry['isCorrect'] for entry in finished] == [False, True, True, True]
        assert finished[0] == {'sentence': SENTENCES[0], 'studentAnswer': 'wrong', 'isCorrect': False}

        assert log == ['send_results', 'finish']
        assert controller.results_sent is True
        assert controller.completed is True
        assert controller.alerts.shown == [('success', 'Results saved')]
        assert controller.navigator.location == '/'

    def test_failed_submission_alerts_and_finishes(self):
        log = []
        api = FakeApi(fail={'send_results'}, log=log)
        controller, view, _ = self._make(api=api, log=log)

        async def scenario():
            for _ in range(3):
                controller.submit_answer(None, is_correct=True)
            await controller.advance()

        asyncio.run(scenario())

        assert controller.alerts.shown == [('error', 'send_results failed')]
        assert controller.results_sent is False
        assert log == ['send_results', 'finish']
        assert controller.navigator.location == '/'

    def test_without_student_task_nothing_is_sent(self):
        controller, view, api = self._make(student_task_id=None, return_url=None)
        for _ in range(3):
            controller.submit_answer(None, is_correct=True)
        asyncio.run(controller.advance())

        assert api.called('send_results') == []
        assert controller.alerts.shown[0][0] == 'error'
        assert len(view.finished_with) == 1
        assert controller.navigator.location is None

    def test_from_storage(self):
        store = LocalStore({'sentences': SENTENCES[:2], 'exerciseType': 'reverse_translation', 'studentTask': 9})
        controller = TrainController.from_storage(FakeView(), store, **_capabilities(FakeApi()))
        assert controller.student_task_id == 9
        assert controller.exercise_type == 'reverse_translation'
        assert controller.queue.front.prompt == 'Ich habe einen Hund.'
        assert controller.tally.initial_count == 2

    def test_close_detaches_handlers(self):
        controller, view, _ = self._make()
        controller.close()
        asyncio.run(view.emit('answer', student_answer='wrong'))
        assert controller.tally.answered == 0


def _revision_items():
    return [
        {'id': 11, 'retestDays': 2, 'correctAttempts': 1, 'incorrectAttempts': 0, 'nextDue': '2024-03-01',
         'sentence': SENTENCES[0]},
        {'id': 12, 'retestDays': 9, 'correctAttempts': 2, 'incorrectAttempts': 0, 'nextDue': '2024-03-01',
         'sentence': SENTENCES[1]},
    ]


class TestReviseController:

    TODAY = datetime.date(2024, 3, 1)

    def _make(self, api=None, log=None):
        log = log if log is not None else []
        api = api or FakeApi(log=log)
        view = FakeView(log=log)
        controller = ReviseController.from_revision_items(
            view, _revision_items(), today=self.TODAY, **_capabilities(api)
        )
        return controller, view, api

    def test_correct_triples_interval(self):
        controller, _, api = self._make()
        state = asyncio.run(controller.submit_answer('Ich habe einen Hund.'))

        assert state.retest_days == 6
        assert state.correct_attempts == 2
        assert api.called('update_revision_item') == [(11, {
            'retestDays': 6,
            'correctAttempts': 2,
            'incorrectAttempts': 0,
            'nextDue': '2024-03-07',
        })]

    def test_incorrect_resets_interval(self):
        controller, _, api = self._make()
        asyncio.run(controller.submit_answer(None, is_correct=True))
        state = asyncio.run(controller.submit_answer('Wir spielen Tennis.'))

        assert state.retest_days == 1
        assert state.incorrect_attempts == 1
        assert state.next_due == datetime.date(2024, 3, 2)
        assert [call[0] for call in api.called('update_revision_item')] == [11, 12]

    def test_items_are_not_requeued(self):
        controller, _, _ = self._make()
        asyncio.run(controller.submit_answer('wrong'))
        assert [card.revision_id for card in controller.queue] == [12]

    def test_failed_update_keeps_session_going(self):
        controller, _, api = self._make(api=FakeApi(fail={'update_revision_item'}))
        asyncio.run(controller.submit_answer('wrong'))
        asyncio.run(controller.submit_answer('wrong'))

        assert controller.alerts.shown == [
            ('error', 'update_revision_item failed'),
            ('error', 'update_revision_item failed'),
        ]
        assert controller.tally.incorrect_count == 2
        assert set(controller.updated) == {11, 12}

    def test_completion_finishes_once_without_submission(self):
        log = []
        controller, view, api = self._make(log=log)

        async def scenario():
            await controller.start()
            for _ in range(2):
                await controller.handle('answer', student_answer='wrong')
                await controller.handle('next')
            await controller.handle('next')

        asyncio.run(scenario())

        assert len(view.finished_with) == 1
        assert api.called('send_results') == []
        assert log == ['update_revision_item', 'update_revision_item', 'finish']

    def test_from_storage(self):
        store = LocalStore({'revisionItems': _revision_items()})
        controller = ReviseController.from_storage(FakeView(), store, **_capabilities(FakeApi()))
        assert len(controller.queue) == 2
        assert controller.queue.front.item.prompt == 'I have a dog.'


class TestTaskAuthoringController:

    def _make(self, fail=()):
        api = FakeApi(sentences=SENTENCES, fail=fail)
        view = FakeView()
        return TaskAuthoringController(view, **_capabilities(api)), view, api

    def test_filter_add_remove_save(self):
        controller, view, api = self._make()

        async def scenario():
            await controller.handle('filter_update', criteria={'level': 'A1'})
            await controller.handle('add_sentence', sentence_id=3)
            await controller.handle('add_sentence', sentence_id=1)
            # Already selected: nothing happens
            await controller.handle('add_sentence', sentence_id=3)
            await controller.handle('filter_update', criteria={'level': 'A1'})
            await controller.handle('remove_sentence', sentence_id=1)
            return await controller.handle('save', task_details={'title': 'Unit 1', 'classId': 4})

        results = asyncio.run(scenario())

        assert api.called('get_sentences')[0] == ({'level': 'A1'},)
        assert view.displays[0] == ([1, 2, 3], [])
        assert view.displays[1] == ([1, 2], [3])
        assert view.displays[2] == ([2], [3, 1])
        # Refreshing the filter leaves selected sentences out of the available list
        assert view.displays[3] == ([2], [3, 1])
        assert view.displays[4] == ([2, 1], [3])
        assert api.called('create_task') == [({'title': 'Unit 1', 'classId': 4, 'sentences': [3]},)]
        assert results == [{'id': 10}]
        assert controller.selected == {}
        assert controller.alerts.shown == [('success', 'Task created')]

    def test_sets_stay_disjoint(self):
        controller, _, _ = self._make()
        asyncio.run(controller.do_filter_update({}))
        controller.do_add_sentence(sentence_id=2)
        assert not set(controller.available) & set(controller.selected)
        assert controller.do_remove_sentence(sentence_id=1) is False

    def test_save_failure_alerts(self):
        controller, _, _ = self._make(fail={'create_task'})
        result = asyncio.run(controller.do_save({'title': 'Empty'}))
        assert result is None
        assert controller.alerts.shown == [('error', 'create_task failed')]

    def test_delete(self):
        controller, view, api = self._make()
        assert asyncio.run(controller.do_delete(task_id=7)) is True
        assert api.called('delete_task') == [(7,)]
        assert view.deleted_rows == [7]

    def test_delete_failure_keeps_row(self):
        controller, view, _ = self._make(fail={'delete_task'})
        assert asyncio.run(controller.do_delete(task_id=7)) is False
        assert view.deleted_rows == []
        assert controller.alerts.shown == [('error', 'delete_task failed')]


class TestCreateTaskRandomController:

    def test_uses_every_matching_sentence(self):
        api = FakeApi(sentences=SENTENCES)
        controller = CreateTaskRandomController(FakeView(), **_capabilities(api))
        asyncio.run(controller.handle('submit', search_params='level=A1&random=true', task_details={'title': 'Mix'}))

        assert api.called('get_sentences') == [('level=A1&random=true',)]
        assert api.called('create_task') == [({'title': 'Mix', 'sentences': [1, 2, 3]},)]
        assert controller.alerts.shown == [('success', 'Task created')]


class TestCreateSentenceController:

    FIELDS = {'sentence': 'Es schneit.', 'translation': 'It is snowing.', 'level': 'A1'}

    def test_waits_for_upload(self):
        api = FakeApi()
        view = FakeView()
        controller = CreateSentenceController(view, **_capabilities(api))

        async def scenario():
            saving = asyncio.ensure_future(controller.handle('save', has_audio=True, **self.FIELDS))
            await asyncio.sleep(0)
            assert api.called('create_sentence') == []
            assert controller.coordinator.pending_count == 1
            await view.emit('save_file', url='/api/v1/audio/abc_snow.mp3')
            await saving

        asyncio.run(scenario())

        (sentence, translation, fields), = api.called('create_sentence')
        assert (sentence, translation) == ('Es schneit.', 'It is snowing.')
        assert fields['audio_url'] == '/api/v1/audio/abc_snow.mp3'
        assert fields['level'] == 'A1'
        assert view.cleared == 1
        assert controller.alerts.shown == [('success', 'Sentence created')]

    def test_without_audio(self):
        api = FakeApi()
        view = FakeView()
        controller = CreateSentenceController(view, **_capabilities(api))
        asyncio.run(controller.do_save(**self.FIELDS))

        (_, _, fields), = api.called('create_sentence')
        assert fields['audio_url'] is None

    def test_earlier_recording_not_attached_to_next_sentence(self):
        api = FakeApi()
        view = FakeView()
        controller = CreateSentenceController(view, **_capabilities(api))

        async def scenario():
            await view.emit('save_file', url='/api/v1/audio/first.mp3')
            await controller.handle('save', has_audio=False, **self.FIELDS)
            saving = asyncio.ensure_future(controller.handle('save', has_audio=True, **self.FIELDS))
            await asyncio.sleep(0)
            assert len(api.called('create_sentence')) == 1
            await view.emit('save_file', url='/api/v1/audio/second.mp3')
            await saving

        asyncio.run(scenario())

        urls = [fields['audio_url'] for _, _, fields in api.called('create_sentence')]
        assert urls == [None, '/api/v1/audio/second.mp3']

    def test_failure_keeps_form(self):
        view = FakeView()
        controller = CreateSentenceController(view, **_capabilities(FakeApi(fail={'create_sentence'})))
        assert asyncio.run(controller.do_save(**self.FIELDS)) is None
        assert view.cleared == 0
        assert controller.alerts.shown == [('error', 'create_sentence failed')]


class TestAccountControllers:

    @pytest.mark.parametrize('controller_class, event, payload, message, target', [
        (LoginController, 'submit', {'email': 'a@b.c', 'password': 'secret123'}, 'Logged in successfully!', '/'),
        (LogoutController, 'click', {}, 'Logged out!', '/login'),
        (SignupController, 'submit', {'name': 'A', 'email': 'a@b.c', 'password': 'secret123',
                                      'password_confirm': 'secret123', 'class_code': 'ABC123'},
         'Signed up successfully!', '/'),
    ])
    def test_success_redirects(self, controller_class, event, payload, message, target):
        controller = controller_class(FakeView(), **_capabilities(FakeApi()))
        assert asyncio.run(controller.handle(event, **payload)) == [True]
        assert controller.alerts.shown == [('success', message)]
        assert controller.navigator.location == target

    def test_login_failure_shows_server_message(self):
        controller = LoginController(FakeView(), **_capabilities(FakeApi(fail={'login'})))
        assert asyncio.run(controller.do_login(email='a@b.c', password='bad')) is False
        assert controller.alerts.shown == [('error', 'login failed')]
        assert controller.navigator.location is None

    def test_login_sends_credentials(self):
        api = FakeApi()
        controller = LoginController(FakeView(), **_capabilities(api))
        asyncio.run(controller.do_login(email='a@b.c', password='secret123'))
        assert api.called('login') == [('a@b.c', 'secret123')]
