"""
Exercise items and the per-type strategies that build and mark them.

A strategy turns a sentence (as served by the API) into an immutable
:class:`ExerciseItem` and decides whether a student's answer matches.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

CLOZE_BLANK = '_____'

_WHITESPACE = re.compile(r'\s+')
_EDGE_PUNCTUATION = '.,;:!?¡¿"\'«»()'
_WORD = re.compile(r"[^\W\d_]+", re.UNICODE)


def normalize_answer(text: Optional[str]) -> str:
    """Casefold, collapse whitespace and drop surrounding punctuation. Accents stay."""
    if not text:
        return ''
    text = unicodedata.normalize('NFC', text)
    text = _WHITESPACE.sub(' ', text).strip().strip(_EDGE_PUNCTUATION).strip()
    return text.casefold()


@dataclass(frozen=True)
class ExerciseItem:
    """One presentable unit of a training or revision session."""

    sentence_id: Any
    prompt: str
    answer: str
    exercise_type: str
    audio_url: Optional[str] = None
    sentence: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def is_correct(self, student_answer: Optional[str]) -> bool:
        return get_strategy(self.exercise_type).matches(self.answer, student_answer)


class ExerciseStrategy:
    """Base strategy: exact match after normalization."""

    name = 'base'

    def build(self, sentence: Dict[str, Any]) -> ExerciseItem:
        raise NotImplementedError

    def matches(self, expected: str, student_answer: Optional[str]) -> bool:
        return normalize_answer(expected) == normalize_answer(student_answer)

    def _item(self, sentence, prompt, answer, audio_url=None) -> ExerciseItem:
        return ExerciseItem(
            sentence_id=sentence.get('id'),
            prompt=prompt or '',
            answer=answer or '',
            exercise_type=self.name,
            audio_url=audio_url,
            sentence=dict(sentence),
        )


class TranslationStrategy(ExerciseStrategy):
    """Show the translation, expect the sentence."""

    name = 'translation'

    def build(self, sentence):
        return self._item(sentence, sentence.get('translation'), sentence.get('sentence'), sentence.get('audioUrl'))


class ReverseTranslationStrategy(ExerciseStrategy):
    """Show the sentence, expect the translation."""

    name = 'reverse_translation'

    def build(self, sentence):
        return self._item(sentence, sentence.get('sentence'), sentence.get('translation'), sentence.get('audioUrl'))


class ClozeStrategy(ExerciseStrategy):
    """Blank out the longest word of the sentence; the translation is the hint."""

    name = 'cloze'

    def build(self, sentence):
        text = sentence.get('sentence') or ''
        words = list(_WORD.finditer(text))
        if not words:
            return self._item(sentence, text, text)
        # First of the longest words
        target = max(words, key=lambda m: len(m.group(0)))
        prompt = text[:target.start()] + CLOZE_BLANK + text[target.end():]
        translation = sentence.get('translation')
        if translation:
            prompt = f'{prompt} ({translation})'
        return self._item(sentence, prompt, target.group(0))


class AudioStrategy(ExerciseStrategy):
    """Dictation: play the recording, expect the sentence."""

    name = 'audio'

    def build(self, sentence):
        prompt = '' if sentence.get('audioUrl') else (sentence.get('translation') or '')
        return self._item(sentence, prompt, sentence.get('sentence'), sentence.get('audioUrl'))


STRATEGIES = {
    strategy.name: strategy
    for strategy in (TranslationStrategy(), ReverseTranslationStrategy(), ClozeStrategy(), AudioStrategy())
}


def get_strategy(exercise_type: str) -> ExerciseStrategy:
    try:
        return STRATEGIES[exercise_type]
    except KeyError:
        raise ValueError(f"Unknown exercise type: {exercise_type!r}") from None


def build_exercise_item(sentence: Dict[str, Any], exercise_type: str = 'translation') -> ExerciseItem:
    """Wrap a sentence as an exercise item of the given type."""
    return get_strategy(exercise_type).build(sentence)
