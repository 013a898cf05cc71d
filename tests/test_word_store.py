"""
Unit tests for the CSV word store.
"""
from datetime import datetime, timedelta

import pytest

from hebvocab.errors import DuplicateWordError, WordNotFoundError
from hebvocab.vocab_matcher import KnownWord, match_text
from hebvocab.word_store import WordStore, create_word_store

CONJUGATIONS = [{"pronoun": "אני", "past": "הלכתי", "present": "הולך", "future": "אלך"}]


class TestWordStore:
    """Test word bank persistence."""

    def setup_method(self):
        self.now = datetime(2026, 1, 1, 12, 0, 0)

    def test_empty_store(self, tmp_path):
        store = WordStore(tmp_path)
        assert store.list_words() == []
        assert store.known_words() == []
        assert not store.words_file.exists()

    def test_add_and_reload(self, tmp_path):
        store = WordStore(tmp_path)
        word = store.add_word("ללכת", "caminar", CONJUGATIONS)

        reloaded = WordStore(tmp_path)
        stored = reloaded.get(word.id)
        assert stored.hebrew == "ללכת"
        assert stored.translation == "caminar"
        assert stored.conjugations == CONJUGATIONS
        assert stored.next_review_date is not None

    def test_duplicate_rejected_after_normalization(self, tmp_path):
        store = WordStore(tmp_path)
        store.add_word("מלך", "rey")
        with pytest.raises(DuplicateWordError):
            store.add_word("מֶלֶךְ", "king")

    def test_get_by_hebrew_ignores_niqqud(self, tmp_path):
        store = WordStore(tmp_path)
        word = store.add_word("שלום", "hola")
        assert store.get_by_hebrew("שָׁלוֹם").id == word.id
        assert store.get_by_hebrew("עולם") is None

    def test_list_newest_first(self, tmp_path):
        store = WordStore(tmp_path)
        older = store.add_word("ילד", "niño")
        newer = store.add_word("גדול", "grande")
        older.created_at = newer.created_at - timedelta(days=1)
        assert [w.id for w in store.list_words()] == [newer.id, older.id]

    def test_known_words_snapshot(self, tmp_path):
        store = WordStore(tmp_path)
        verb = store.add_word("ללכת", "caminar", CONJUGATIONS)
        known = store.known_words()
        assert known == [KnownWord("ללכת", "caminar", verb.id, True)]

    def test_snapshot_feeds_matcher(self, tmp_path):
        store = WordStore(tmp_path)
        store.add_word("ילד", "niño")
        result = match_text("והילד שיחק", store.known_words())
        assert [e.hebrew for e in result.known_vocab] == ["והילד"]
        assert result.unknown_tokens == ["שיחק"]

    def test_delete(self, tmp_path):
        store = WordStore(tmp_path)
        word = store.add_word("ילד", "niño")
        store.delete_word(word.id)
        assert WordStore(tmp_path).get(word.id) is None
        with pytest.raises(WordNotFoundError):
            store.delete_word(word.id)

    def test_review_correct_doubles_interval(self, tmp_path):
        store = WordStore(tmp_path)
        word = store.add_word("ילד", "niño")

        store.record_review(word.id, True, now=self.now)
        assert word.consecutive_correct == 1
        assert word.next_review_date == self.now + timedelta(days=1)

        store.record_review(word.id, True, now=self.now)
        assert word.next_review_date == self.now + timedelta(days=2)

    def test_review_wrong_resets_streak(self, tmp_path):
        store = WordStore(tmp_path)
        word = store.add_word("ילד", "niño")
        store.record_review(word.id, True, now=self.now)
        store.record_review(word.id, False, now=self.now)

        reloaded = WordStore(tmp_path).get(word.id)
        assert reloaded.consecutive_correct == 0
        assert reloaded.error_count == 1
        assert reloaded.next_review_date == self.now

    def test_review_unknown_word(self, tmp_path):
        with pytest.raises(WordNotFoundError):
            WordStore(tmp_path).record_review("missing", True)

    def test_due_words(self, tmp_path):
        store = WordStore(tmp_path)
        word = store.add_word("ילד", "niño")
        store.record_review(word.id, True, now=self.now)
        assert store.due_words(now=self.now) == []
        assert store.due_words(now=self.now + timedelta(days=2)) == [word]

    def test_unreadable_rows_skipped(self, tmp_path):
        store = WordStore(tmp_path)
        store.add_word("ילד", "niño")
        with open(store.words_file, 'a', encoding='utf-8') as f:
            f.write("bad,גדול,grande,not-a-date,,,,\n")

        reloaded = WordStore(tmp_path)
        assert [w.hebrew for w in reloaded.list_words()] == ["ילד"]

    def test_statistics(self, tmp_path):
        store = WordStore(tmp_path)
        store.add_word("ילד", "niño")
        store.add_word("ללכת", "caminar", CONJUGATIONS)
        stats = store.get_statistics()
        assert stats['total_words'] == 2
        assert stats['verbs'] == 1
        assert stats['weak_words'] == 0

    def test_create_from_config(self, tmp_path):
        store = create_word_store({'paths': {'data_dir': str(tmp_path / "bank")}})
        assert store.data_dir == tmp_path / "bank"
        assert store.data_dir.exists()

    def test_short_row_skipped(self, tmp_path):
        store = WordStore(tmp_path)
        store.add_word("ילד", "niño")
        with open(store.words_file, 'a', encoding='utf-8') as f:
            f.write("abc,גדול\n")

        reloaded = WordStore(tmp_path)
        assert [w.hebrew for w in reloaded.list_words()] == ["ילד"]

    def test_file_without_mastery_columns(self, tmp_path):
        (tmp_path / "words.csv").write_text(
            "id,hebrew,translation,created_at,conjugations,next_review_date,consecutive_correct,error_count\n"
            "w1,ילד,niño,2026-01-01T12:00:00,,,2,1\n",
            encoding='utf-8',
        )
        word = WordStore(tmp_path).get("w1")
        assert word.consecutive_correct == 2
        assert word.mastery_level == 0
        assert word.mastery == {}


class TestMastery:
    """Test mastery scores."""

    def test_update_mastery_clamped(self, tmp_path):
        store = WordStore(tmp_path)
        word = store.add_word("ילד", "niño")

        assert store.update_mastery(word.id, 150).mastery_level == 100
        assert store.update_mastery(word.id, -5).mastery_level == 0
        store.update_mastery(word.id, 40)
        assert WordStore(tmp_path).get(word.id).mastery_level == 40

    def test_update_pronoun_mastery(self, tmp_path):
        store = WordStore(tmp_path)
        word = store.add_word("ללכת", "caminar", CONJUGATIONS)

        store.update_pronoun_mastery(word.id, "past", "1s", 70)
        store.update_pronoun_mastery(word.id, "past", "2ms", 120)
        store.update_pronoun_mastery(word.id, "future", "1s", -1)

        reloaded = WordStore(tmp_path).get(word.id)
        assert reloaded.mastery == {"past": {"1s": 70, "2ms": 100}, "future": {"1s": 0}}

    def test_unknown_tense(self, tmp_path):
        store = WordStore(tmp_path)
        word = store.add_word("ללכת", "caminar", CONJUGATIONS)
        with pytest.raises(ValueError):
            store.update_pronoun_mastery(word.id, "imperative", "1s", 50)

    def test_unknown_word(self, tmp_path):
        store = WordStore(tmp_path)
        with pytest.raises(WordNotFoundError):
            store.update_mastery("missing", 50)
        with pytest.raises(WordNotFoundError):
            store.update_pronoun_mastery("missing", "past", "1s", 50)


class TestDailyWords:
    """Test daily practice selection."""

    def setup_method(self):
        self.now = datetime(2026, 1, 1, 12, 0, 0)

    def _fill(self, store, count):
        """Add count words, returned newest first"""
        words = []
        for i in range(count):
            word = store.add_word(f"מילה{i}", f"word {i}")
            word.created_at = self.now - timedelta(minutes=i)
            word.next_review_date = self.now
            words.append(word)
        return words

    def test_empty_bank(self, tmp_path):
        assert WordStore(tmp_path).daily_words(now=self.now) == {'review': [], 'weak': [], 'new': []}

    def test_caps(self, tmp_path):
        store = WordStore(tmp_path)
        words = self._fill(store, 20)

        daily = store.daily_words(now=self.now)
        # All due and all new: review takes the first 15, new gets the rest
        assert daily['review'] == words[:15]
        assert daily['new'] == words[15:]
        assert daily['weak'] == []

    def test_new_capped_at_seven(self, tmp_path):
        store = WordStore(tmp_path)
        words = self._fill(store, 30)

        daily = store.daily_words(now=self.now)
        assert len(daily['review']) == 15
        assert daily['new'] == words[15:22]

    def test_weak_capped_and_not_reused(self, tmp_path):
        store = WordStore(tmp_path)
        words = self._fill(store, 8)
        for word in words[:6]:
            word.error_count = 3

        daily = store.daily_words(now=self.now)
        assert daily['weak'] == words[:5]
        # The sixth weak word is still due, so it lands in review
        assert daily['review'] == words[5:]
        assert daily['new'] == []

        ids = [w.id for group in daily.values() for w in group]
        assert len(ids) == len(set(ids))

    def test_top_up_from_remaining(self, tmp_path):
        store = WordStore(tmp_path)
        words = self._fill(store, 10)
        for word in words:
            word.consecutive_correct = 1
            word.next_review_date = self.now + timedelta(days=1)

        daily = store.daily_words(now=self.now)
        # Nothing is weak, due or new, so leftovers fill review to 8, then new
        assert daily['review'] == words[:8]
        assert daily['new'] == words[8:]
        assert daily['weak'] == []

    def test_top_up_new_after_review(self, tmp_path):
        store = WordStore(tmp_path)
        words = self._fill(store, 12)
        for word in words:
            word.consecutive_correct = 1
            word.next_review_date = self.now + timedelta(days=1)

        daily = store.daily_words(now=self.now)
        assert daily['review'] == words[:8]
        assert daily['new'] == words[8:11]
