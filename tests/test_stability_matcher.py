import unittest

from dictation.sync.StabilityMatcher import stable_prefix, tokenize


class TestTokenize(unittest.TestCase):

    def test_splits_on_whitespace_runs(self):
        self.assertEqual(tokenize("  hello \t world\n again "), ["hello", "world", "again"])

    def test_empty_and_blank_give_no_tokens(self):
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize("   \n"), [])


class TestStablePrefix(unittest.TestCase):

    def test_stops_at_first_mismatch(self):
        self.assertEqual(stable_prefix("the quick fox", "the quick brown"), ["the", "quick"])

    def test_extension_returns_shorter_sequence(self):
        self.assertEqual(stable_prefix("hello world", "hello"), ["hello"])
        self.assertEqual(stable_prefix("hello", "hello world"), ["hello"])

    def test_empty_input_gives_empty_prefix(self):
        self.assertEqual(stable_prefix("", "anything"), [])
        self.assertEqual(stable_prefix("anything", ""), [])

    def test_no_shared_leading_word(self):
        self.assertEqual(stable_prefix("a quick fox", "the quick fox"), [])

    def test_does_not_skip_over_mismatch(self):
        """Words matching after a mismatch are not stable."""
        self.assertEqual(stable_prefix("one two three four", "one 2 three four"), ["one"])

    def test_comparison_ignores_case(self):
        self.assertEqual(stable_prefix("Hello World foo", "hello world bar"), ["Hello", "World"])

    def test_result_uses_current_spelling(self):
        self.assertEqual(stable_prefix("HELLO there", "hello there"), ["HELLO", "there"])

    def test_punctuation_is_part_of_word(self):
        self.assertEqual(stable_prefix("hello world.", "hello world"), ["hello"])

    def test_whitespace_differences_do_not_matter(self):
        self.assertEqual(stable_prefix("  a   b c", "a b\tc d"), ["a", "b", "c"])

    def test_identical_hypotheses_are_fully_stable(self):
        self.assertEqual(stable_prefix("same words here", "same words here"), ["same", "words", "here"])

    def test_is_deterministic(self):
        first = stable_prefix("the quick fox", "the quick brown")
        second = stable_prefix("the quick fox", "the quick brown")
        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
