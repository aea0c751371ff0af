from ai_cli.core import AmbiguousIdError, IdNotFoundError, resolve_id

from .test_base import BaseHistoryTest, make_response

FULL_ID = "resp_68f1c0a2b3d4e5f60718293a4b5c6d7e"
OTHER_ID = "resp_68f1c0a2b3d4e5f60718293a4b5c0000"


class TestResolveId(BaseHistoryTest):
    def setUp(self):
        super().setUp()
        for response_id in (FULL_ID, OTHER_ID):
            self.store.save_response(response_id, make_response(response_id))

    def test_every_unique_suffix_resolves(self):
        """Any suffix not shared with another id expands to the full id"""
        for length in range(1, len(FULL_ID) + 1):
            suffix = FULL_ID[-length:]
            if OTHER_ID.endswith(suffix):
                continue
            self.assertEqual(resolve_id(suffix, self.store), FULL_ID, suffix)

    def test_full_id_resolves_to_itself(self):
        self.assertEqual(resolve_id(FULL_ID, self.store), FULL_ID)

    def test_shared_suffix_is_ambiguous(self):
        self.store.save_response("resp_zzz6d7e", make_response("resp_zzz6d7e"))
        with self.assertRaises(AmbiguousIdError) as ctx:
            resolve_id("6d7e", self.store)
        self.assertEqual(ctx.exception.matches, sorted([FULL_ID, "resp_zzz6d7e"]))

    def test_short_unknown_id_not_found(self):
        with self.assertRaises(IdNotFoundError):
            resolve_id("ffff", self.store)

    def test_empty_id_not_found(self):
        with self.assertRaises(IdNotFoundError):
            resolve_id("  ", self.store)

    def test_long_unknown_id_passed_through(self):
        """Full-length ids may only exist remotely"""
        remote_id = "resp_0123456789abcdef"
        self.assertEqual(resolve_id(remote_id, self.store), remote_id)

    def test_threshold_is_configurable(self):
        self.assertEqual(resolve_id("abcd", self.store, full_length=4), "abcd")
        with self.assertRaises(IdNotFoundError):
            resolve_id("abc", self.store, full_length=4)
