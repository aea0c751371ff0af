from ai_cli.core import build_threads

from .test_base import BaseHistoryTest, make_request, make_response


class TestHistoryStore(BaseHistoryTest):
    def test_directory_created_lazily(self):
        """The history directory only appears on first write"""
        self.assertFalse(self.history_dir.exists())
        self.store.save_last_id("resp_1")
        self.assertTrue(self.history_dir.is_dir())

    def test_response_round_trip(self):
        response = make_response("resp_abc", text="Grüße ✓")
        self.store.save_response("resp_abc", response)
        self.assertEqual(self.store.load_response("resp_abc"), response)

    def test_request_round_trip(self):
        request = make_request("What is 2+2?")
        self.store.save_request("resp_abc", request)
        self.assertEqual(self.store.load_request("resp_abc"), request)
        self.assertTrue((self.history_dir / "req_resp_abc.json").exists())

    def test_save_overwrites(self):
        self.store.save_response("resp_abc", make_response("resp_abc", status="failed"))
        self.store.save_response("resp_abc", make_response("resp_abc"))
        self.assertEqual(self.store.load_response("resp_abc")["status"], "completed")
        self.assertEqual(list(self.history_dir.glob("*.tmp")), [])

    def test_load_missing_returns_none(self):
        self.assertIsNone(self.store.load_response("resp_missing"))
        self.assertIsNone(self.store.load_request("resp_missing"))

    def test_corrupt_record_treated_as_missing(self):
        self.history_dir.mkdir(parents=True)
        (self.history_dir / "resp_bad.json").write_text('{"id": "resp_b', encoding="utf-8")
        (self.history_dir / "resp_list.json").write_text("[1, 2]", encoding="utf-8")
        self.assertIsNone(self.store.load_response("resp_bad"))
        self.assertIsNone(self.store.load_response("resp_list"))

    def test_record_without_id_treated_as_missing(self):
        """A JSON object lacking a string id is damaged, not a record"""
        self.history_dir.mkdir(parents=True)
        (self.history_dir / "resp_noid.json").write_text('{"status": "completed"}', encoding="utf-8")
        (self.history_dir / "resp_intid.json").write_text('{"id": 7}', encoding="utf-8")
        self.assertIsNone(self.store.load_response("resp_noid"))
        self.assertIsNone(self.store.load_response("resp_intid"))

    def test_load_responses_skips_records_without_id(self):
        self.store.save_response("resp_a", make_response("resp_a"))
        (self.history_dir / "resp_bad.json").write_text('{"status": "completed"}', encoding="utf-8")
        responses = self.store.load_responses()
        self.assertEqual([r["id"] for r in responses], ["resp_a"])
        self.assertEqual([[r["id"] for r in t] for t in build_threads(responses)], [["resp_a"]])

    def test_remove_deletes_both_artifacts(self):
        self.store.save_request("resp_abc", make_request())
        self.store.save_response("resp_abc", make_response("resp_abc"))
        self.store.remove("resp_abc")
        self.assertIsNone(self.store.load_response("resp_abc"))
        self.assertIsNone(self.store.load_request("resp_abc"))

    def test_remove_is_idempotent(self):
        self.store.remove("resp_never_saved")
        self.store.save_response("resp_abc", make_response("resp_abc"))
        self.store.remove("resp_abc")
        self.store.remove("resp_abc")
        self.assertIsNone(self.store.load_response("resp_abc"))

    def test_list_ids_only_returns_responses(self):
        self.assertEqual(self.store.list_ids(), set())
        self.store.save_response("resp_a", make_response("resp_a"))
        self.store.save_response("resp_b", make_response("resp_b"))
        self.store.save_request("resp_a", make_request())
        self.store.save_request("resp_pending", make_request())
        self.store.save_last_id("resp_b")
        self.assertEqual(self.store.list_ids(), {"resp_a", "resp_b"})

    def test_load_responses_skips_corrupt(self):
        self.store.save_response("resp_a", make_response("resp_a"))
        (self.history_dir / "resp_bad.json").write_text("not json", encoding="utf-8")
        responses = self.store.load_responses()
        self.assertEqual([r["id"] for r in responses], ["resp_a"])

    def test_last_id_pointer(self):
        self.assertIsNone(self.store.load_last_id())
        self.store.save_last_id("resp_first")
        self.store.save_last_id("resp_second")
        self.assertEqual(self.store.load_last_id(), "resp_second")

    def test_blank_last_id_is_none(self):
        self.history_dir.mkdir(parents=True)
        (self.history_dir / "last_response_id.txt").write_text("  \n", encoding="utf-8")
        self.assertIsNone(self.store.load_last_id())
