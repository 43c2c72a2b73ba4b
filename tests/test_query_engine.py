import unittest

from acc_transcript_backend.errors import (
    AccessDenied,
    ErrorKind,
    NotFound,
)
from acc_transcript_backend.models.user import CallerIdentity
from acc_transcript_backend.services.query_engine import (
    GET_TRANSCRIPT_DETAILS,
    LIST_RECENT_CALLS,
    SEARCH_TRANSCRIPTS,
    GetTranscriptDetailsArgs,
    ListRecentCallsArgs,
    QueryEngine,
    SearchTranscriptsArgs,
    normalize_limit,
)
from acc_transcript_backend.transcript_store import TranscriptStore

from conftest import ADMIN, CLIENT_X_ONLY, NO_CLIENTS, SARAH

JOHN = CallerIdentity(email="john@accfinance.com", allowed_clients=frozenset({"Client X", "Client Y"}))


def ids(transcripts):
    return [t.id for t in transcripts]


def make_store(count: int) -> TranscriptStore:
    return TranscriptStore.from_records([
        {
            "id": f"transcript-{i:03d}",
            "clientName": "Client X" if i % 2 else "Client Y",
            "date": "2024-10-15",
            "content": f"Call number {i}",
        }
        for i in range(1, count + 1)
    ])


class TestVisibleSet(unittest.TestCase):

    def setUp(self):
        self.store = TranscriptStore.default()
        self.engine = QueryEngine(self.store)

    def test_wildcard_sees_whole_store(self):
        self.assertEqual(ids(self.engine.visible_set(ADMIN)), ids(self.store))

    def test_scoped_identity_sees_subset_in_store_order(self):
        visible = self.engine.visible_set(CLIENT_X_ONLY)
        self.assertEqual(ids(visible), ["transcript-001", "transcript-003"])
        self.assertTrue(set(ids(visible)) <= set(ids(self.store)))

    def test_scope_matching_every_client_is_still_not_wildcard(self):
        # Equal to the full store only because every client happens to be listed
        self.assertEqual(ids(self.engine.visible_set(JOHN)), ids(self.store))
        self.assertFalse(JOHN.has_wildcard)

    def test_unmatched_scope_sees_nothing(self):
        self.assertEqual(self.engine.visible_set(SARAH), [])
        self.assertEqual(self.engine.visible_set(NO_CLIENTS), [])


class TestSearchTranscripts(unittest.TestCase):

    def setUp(self):
        self.engine = QueryEngine(TranscriptStore.default())

    def search(self, identity, **kwargs):
        return ids(self.engine.search_transcripts(identity, SearchTranscriptsArgs(**kwargs)))

    def test_search_is_scoped_to_visible_clients(self):
        self.assertEqual(self.search(CLIENT_X_ONLY, query="forecasting"), ["transcript-001", "transcript-003"])

    def test_search_is_case_insensitive_substring(self):
        self.assertEqual(self.search(ADMIN, query="CASH FLOW"), ["transcript-002"])
        self.assertEqual(self.search(ADMIN, query="forecast"), ["transcript-001", "transcript-003"])

    def test_search_matches_content_only(self):
        # "Mike" appears in participants and chunks but not in the content body
        self.assertEqual(self.search(ADMIN, query="Mike"), [])

    def test_empty_query_matches_everything_visible(self):
        self.assertEqual(self.search(ADMIN, query=""), ["transcript-001", "transcript-002", "transcript-003"])
        self.assertEqual(self.search(CLIENT_X_ONLY, query=""), ["transcript-001", "transcript-003"])

    def test_client_filter_narrows_results(self):
        self.assertEqual(self.search(ADMIN, query="", client_filter="Client Y"), ["transcript-002"])
        self.assertEqual(self.search(JOHN, query="forecasting", client_filter="Client Y"), [])

    def test_client_filter_outside_scope_is_denied(self):
        with self.assertRaises(AccessDenied) as ctx:
            self.search(CLIENT_X_ONLY, query="forecasting", client_filter="Client Y")
        self.assertIn("Client Y", ctx.exception.message)

    def test_client_filter_denied_even_when_nothing_matches(self):
        with self.assertRaises(AccessDenied):
            self.search(SARAH, query="no such words", client_filter="Client X")

    def test_client_filter_is_case_sensitive(self):
        with self.assertRaises(AccessDenied):
            self.search(CLIENT_X_ONLY, query="", client_filter="client x")

    def test_date_range_is_accepted_and_ignored(self):
        without_dates = self.search(ADMIN, query="")
        with_dates = self.search(ADMIN, query="", date_from="2024-10-21", date_to="2024-10-21")
        self.assertEqual(with_dates, without_dates)

    def test_results_never_leave_visible_set(self):
        visible = set(ids(self.engine.visible_set(CLIENT_X_ONLY)))
        for query in ["", "a", "forecast", "cash", "Q4", "zzz"]:
            self.assertTrue(set(self.search(CLIENT_X_ONLY, query=query)) <= visible)


class TestGetTranscriptDetails(unittest.TestCase):

    def setUp(self):
        self.engine = QueryEngine(TranscriptStore.default())

    def test_returns_visible_transcript(self):
        transcript = self.engine.get_transcript_details(
            CLIENT_X_ONLY, GetTranscriptDetailsArgs(transcript_id="transcript-003")
        )
        self.assertEqual(transcript.client_name, "Client X")
        self.assertEqual(transcript.participants[-1], "Tom (Client X CFO)")

    def test_existing_but_forbidden_is_access_denied(self):
        with self.assertRaises(AccessDenied):
            self.engine.get_transcript_details(
                CLIENT_X_ONLY, GetTranscriptDetailsArgs(transcript_id="transcript-002")
            )

    def test_missing_id_is_not_found_for_every_identity(self):
        for identity in [ADMIN, CLIENT_X_ONLY, SARAH, NO_CLIENTS]:
            with self.assertRaises(NotFound):
                self.engine.get_transcript_details(
                    identity, GetTranscriptDetailsArgs(transcript_id="does-not-exist")
                )

    def test_lookup_is_exact(self):
        with self.assertRaises(NotFound):
            self.engine.get_transcript_details(ADMIN, GetTranscriptDetailsArgs(transcript_id="TRANSCRIPT-001"))


class TestListRecentCalls(unittest.TestCase):

    def test_store_order_is_recency_order(self):
        engine = QueryEngine(TranscriptStore.default())
        recent = engine.list_recent_calls(ADMIN, ListRecentCallsArgs(limit=2))
        self.assertEqual(ids(recent), ["transcript-001", "transcript-002"])

    def test_default_limit_is_ten(self):
        engine = QueryEngine(make_store(30))
        self.assertEqual(len(engine.list_recent_calls(ADMIN, ListRecentCallsArgs())), 10)

    def test_limit_is_clamped(self):
        engine = QueryEngine(make_store(150))
        cases = {500: 100, 100: 100, 1: 1, 0: 10, -5: 10}
        for limit, expected in cases.items():
            recent = engine.list_recent_calls(ADMIN, ListRecentCallsArgs(limit=limit))
            self.assertEqual(len(recent), expected, f"limit={limit}")

    def test_result_length_capped_by_visible_set(self):
        engine = QueryEngine(make_store(30))
        recent = engine.list_recent_calls(CLIENT_X_ONLY, ListRecentCallsArgs(limit=100))
        self.assertEqual(len(recent), 15)
        self.assertTrue(all(t.client_name == "Client X" for t in recent))

    def test_normalize_limit(self):
        self.assertEqual(normalize_limit(None), 10)
        self.assertEqual(normalize_limit(True), 10)
        self.assertEqual(normalize_limit("abc"), 10)
        self.assertEqual(normalize_limit("5"), 5)
        self.assertEqual(normalize_limit(2.9), 2)
        self.assertEqual(normalize_limit(0.5), 10)
        self.assertEqual(normalize_limit(float("nan")), 10)
        self.assertEqual(normalize_limit(float("inf")), 100)
        self.assertEqual(normalize_limit([3]), 10)
        self.assertEqual(normalize_limit(1000), 100)


class TestExecute(unittest.TestCase):

    def setUp(self):
        self.store = TranscriptStore.default()
        self.engine = QueryEngine(self.store)

    def test_search_scenario(self):
        response = self.engine.execute(SEARCH_TRANSCRIPTS, {"query": "forecasting"}, CLIENT_X_ONLY)
        self.assertTrue(response.ok)
        self.assertEqual(ids(response.results), ["transcript-001", "transcript-003"])

    def test_details_scenario(self):
        response = self.engine.execute(GET_TRANSCRIPT_DETAILS, {"transcriptId": "transcript-002"}, CLIENT_X_ONLY)
        self.assertFalse(response.ok)
        self.assertEqual(response.kind, ErrorKind.ACCESS_DENIED)

        response = self.engine.execute(GET_TRANSCRIPT_DETAILS, {"transcriptId": "transcript-001"}, CLIENT_X_ONLY)
        self.assertEqual(response.to_wire()["result"]["clientName"], "Client X")

    def test_list_scenario(self):
        response = self.engine.execute(LIST_RECENT_CALLS, {"limit": 2}, ADMIN)
        self.assertEqual(ids(response.results), ["transcript-001", "transcript-002"])

    def test_wire_arguments_use_camel_case(self):
        response = self.engine.execute(
            SEARCH_TRANSCRIPTS, {"query": "", "clientFilter": "Client Y"}, ADMIN
        )
        self.assertEqual(ids(response.results), ["transcript-002"])

    def test_missing_identity_is_unauthenticated(self):
        for operation in [SEARCH_TRANSCRIPTS, GET_TRANSCRIPT_DETAILS, LIST_RECENT_CALLS, "bogus"]:
            response = self.engine.execute(operation, {}, None)
            self.assertEqual(response.kind, ErrorKind.UNAUTHENTICATED)

    def test_unknown_operation(self):
        response = self.engine.execute("deleteTranscript", {}, ADMIN)
        self.assertEqual(response.kind, ErrorKind.UNKNOWN_OPERATION)
        self.assertIn("deleteTranscript", response.message)

    def test_missing_required_arguments_are_invalid(self):
        self.assertEqual(self.engine.execute(SEARCH_TRANSCRIPTS, {}, ADMIN).kind, ErrorKind.INVALID_ARGUMENT)
        self.assertEqual(self.engine.execute(GET_TRANSCRIPT_DETAILS, None, ADMIN).kind, ErrorKind.INVALID_ARGUMENT)

    def test_wrongly_typed_arguments_are_invalid(self):
        self.assertEqual(
            self.engine.execute(SEARCH_TRANSCRIPTS, {"query": 42}, ADMIN).kind,
            ErrorKind.INVALID_ARGUMENT,
        )
        self.assertEqual(
            self.engine.execute(SEARCH_TRANSCRIPTS, ["forecasting"], ADMIN).kind,
            ErrorKind.INVALID_ARGUMENT,
        )

    def test_list_accepts_missing_arguments(self):
        response = self.engine.execute(LIST_RECENT_CALLS, None, ADMIN)
        self.assertEqual(len(response.results), 3)
        response = self.engine.execute(LIST_RECENT_CALLS, {"limit": "lots"}, ADMIN)
        self.assertEqual(len(response.results), 3)

    def test_execute_never_raises(self):
        weird_arguments = [None, {}, [], "text", 7, {"query": None}, {"transcriptId": {}}, {"limit": object()}]
        for operation in [SEARCH_TRANSCRIPTS, GET_TRANSCRIPT_DETAILS, LIST_RECENT_CALLS, "", "x"]:
            for arguments in weird_arguments:
                for identity in [ADMIN, SARAH, None]:
                    response = self.engine.execute(operation, arguments, identity)
                    self.assertIsNotNone(response.ok)

    def test_repeated_calls_are_identical_and_store_is_untouched(self):
        before = [t.to_wire() for t in self.store]
        first = self.engine.execute(SEARCH_TRANSCRIPTS, {"query": "forecast"}, JOHN).to_wire()
        second = self.engine.execute(SEARCH_TRANSCRIPTS, {"query": "forecast"}, JOHN).to_wire()
        self.assertEqual(first, second)
        self.assertEqual([t.to_wire() for t in self.store], before)


if __name__ == "__main__":
    unittest.main()
