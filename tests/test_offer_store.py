import json
import os
import tempfile
import unittest
from unittest.mock import patch

import httpx

from config.settings import Settings
from models.checkpoint import Checkpoint
from tools.file_store import LocalFileStore
from tools.gist_store import GistStore
from tools.offer_store import CheckpointStore, OfferStore, ingestion_tiers, read_published_offers
from tools.tiered_store import Tier, TieredStore

from fakes import MemoryStore


CHECKPOINT = ".leetoffer_metadata.json"
DATASET = "parsed_comps.json"


def _tiers(remote, local):
    return TieredStore([Tier(remote), Tier(local, required=True)])


class TestCheckpointStore(unittest.TestCase):
    def test_load_prefers_remote(self):
        remote = MemoryStore("gist", docs={CHECKPOINT: json.dumps({"lastPostId": "remote-id"})})
        local = MemoryStore("local", docs={CHECKPOINT: json.dumps({"lastPostId": "local-id"})})

        checkpoint = CheckpointStore(_tiers(remote, local), CHECKPOINT).load()

        self.assertEqual(checkpoint.last_post_id, "remote-id")

    def test_load_falls_back_to_local_when_remote_unreachable(self):
        remote = MemoryStore("gist", fail_reads=True)
        local = MemoryStore("local", docs={CHECKPOINT: json.dumps({"lastPostId": "local-id"})})

        checkpoint = CheckpointStore(_tiers(remote, local), CHECKPOINT).load()

        self.assertEqual(checkpoint.last_post_id, "local-id")

    def test_load_skips_remote_without_cursor(self):
        remote = MemoryStore("gist", docs={CHECKPOINT: json.dumps({"totalOffers": 3})})
        local = MemoryStore("local", docs={CHECKPOINT: json.dumps({"lastPostId": "local-id"})})

        checkpoint = CheckpointStore(_tiers(remote, local), CHECKPOINT).load()

        self.assertEqual(checkpoint.last_post_id, "local-id")

    def test_load_skips_remote_that_fails_validation(self):
        remote = MemoryStore(
            "gist",
            docs={CHECKPOINT: json.dumps({"lastPostId": "r1", "lastFetchTime": "yesterday"})},
        )
        local = MemoryStore("local", docs={CHECKPOINT: json.dumps({"lastPostId": "l1"})})

        checkpoint = CheckpointStore(_tiers(remote, local), CHECKPOINT).load()

        self.assertIsNotNone(checkpoint)
        self.assertEqual(checkpoint.last_post_id, "l1")

    def test_load_returns_none_when_no_checkpoint(self):
        store = CheckpointStore(_tiers(MemoryStore("gist"), MemoryStore("local")), CHECKPOINT)
        self.assertIsNone(store.load())

    def test_save_writes_local_even_if_remote_fails(self):
        remote = MemoryStore("gist", fail_writes=True)
        local = MemoryStore("local")
        store = CheckpointStore(_tiers(remote, local), CHECKPOINT)

        written = store.save(Checkpoint(last_post_id="p9", last_fetch_time=1, total_offers=4))

        self.assertEqual(written, ["local"])
        self.assertEqual(
            json.loads(local.docs[CHECKPOINT]),
            {"lastPostId": "p9", "lastFetchTime": 1, "totalOffers": 4},
        )


class TestOfferStore(unittest.TestCase):
    def test_empty_remote_dataset_falls_through_to_local(self):
        remote = MemoryStore("gist", docs={DATASET: "[]"})
        local = MemoryStore("local", docs={DATASET: json.dumps([{"company": "A"}])})

        offers = OfferStore(_tiers(remote, local), DATASET).load()

        self.assertEqual(offers, [{"company": "A"}])

    def test_load_returns_local_dataset_when_remote_unreachable(self):
        remote = MemoryStore("gist", fail_reads=True)
        local = MemoryStore("local", docs={DATASET: json.dumps([{"company": "B"}])})

        offers = OfferStore(_tiers(remote, local), DATASET).load()

        self.assertEqual(offers, [{"company": "B"}])

    def test_remote_list_without_offer_objects_falls_through_to_local(self):
        remote = MemoryStore("gist", docs={DATASET: "[1, 2]"})
        local = MemoryStore("local", docs={DATASET: json.dumps([{"company": "A", "post_id": "x"}])})

        offers = OfferStore(_tiers(remote, local), DATASET).load()

        self.assertEqual(offers, [{"company": "A", "post_id": "x"}])

    def test_malformed_gist_payload_falls_through_to_local(self):
        remote = GistStore(
            "abc",
            "t",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])),
        )
        local = MemoryStore("local", docs={DATASET: json.dumps([{"company": "B"}])})

        offers = OfferStore(_tiers(remote, local), DATASET).load()

        self.assertEqual(offers, [{"company": "B"}])

    def test_undecodable_local_file_means_no_data(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, DATASET), "wb") as f:
                f.write(b"\xff\xfe[garbage")
            remote = MemoryStore("gist", fail_reads=True)

            offers = OfferStore(_tiers(remote, LocalFileStore(tmp)), DATASET).load()

        self.assertEqual(offers, [])

    def test_load_defaults_to_empty_list(self):
        store = OfferStore(_tiers(MemoryStore("gist"), MemoryStore("local")), DATASET)
        self.assertEqual(store.load(), [])


class TestWithoutRemoteCredentials(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.requests = []

        def handler(request):
            self.requests.append(request)
            return httpx.Response(500)

        self.remote = GistStore("", "", transport=httpx.MockTransport(handler))
        self.local = LocalFileStore(self.tmp.name)

    def test_load_and_save_stay_local(self):
        self.local.write(CHECKPOINT, json.dumps({"lastPostId": "p1"}))
        store = CheckpointStore(ingestion_tiers(self.local, self.remote), CHECKPOINT)

        self.assertEqual(store.load().last_post_id, "p1")
        written = store.save(Checkpoint(last_post_id="p0", last_fetch_time=2, total_offers=2))

        self.assertEqual(written, ["local"])
        self.assertEqual(json.loads(self.local.read(CHECKPOINT))["lastPostId"], "p0")
        self.assertEqual(self.requests, [])


class TestReadPublishedOffers(unittest.TestCase):
    def test_missing_documents_mean_no_data(self):
        with tempfile.TemporaryDirectory() as tmp:
            settings = Settings(gist_id="", github_token="", output_dir=tmp, ephemeral_fs=False)
            self.assertEqual(read_published_offers(settings), [])

    def test_reads_local_file_first(self):
        with tempfile.TemporaryDirectory() as tmp:
            LocalFileStore(tmp).write(DATASET, json.dumps([{"company": "C"}]))
            settings = Settings(gist_id="abc", github_token="t", output_dir=tmp, ephemeral_fs=False)

            with patch("tools.gist_store.GistStore.read") as remote_read:
                offers = read_published_offers(settings)

            self.assertEqual(offers, [{"company": "C"}])
            remote_read.assert_not_called()


if __name__ == "__main__":
    unittest.main()
