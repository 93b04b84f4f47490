import unittest

from agents.dedup import dedup_agent, merge_offers
from models.offer import identity_key


def _offer(company, role, total, post_id, **extra):
    offer = {"company": company, "role": role, "total_offer": total, "post_id": post_id}
    offer.update(extra)
    return offer


class TestMergeOffers(unittest.TestCase):
    def test_appends_only_unseen_offers_in_order(self):
        existing = [_offer("A", "SWE", 200000, "p1"), _offer("B", "SWE", 150000, "p2")]
        new = [
            _offer("C", "SDE", 300000, "p0"),
            _offer("A", "SWE", 200000, "p1", location="NYC"),
            _offer("D", "SDE", None, "p0"),
        ]

        merged, added = merge_offers(existing, new)

        self.assertEqual(merged[:2], existing)
        self.assertEqual([o["company"] for o in added], ["C", "D"])
        self.assertEqual(len(merged), 4)

    def test_same_company_different_total_is_a_new_offer(self):
        existing = [_offer("A", "SWE", 200000, "p1")]
        merged, added = merge_offers(existing, [_offer("A", "SWE", 210000, "p0")])

        self.assertEqual(len(merged), 2)
        self.assertEqual(len(added), 1)

    def test_int_and_float_totals_share_a_key(self):
        existing = [_offer("A", "SWE", 200000, "p1")]
        _, added = merge_offers(existing, [_offer("A", "SWE", 200000.0, "p1")])
        self.assertEqual(added, [])

    def test_duplicates_within_one_batch_collapse(self):
        batch = [_offer("A", None, None, "p3"), _offer("A", None, None, "p3", yoe=2)]

        merged, added = merge_offers([], batch)

        self.assertEqual(len(merged), 1)
        self.assertIsNone(added[0].get("yoe"))

    def test_merge_is_idempotent(self):
        existing = [_offer("A", "SWE", 200000, "p1")]
        batch = [_offer("B", "SWE", 100000, "p0"), _offer("A", "SWE", 200000, "p1")]

        once, _ = merge_offers(existing, batch)
        twice, added_again = merge_offers(once, batch)

        self.assertEqual(once, twice)
        self.assertEqual(added_again, [])

    def test_merged_dataset_has_unique_identity_keys(self):
        existing = [_offer("A", "SWE", 1, "p1"), _offer("B", "SWE", 2, "p1")]
        batch = [_offer(c, "SWE", t, p) for c in "AB" for t in (1, 2) for p in ("p0", "p1")] * 2

        merged, _ = merge_offers(existing, batch)

        keys = [identity_key(o) for o in merged]
        self.assertEqual(len(keys), len(set(keys)))
        self.assertEqual(len(merged), 8)


class TestDedupAgent(unittest.TestCase):
    def test_reports_added_count(self):
        state = {
            "existing_offers": [_offer("A", "SWE", 200000, "p1")],
            "new_offers": [_offer("A", "SWE", 210000, "p0"), _offer("A", "SWE", 200000, "p1")],
        }

        result = dedup_agent(state)

        self.assertEqual(result["added_count"], 1)
        self.assertEqual(len(result["merged_offers"]), 2)


if __name__ == "__main__":
    unittest.main()
