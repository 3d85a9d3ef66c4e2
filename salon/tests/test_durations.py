"""
Tests for scheduling/durations.py
"""
import unittest

from salon.scheduling.durations import MissingServicePolicy, aggregate_duration
from salon.scheduling.exceptions import UnknownServiceError


class Service:
    def __init__(self, duration_minutes):
        self.duration_minutes = duration_minutes


class TestDurationAggregation(unittest.TestCase):

    def setUp(self):
        self.lookup = {1: Service(30), 2: Service(45), 3: {"duration_minutes": 60}, 4: 15}

    def test_empty_selection_is_zero(self):
        self.assertEqual(aggregate_duration([], self.lookup), 0)

    def test_sums_selected_services(self):
        self.assertEqual(aggregate_duration([1, 2], self.lookup), 75)

    def test_accepts_dicts_and_plain_minutes(self):
        self.assertEqual(aggregate_duration([3, 4], self.lookup), 75)

    def test_missing_id_counts_as_zero_when_ignored(self):
        with self.assertLogs("salon.scheduling.durations", level="WARNING"):
            self.assertEqual(aggregate_duration([1, 99], self.lookup), 30)

    def test_missing_id_rejected_when_policy_rejects(self):
        with self.assertRaises(UnknownServiceError) as ctx:
            aggregate_duration([1, 99, 98], self.lookup, policy=MissingServicePolicy.REJECT)
        self.assertEqual(ctx.exception.service_ids, [99, 98])

    def test_policy_accepts_plain_strings(self):
        with self.assertRaises(UnknownServiceError):
            aggregate_duration([99], self.lookup, policy="reject")
