"""
Tests for scheduling/slots.py
"""
import unittest
from datetime import date, time

from salon.scheduling.hours import FRIDAY, MONDAY, SATURDAY, SUNDAY, THURSDAY
from salon.scheduling.slots import generate_slot_minutes, generate_slots, is_on_slot_grid


class TestSlots(unittest.TestCase):

    def test_friday_has_twelve_slots(self):
        slots = generate_slots(FRIDAY)
        self.assertEqual(len(slots), 12)
        self.assertEqual(slots[0], time(8, 0))
        self.assertEqual(slots[-1], time(13, 30))

    def test_weekdays_have_twenty_four_slots(self):
        for weekday in range(SUNDAY, THURSDAY + 1):
            slots = generate_slots(weekday)
            self.assertEqual(len(slots), 24)
            self.assertEqual(slots[0], time(8, 0))
            self.assertEqual(slots[-1], time(19, 30))

    def test_saturday_has_no_slots(self):
        self.assertEqual(generate_slots(SATURDAY), [])

    def test_never_starts_at_closing_time(self):
        self.assertNotIn(20 * 60, generate_slot_minutes(MONDAY))
        self.assertNotIn(14 * 60, generate_slot_minutes(FRIDAY))

    def test_slots_are_ascending_and_evenly_spaced(self):
        minutes = generate_slot_minutes(MONDAY)
        self.assertEqual(minutes, sorted(minutes))
        self.assertEqual({b - a for a, b in zip(minutes, minutes[1:])}, {30})

    def test_is_on_slot_grid(self):
        friday = date(2029, 10, 19)
        self.assertTrue(is_on_slot_grid(friday, time(13, 30)))
        self.assertFalse(is_on_slot_grid(friday, time(14, 0)))
        self.assertFalse(is_on_slot_grid(friday, time(9, 15)))
        self.assertFalse(is_on_slot_grid(date(2029, 10, 20), time(10, 0)))
