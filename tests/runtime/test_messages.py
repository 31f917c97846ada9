import unittest

from runtime.messages import completion_message, format_time, phase_label


class RuntimeMessagesTests(unittest.TestCase):
    def test_format_time_uses_unpadded_minutes(self) -> None:
        self.assertEqual("25:00", format_time(1500))
        self.assertEqual("4:59", format_time(299))
        self.assertEqual("0:01", format_time(1))
        self.assertEqual("0:00", format_time(-3))

    def test_phase_labels(self) -> None:
        self.assertEqual("Work", phase_label("work"))
        self.assertEqual("Short Break", phase_label("shortBreak"))
        self.assertEqual("Long Break", phase_label("longBreak"))

    def test_completion_messages(self) -> None:
        self.assertEqual("Work session completed! Time for a break.", completion_message("work", False))
        self.assertEqual("Break is over! Time to work.", completion_message("shortBreak", False))
        self.assertEqual("Break is over! Time to work.", completion_message("longBreak", False))
        self.assertIsNone(completion_message("work", True))


if __name__ == "__main__":
    unittest.main()
