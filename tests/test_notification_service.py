# tests/test_notification_service.py
from unittest.mock import patch

from kombu.exceptions import OperationalError

from canteen.services.notification_service import NotificationService, send_order_notification_task

TASK = "canteen.services.notification_service.send_order_notification_task"


def test_disabled_service_is_a_noop():
    with patch(TASK) as task:
        NotificationService(enabled=False).notify("Title", "Body", "o1", user_id="u1")

    task.delay.assert_not_called()


def test_notification_is_queued():
    with patch(TASK) as task:
        NotificationService(enabled=True).notify("Title", "Body", "o1", user_id="u1")

    task.delay.assert_called_once_with("u1", "Title", "Body", "o1")


def test_broker_failure_does_not_propagate():
    with patch(TASK) as task:
        task.delay.side_effect = OperationalError("broker down")
        NotificationService(enabled=True).notify("Title", "Body", "o1")

    task.delay.assert_called_once()


def test_task_reports_sent():
    result = send_order_notification_task("u1", "Order Ready for Pickup!", "Come and collect it.", "o1")

    assert result == {"user_id": "u1", "tag": "o1", "status": "sent"}
