import json
import logging

from userpurge.core.logging import JsonFormatter


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        "userpurge.cascade", logging.INFO, __file__, 1, "Swept %s", ("posts",), None
    )
    record.user_id = "user-u"
    record.deleted = 2

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "Swept posts"
    assert data["level"] == "INFO"
    assert data["name"] == "userpurge.cascade"
    assert data["user_id"] == "user-u"
    assert data["deleted"] == 2
    assert "args" not in data
    assert "msg" not in data
