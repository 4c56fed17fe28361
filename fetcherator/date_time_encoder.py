import json
from datetime import date, datetime, timedelta

_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that also handles datetime, date and timedelta values."""

    def default(self, o):
        if isinstance(o, datetime):
            return o.strftime(_DATETIME_FORMAT)
        if isinstance(o, date):
            return o.isoformat()
        if isinstance(o, timedelta):
            return o.total_seconds()
        return super().default(o)
