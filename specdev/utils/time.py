from __future__ import annotations

from datetime import datetime

ARTIFACT_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def artifact_timestamp(moment: datetime) -> str:
    return moment.strftime(ARTIFACT_TIMESTAMP_FORMAT)


def local_now() -> datetime:
    return datetime.now()
