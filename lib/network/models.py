"""
Network Library Data Models

Mock entries are pydantic models so they can be validated straight from the
JSON carried by the ``mapper`` channel. Requests are plain dataclasses built
per call.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter

from .constants import HttpMethod


class NetworkMockData(BaseModel):
    """Static mapping from an API path to a local JSON fixture, dood!

    Attributes:
        api: Exact URL path to match (e.g. "/v1/users"), query not included
        filename: Fixture file name without extension
        root: Directory holding the fixture, None means the client's default root
    """

    model_config = ConfigDict(frozen=True)

    api: str
    filename: str
    root: Optional[str] = None


NetworkMockDataList = TypeAdapter(List[NetworkMockData])


@dataclass
class NetworkRequest:
    """Single HTTP request built by the executor for one call"""

    method: HttpMethod
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
